from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class VendorConfig(BaseModel):
    """Everything the vendor client needs, resolved once at startup."""
    access_token: str
    location_id: str
    owner_email: str = ""
    api_base_url: str = "https://connect.squareupsandbox.com"
    api_version: str = "2025-09-24"

    model_config = {"frozen": True}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    # Square, sandbox by default
    SQUARE_ACCESS_TOKEN: str = ""
    SQUARE_LOCATION_ID: str = ""
    SQUARE_API_BASE: str = "https://connect.squareupsandbox.com"
    SQUARE_VERSION: str = "2025-09-24"
    CURRENCY: str = "USD"

    # Invoice wording
    INVOICE_TITLE: str = "The Cravery - Catering Estimate (Sandbox)"
    INVOICE_DESCRIPTION: str = "This is a sandbox estimate generated automatically."
    INVOICE_DUE_DAYS: int = 7

    # Owner notification is skipped unless both are set
    OWNER_EMAIL: str = ""
    FORMSPREE_OWNER_ENDPOINT: str = ""
    NOTIFY_SENDER_NAME: str = "Cravery Quotes Bot"

    HTTP_TIMEOUT_SECONDS: float = 30.0
    REQUEST_DEADLINE_SECONDS: float = 60.0
    LOG_LEVEL: str = "INFO"

    def vendor_config(self) -> VendorConfig:
        return VendorConfig(
            access_token=self.SQUARE_ACCESS_TOKEN,
            location_id=self.SQUARE_LOCATION_ID,
            owner_email=self.OWNER_EMAIL,
            api_base_url=self.SQUARE_API_BASE.rstrip("/"),
            api_version=self.SQUARE_VERSION,
        )


settings = Settings()
