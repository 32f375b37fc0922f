from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional

from .models import PricedEstimate


class QuoteSubmission(BaseModel):
    """Raw quote form. Values arrive as numbers or strings and are coerced later."""
    model_config = ConfigDict(extra="ignore")

    name: Any = None
    email: Any = None
    event_address: Optional[str] = None
    miles: Any = None
    package_rate: Any = None
    guests: Any = None


class QuoteTotals(BaseModel):
    items: float
    tax: float
    travel: float
    tip: float
    total_before_tip: float = Field(serialization_alias="totalBeforeTip")
    final_total: float = Field(serialization_alias="finalTotal")

    @classmethod
    def from_estimate(cls, estimate: PricedEstimate) -> "QuoteTotals":
        return cls(**estimate.model_dump())


class QuoteResponse(BaseModel):
    success: bool = True
    message: str = "Sandbox invoice created & published"
    invoice_id: str
    invoice_url: Optional[str] = None
    totals: QuoteTotals


class EstimateResponse(BaseModel):
    success: bool = True
    totals: QuoteTotals


class ErrorResponse(BaseModel):
    error: str
