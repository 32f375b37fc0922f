from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Optional

from .config import Settings, settings as default_settings
from .quote_orchestrator import QuoteOrchestrator
from .routers import quotes

logger = logging.getLogger("catering_quotes")


async def http_error_handler(request, exc: StarletteHTTPException):
    """Every HTTP error goes out as {"error": message}."""
    if exc.status_code == 405:
        message = "Method not allowed"
    else:
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse({"error": message}, status_code=exc.status_code, headers=exc.headers)


async def invalid_body_handler(request, exc: RequestValidationError):
    logger.info(f"Rejected quote body: {exc.errors()}")
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


def create_app(app_settings: Optional[Settings] = None,
               orchestrator: Optional[QuoteOrchestrator] = None) -> FastAPI:
    """
    Build the API. Configuration is resolved here, once, and handed to the
    orchestrator; request handlers never read the environment.
    """
    app_settings = app_settings or default_settings
    logging.basicConfig(
        level=app_settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not app_settings.SQUARE_ACCESS_TOKEN or not app_settings.SQUARE_LOCATION_ID:
        logger.warning("SQUARE_ACCESS_TOKEN / SQUARE_LOCATION_ID not set; quote submission will fail")

    app = FastAPI(
        title="Catering Quotes",
        description="Catering quote pricing and Square invoicing",
        version="1.0.0",
    )
    app.state.settings = app_settings
    app.state.orchestrator = orchestrator or QuoteOrchestrator.from_settings(app_settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, invalid_body_handler)

    app.include_router(quotes.router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok", "app": "catering-quotes"}

    return app


app = create_app()
