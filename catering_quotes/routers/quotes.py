"""
Quote endpoints.

POST /api/square-quote    price the quote, then customer → order → invoice → publish
POST /api/quote-estimate  price only, no Square calls
"""

import logging
import math
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from ..exceptions import UpstreamError, ValidationError
from ..models import QuoteRequest
from ..pricing_engine import PricingEngine
from ..quote_orchestrator import QuoteOrchestrator
from ..schemas import EstimateResponse, ErrorResponse, QuoteResponse, QuoteSubmission, QuoteTotals

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quotes"])

# Square money amounts are int64 cents; anything near that is not a catering quote.
MAX_QUOTE_TOTAL = 1_000_000_000.0

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    405: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_orchestrator(request: Request) -> QuoteOrchestrator:
    return request.app.state.orchestrator


def get_pricing_engine() -> PricingEngine:
    return PricingEngine()


def parse_submission(submission: Optional[QuoteSubmission]) -> QuoteRequest:
    """
    Coerce the raw form into a QuoteRequest.

    Raises ValidationError when name/email are missing, when package_rate
    or guests are negative, or when the priced total is not a finite amount
    under MAX_QUOTE_TOTAL. Negative miles are clamped, not rejected.
    """
    data = submission or QuoteSubmission()
    quote = PricingEngine.build_request(
        name=data.name,
        email=data.email,
        event_address=data.event_address,
        miles=data.miles,
        package_rate=data.package_rate,
        guests=data.guests,
    )
    if not quote.name or not quote.email:
        raise ValidationError("Missing name or email")
    if quote.package_rate < 0 or quote.guest_count < 0:
        raise ValidationError("package_rate and guests must not be negative")

    final_total = PricingEngine().price(quote).final_total
    if not math.isfinite(final_total) or final_total > MAX_QUOTE_TOTAL:
        raise ValidationError(f"Quote total must be below ${MAX_QUOTE_TOTAL:,.0f}")
    return quote


@router.post("/square-quote", response_model=QuoteResponse, responses=_ERROR_RESPONSES)
def submit_quote(
    submission: Optional[QuoteSubmission] = Body(None),
    orchestrator: QuoteOrchestrator = Depends(get_orchestrator),
):
    """
    Recompute totals server-side (authoritative), then create the Square
    customer, order and invoice, and publish the invoice so Square emails it.
    """
    try:
        quote = parse_submission(submission)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = orchestrator.submit(quote)
    except UpstreamError as e:
        logger.error(f"Square error: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception:
        logger.exception("Quote submission failed")
        raise HTTPException(status_code=500, detail="Server error")

    return QuoteResponse(
        invoice_id=result.invoice_id,
        invoice_url=result.invoice_url,
        totals=QuoteTotals.from_estimate(result.estimate),
    )


@router.post("/quote-estimate", response_model=EstimateResponse, responses=_ERROR_RESPONSES)
def estimate_quote(
    submission: Optional[QuoteSubmission] = Body(None),
    engine: PricingEngine = Depends(get_pricing_engine),
):
    """Totals only. Nothing is sent to Square."""
    try:
        quote = parse_submission(submission)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return EstimateResponse(totals=QuoteTotals.from_estimate(engine.price(quote)))
