"""
Pricing Engine.

Turns raw quote inputs into an itemized PricedEstimate.
Pure math, no I/O. Package × guests, plus tax, tip and a mileage-based travel fee.

Input: QuoteRequest
Output: PricedEstimate (unrounded; cents are only taken at the vendor boundary)
"""

import math

from .models import PricedEstimate, QuoteRequest


def coerce_float(value, default: float = 0.0) -> float:
    """Best-effort float parse. None, blanks, junk, NaN and inf all become `default`."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def coerce_int(value, default: int = 0) -> int:
    """Integer parse that truncates toward zero, so "20.7" guests is 20."""
    number = coerce_float(value, float(default))
    return int(number)


class PricingEngine:
    """
    Fixed catering policy. Rates are class constants, not per-call options.

    Tax and tip are charged on the package items only, never on travel.
    """

    TAX_RATE = 0.0625
    TIP_RATE = 0.18
    TRAVEL_BASE = 50.0
    PER_MILE = 4.0

    def price(self, request: QuoteRequest) -> PricedEstimate:
        miles = max(0.0, request.miles)

        items = request.package_rate * request.guest_count
        tax = self.TAX_RATE * items
        travel = self.TRAVEL_BASE + self.PER_MILE * miles
        tip = self.TIP_RATE * items
        total_before_tip = travel + (items + tax)
        final_total = total_before_tip + tip

        return PricedEstimate(
            items=items,
            tax=tax,
            travel=travel,
            tip=tip,
            total_before_tip=total_before_tip,
            final_total=final_total,
        )

    @staticmethod
    def build_request(
        name,
        email,
        event_address=None,
        miles=None,
        package_rate=None,
        guests=None,
    ) -> QuoteRequest:
        """
        Build a QuoteRequest from loose form values.

        Numbers are coerced, never rejected, and miles are clamped at 0.
        package_rate and guests keep their sign; the caller decides whether
        a negative value is acceptable.
        """
        return QuoteRequest(
            name=str(name or "").strip(),
            email=str(email or "").strip(),
            event_address=(str(event_address).strip() or None) if event_address else None,
            miles=max(0.0, coerce_float(miles)),
            package_rate=coerce_float(package_rate),
            guest_count=coerce_int(guests),
        )
