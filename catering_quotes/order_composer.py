"""
Order Composer.

Maps a PricedEstimate onto a vendor-neutral OrderDraft:
one additive sales tax applied to the Package line, plus flat Travel Fee
and Tip lines. Tax stays a percentage rule on the vendor side so the
invoice shows subtotal and tax separately.
"""

from decimal import Decimal, ROUND_HALF_UP

from .models import (
    MoneyAmount, OrderDraft, OrderLineItem, PricedEstimate, QuoteRequest, TaxDefinition,
)
from .pricing_engine import PricingEngine

_MINOR_UNITS = Decimal("100")


def to_money(amount: float, currency: str = "USD") -> MoneyAmount:
    """
    Decimal amount → integer cents, rounding half up.

    The float is read through its shortest repr, so 1.005 becomes 101 cents
    rather than the 100 that binary multiplication would give.
    """
    cents = (Decimal(str(amount)) * _MINOR_UNITS).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return MoneyAmount(amount=int(cents), currency=currency)


def _format_percentage(rate: float) -> str:
    """0.0625 → "6.25". Trailing zeros dropped, never exponent notation."""
    pct = (Decimal(str(rate)) * 100).normalize()
    return format(pct, "f")


class OrderComposer:

    TAX_UID = "sales-tax"
    TAX_NAME = "Sales Tax"
    NO_ADDRESS = "(address not provided)"

    def __init__(self, currency: str = "USD", tax_rate: float = PricingEngine.TAX_RATE,
                 tip_rate: float = PricingEngine.TIP_RATE):
        self.currency = currency
        self.tax_rate = tax_rate
        self.tip_rate = tip_rate

    def compose(
        self,
        estimate: PricedEstimate,
        request: QuoteRequest,
        location_id: str,
        customer_id: str,
    ) -> OrderDraft:
        tax = TaxDefinition(
            uid=self.TAX_UID,
            name=self.TAX_NAME,
            percentage=_format_percentage(self.tax_rate),
        )

        line_items = (
            OrderLineItem(
                name="Package",
                quantity=str(request.guest_count),
                unit_price=to_money(request.package_rate, self.currency),
                applied_tax_refs=(tax.uid,),
            ),
            OrderLineItem(
                name="Travel Fee",
                quantity="1",
                unit_price=to_money(estimate.travel, self.currency),
            ),
            OrderLineItem(
                name=f"Tip ({self.tip_rate * 100:g}%)",
                quantity="1",
                unit_price=to_money(estimate.tip, self.currency),
            ),
        )

        return OrderDraft(
            location_id=location_id,
            customer_id=customer_id,
            taxes=(tax,),
            line_items=line_items,
            note=self.build_note(request),
        )

    def build_note(self, request: QuoteRequest) -> str:
        address = request.event_address or self.NO_ADDRESS
        return f"Event at {address}. {max(0.0, request.miles):.1f} miles."
