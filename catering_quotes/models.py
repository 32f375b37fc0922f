"""
Value objects passed between the pricing, composition and invoicing stages.

All of them are frozen: a quote is built once per request and never mutated.
"""

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class QuoteRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    event_address: Optional[str] = None
    miles: float = 0.0
    package_rate: float = 0.0
    guest_count: int = 0


class PricedEstimate(BaseModel):
    """
    Itemized totals in decimal currency units, unrounded.

    total_before_tip = travel + items + tax
    final_total      = total_before_tip + tip
    """
    model_config = ConfigDict(frozen=True)

    items: float
    tax: float
    travel: float
    tip: float
    total_before_tip: float
    final_total: float


class MoneyAmount(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: int  # minor units (cents)
    currency: str = "USD"


class TaxDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    uid: str
    name: str
    percentage: str
    type: str = "ADDITIVE"
    scope: str = "LINE_ITEM"


class OrderLineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    quantity: str
    unit_price: MoneyAmount
    applied_tax_refs: Tuple[str, ...] = ()


class OrderDraft(BaseModel):
    model_config = ConfigDict(frozen=True)

    location_id: str
    customer_id: str
    taxes: Tuple[TaxDefinition, ...]
    line_items: Tuple[OrderLineItem, ...]
    note: str


class QuoteResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    invoice_id: str
    invoice_url: Optional[str] = None
    estimate: PricedEstimate
