"""
Quote Orchestrator.

Runs one quote through the vendor, strictly in order:

    customer (find or create) → order → invoice → publish → notify owner

Each step needs the id produced by the one before it. There is no retry and
no rollback: if the invoice step fails, the customer and order already
created at Square stay there. The owner notification is the only step
allowed to fail without failing the request.
"""

import logging
import time
import uuid
from datetime import date, timedelta
from typing import Callable, Optional

from .config import Settings
from .exceptions import UpstreamError
from .models import QuoteRequest, QuoteResult
from .notifier import OwnerNotifier
from .order_composer import OrderComposer
from .pricing_engine import PricingEngine
from .square_client import SquareClient

logger = logging.getLogger(__name__)


def split_name(name: str):
    """Split "Jane van Doe" into ("Jane", "van Doe"). A single name has no family name."""
    given_name, _, rest = name.strip().partition(" ")
    return given_name, rest.strip() or None


class QuoteOrchestrator:

    def __init__(
        self,
        client: SquareClient,
        location_id: str,
        engine: Optional[PricingEngine] = None,
        composer: Optional[OrderComposer] = None,
        notifier: Optional[OwnerNotifier] = None,
        invoice_title: str = "Catering Estimate",
        invoice_description: str = "",
        invoice_due_days: int = 7,
        call_timeout: float = 30.0,
        deadline_seconds: float = 60.0,
        today: Callable[[], date] = date.today,
        clock: Callable[[], float] = time.monotonic,
        new_idempotency_key: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self.client = client
        self.location_id = location_id
        self.engine = engine or PricingEngine()
        self.composer = composer or OrderComposer()
        self.notifier = notifier or OwnerNotifier()
        self.invoice_title = invoice_title
        self.invoice_description = invoice_description
        self.invoice_due_days = invoice_due_days
        self.call_timeout = call_timeout
        self.deadline_seconds = deadline_seconds
        self.today = today
        self.clock = clock
        self.new_idempotency_key = new_idempotency_key

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[SquareClient] = None):
        vendor = settings.vendor_config()
        return cls(
            client=client or SquareClient(vendor, timeout=settings.HTTP_TIMEOUT_SECONDS),
            location_id=vendor.location_id,
            composer=OrderComposer(currency=settings.CURRENCY),
            notifier=OwnerNotifier(
                endpoint=settings.FORMSPREE_OWNER_ENDPOINT,
                owner_email=vendor.owner_email,
                sender_name=settings.NOTIFY_SENDER_NAME,
            ),
            invoice_title=settings.INVOICE_TITLE,
            invoice_description=settings.INVOICE_DESCRIPTION,
            invoice_due_days=settings.INVOICE_DUE_DAYS,
            call_timeout=settings.HTTP_TIMEOUT_SECONDS,
            deadline_seconds=settings.REQUEST_DEADLINE_SECONDS,
        )

    def submit(self, request: QuoteRequest) -> QuoteResult:
        """
        Price the quote and push it through Square.

        Raises UpstreamError on the first failed vendor step.

        The deadline is checked before each call and caps that call's timeout.
        urllib applies the timeout per socket operation, so one slow call that
        keeps trickling bytes can still run past the deadline.
        """
        started = self.clock()

        def remaining(step: str) -> float:
            left = self.deadline_seconds - (self.clock() - started)
            if left <= 0:
                raise UpstreamError(f"Quote deadline of {self.deadline_seconds:g}s exceeded before {step}")
            return min(self.call_timeout, left)

        estimate = self.engine.price(request)

        customer = self._find_or_create_customer(request, remaining)
        customer_id = customer["id"]

        draft = self.composer.compose(estimate, request, self.location_id, customer_id)
        order = self.client.create_order(
            draft, self.new_idempotency_key(), timeout=remaining("order creation"),
        )
        logger.info(f"Created order {order['id']} for customer {customer_id}")

        due_date = self.today() + timedelta(days=self.invoice_due_days)
        invoice = self.client.create_invoice(
            order["id"], customer_id, due_date,
            title=self.invoice_title,
            description=self.invoice_description,
            timeout=remaining("invoice creation"),
        )
        published = self.client.publish_invoice(
            invoice["id"], invoice.get("version", 1), timeout=remaining("invoice publish"),
        )
        invoice_url = published.get("public_url")
        logger.info(f"Published invoice {published['id']} (due {due_date.isoformat()})")

        self.notifier.notify(request, estimate, published["id"], invoice_url)

        return QuoteResult(invoice_id=published["id"], invoice_url=invoice_url, estimate=estimate)

    def _find_or_create_customer(self, request: QuoteRequest, remaining) -> dict:
        # Exact-email match only; two concurrent first-time quotes can both create a customer.
        existing = self.client.search_customers_by_email(
            request.email, timeout=remaining("customer lookup"),
        )
        if existing and existing.get("id"):
            return existing

        given_name, family_name = split_name(request.name)
        customer = self.client.create_customer(
            given_name, family_name, request.email, timeout=remaining("customer creation"),
        )
        logger.info(f"Created Square customer {customer['id']}")
        return customer
