"""
Owner notification via a form-submission endpoint (Formspree).

Fire-and-forget: a failed notification is logged and dropped, the quote
request still succeeds.
"""

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Optional

from .exceptions import NotificationError
from .models import PricedEstimate, QuoteRequest

logger = logging.getLogger(__name__)


def build_summary(request: QuoteRequest, estimate: PricedEstimate, invoice_ref: str) -> str:
    """Plain-text summary for the owner's inbox."""
    lines = [
        f"New quote: {request.name} <{request.email}>",
        f"Event: {request.event_address}" if request.event_address else None,
        f"Miles: {request.miles:.1f}",
        f"Package: ${request.package_rate:.2f} x {request.guest_count}",
        f"Items: ${estimate.items:.2f}, Tax: ${estimate.tax:.2f}",
        f"Travel: ${estimate.travel:.2f}, Tip: ${estimate.tip:.2f}",
        f"Total Before Tip: ${estimate.total_before_tip:.2f}",
        f"FINAL: ${estimate.final_total:.2f}",
        f"Invoice: {invoice_ref}",
    ]
    return "\n".join(line for line in lines if line)


class OwnerNotifier:

    def __init__(self, endpoint: str = "", owner_email: str = "",
                 sender_name: str = "Cravery Quotes Bot", timeout: float = 10.0):
        self.endpoint = endpoint
        self.owner_email = owner_email
        self.sender_name = sender_name
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.endpoint and self.owner_email)

    def notify(self, request: QuoteRequest, estimate: PricedEstimate,
               invoice_id: str, invoice_url: Optional[str] = None) -> bool:
        """Returns True if the owner was notified. Never raises."""
        if not self.enabled:
            return False

        summary = build_summary(request, estimate, invoice_url or invoice_id)
        try:
            self._send(summary)
        except NotificationError as e:
            logger.warning(f"Owner notify failed: {e}")
            return False
        except Exception:
            # The invoice is already published; nothing here may fail the quote.
            logger.exception("Owner notify failed unexpectedly")
            return False
        logger.info(f"Owner notified about invoice {invoice_id}")
        return True

    def _send(self, summary: str):
        payload = json.dumps({
            "name": self.sender_name,
            "email": self.owner_email,
            "message": summary,
        }).encode("utf-8")

        req = urllib.request.Request(
            self.endpoint,
            data=payload,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                response.read()
        except urllib.error.HTTPError as e:
            raise NotificationError(f"HTTP {e.code} from notification endpoint") from e
        except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as e:
            raise NotificationError(str(e)) from e
