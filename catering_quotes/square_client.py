"""
Square API client: customers, orders, invoices.

Thin JSON-over-HTTPS wrapper. Every call is a blocking POST; nothing is
retried. Any response without the expected object raises UpstreamError
carrying the raw payload so the caller can surface Square's own error list.
"""

import http.client
import json
import logging
import urllib.error
import urllib.request
from datetime import date
from typing import Optional

from .config import VendorConfig
from .exceptions import UpstreamError
from .models import MoneyAmount, OrderDraft

logger = logging.getLogger(__name__)


def _money_payload(money: MoneyAmount) -> dict:
    return {"amount": money.amount, "currency": money.currency}


def order_payload(draft: OrderDraft, idempotency_key: str) -> dict:
    """OrderDraft → Square CreateOrder request body."""
    line_items = []
    for item in draft.line_items:
        entry = {
            "name": item.name,
            "quantity": item.quantity,
            "base_price_money": _money_payload(item.unit_price),
        }
        if item.applied_tax_refs:
            entry["applied_taxes"] = [{"tax_uid": uid} for uid in item.applied_tax_refs]
        line_items.append(entry)

    return {
        "idempotency_key": idempotency_key,
        "order": {
            "location_id": draft.location_id,
            "customer_id": draft.customer_id,
            "taxes": [
                {
                    "uid": tax.uid,
                    "name": tax.name,
                    "type": tax.type,
                    "percentage": tax.percentage,
                    "scope": tax.scope,
                }
                for tax in draft.taxes
            ],
            "line_items": line_items,
            "note": draft.note,
        },
    }


class SquareClient:

    def __init__(self, config: VendorConfig, timeout: float = 30.0):
        self.config = config
        self.timeout = timeout

    def _headers(self, extra: Optional[dict] = None) -> dict:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.access_token}",
            "Square-Version": self.config.api_version,
        }
        if extra:
            headers.update(extra)
        return headers

    def _post(self, path: str, body: dict, extra_headers: Optional[dict] = None,
              timeout: Optional[float] = None) -> dict:
        """
        POST JSON and return the decoded response.

        Square reports failures as a JSON body with an `errors` list. Any
        non-2xx status raises UpstreamError carrying that decoded body.
        """
        url = f"{self.config.api_base_url}{path}"
        req = urllib.request.Request(
            url,
            data=json.dumps(body).encode("utf-8"),
            headers=self._headers(extra_headers),
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=timeout or self.timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as e:
            raw = e.read() or b""
            logger.warning(f"Square {path} returned HTTP {e.code}")
            try:
                payload = json.loads(raw)
            except ValueError:
                payload = raw.decode("utf-8", errors="replace")
            detail = payload if isinstance(payload, str) else json.dumps(payload)
            raise UpstreamError(f"Square {path} returned HTTP {e.code}: {detail}", payload=payload) from e
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            raise UpstreamError(f"Square request to {path} failed: {e}") from e

        try:
            parsed = json.loads(raw or b"{}")
        except ValueError:
            text = raw.decode("utf-8", errors="replace")
            raise UpstreamError(f"Square {path} returned non-JSON response: {text}", payload=text)

        if not isinstance(parsed, dict):
            raise UpstreamError(f"Square {path} returned unexpected payload: {parsed!r}", payload=parsed)
        return parsed

    # --- Customers ---

    def search_customers_by_email(self, email: str, timeout: Optional[float] = None) -> Optional[dict]:
        """First customer whose email matches exactly, or None. A failed search raises."""
        resp = self._post(
            "/v2/customers/search",
            {"query": {"filter": {"email_address": {"exact": email}}}},
            timeout=timeout,
        )
        if resp.get("errors"):
            raise UpstreamError("Failed to search customers: " + json.dumps(resp), payload=resp)
        customers = resp.get("customers") or []
        return customers[0] if customers else None

    def create_customer(self, given_name: str, family_name: Optional[str], email: str,
                        timeout: Optional[float] = None) -> dict:
        body = {"given_name": given_name, "email_address": email}
        if family_name:
            body["family_name"] = family_name

        resp = self._post("/v2/customers", body, timeout=timeout)
        customer = resp.get("customer")
        if not customer or not customer.get("id"):
            raise UpstreamError("Failed to create customer: " + json.dumps(resp), payload=resp)
        return customer

    # --- Orders ---

    def create_order(self, draft: OrderDraft, idempotency_key: str,
                     timeout: Optional[float] = None) -> dict:
        resp = self._post(
            "/v2/orders",
            order_payload(draft, idempotency_key),
            extra_headers={"Idempotency-Key": idempotency_key},
            timeout=timeout,
        )
        order = resp.get("order") or {}
        if not order.get("id"):
            raise UpstreamError("Failed to create order: " + json.dumps(resp), payload=resp)
        return order

    # --- Invoices ---

    def create_invoice(self, order_id: str, customer_id: str, due_date: date,
                       title: str, description: str,
                       timeout: Optional[float] = None) -> dict:
        body = {
            "invoice": {
                "location_id": self.config.location_id,
                "order_id": order_id,
                "primary_recipient": {"customer_id": customer_id},
                "delivery_method": "EMAIL",
                "title": title,
                "description": description,
                "payment_requests": [
                    {"request_type": "BALANCE", "due_date": due_date.isoformat()},
                ],
                "accepted_payment_methods": {"card": True},
            }
        }
        resp = self._post("/v2/invoices", body, timeout=timeout)
        invoice = resp.get("invoice") or {}
        if not invoice.get("id"):
            raise UpstreamError("Failed to create invoice: " + json.dumps(resp), payload=resp)
        return invoice

    def publish_invoice(self, invoice_id: str, version: int = 1,
                        timeout: Optional[float] = None) -> dict:
        """Publishing is what makes Square email the invoice to the customer."""
        resp = self._post(
            f"/v2/invoices/{invoice_id}/publish",
            {"version": version},
            timeout=timeout,
        )
        invoice = resp.get("invoice") or {}
        if not invoice.get("id"):
            raise UpstreamError("Failed to publish invoice: " + json.dumps(resp), payload=resp)
        return invoice
