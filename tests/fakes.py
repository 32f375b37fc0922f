from catering_quotes.exceptions import UpstreamError


class FakeSquareClient:
    """
    In-memory stand-in for SquareClient. Records every call in order.

    Set `fail_on` to a method name to make that step raise UpstreamError.
    """

    def __init__(self, existing_customers=None, fail_on=None):
        self.customers = {c["email_address"]: c for c in (existing_customers or [])}
        self.fail_on = fail_on
        self.calls = []
        self.orders = []
        self.invoices = []

    def _record(self, name, **kwargs):
        self.calls.append((name, kwargs))
        if self.fail_on == name:
            raise UpstreamError(f"Failed to {name}: " + '{"errors": [{"code": "BAD_REQUEST"}]}')

    def search_customers_by_email(self, email, timeout=None):
        self._record("search_customers_by_email", email=email)
        return self.customers.get(email)

    def create_customer(self, given_name, family_name, email, timeout=None):
        self._record("create_customer", given_name=given_name, family_name=family_name, email=email)
        customer = {
            "id": f"CUST-{len(self.customers) + 1}",
            "given_name": given_name,
            "family_name": family_name,
            "email_address": email,
        }
        self.customers[email] = customer
        return customer

    def create_order(self, draft, idempotency_key, timeout=None):
        self._record("create_order", draft=draft, idempotency_key=idempotency_key)
        order = {"id": f"ORDER-{len(self.orders) + 1}", "customer_id": draft.customer_id}
        self.orders.append(order)
        return order

    def create_invoice(self, order_id, customer_id, due_date, title, description, timeout=None):
        self._record("create_invoice", order_id=order_id, customer_id=customer_id,
                     due_date=due_date, title=title, description=description)
        invoice = {"id": f"INV-{len(self.invoices) + 1}", "version": 0, "order_id": order_id}
        self.invoices.append(invoice)
        return invoice

    def publish_invoice(self, invoice_id, version=1, timeout=None):
        self._record("publish_invoice", invoice_id=invoice_id, version=version)
        return {
            "id": invoice_id,
            "version": version + 1,
            "status": "UNPAID",
            "public_url": f"https://squareupsandbox.com/pay-invoice/{invoice_id}",
        }

    def call_names(self):
        return [name for name, _ in self.calls]
