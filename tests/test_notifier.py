"""
Owner notifier tests. Notification is best-effort: it must never raise.
"""

import http.client
import json
import urllib.error
from unittest.mock import MagicMock, patch

from catering_quotes.models import QuoteRequest
from catering_quotes.notifier import OwnerNotifier, build_summary
from catering_quotes.pricing_engine import PricingEngine


def _quote(event_address="12 Elm St"):
    req = QuoteRequest(
        name="Jane Doe", email="jane@x.com", event_address=event_address,
        miles=10, package_rate=25, guest_count=20,
    )
    return req, PricingEngine().price(req)


def test_summary_lines():
    req, est = _quote()
    summary = build_summary(req, est, "https://sq/inv/1")

    assert summary.splitlines() == [
        "New quote: Jane Doe <jane@x.com>",
        "Event: 12 Elm St",
        "Miles: 10.0",
        "Package: $25.00 x 20",
        "Items: $500.00, Tax: $31.25",
        "Travel: $90.00, Tip: $90.00",
        "Total Before Tip: $621.25",
        "FINAL: $711.25",
        "Invoice: https://sq/inv/1",
    ]


def test_summary_skips_missing_address():
    req, est = _quote(event_address=None)
    assert "Event:" not in build_summary(req, est, "INV-1")


def test_disabled_without_endpoint_or_owner():
    req, est = _quote()
    with patch("urllib.request.urlopen") as m:
        assert OwnerNotifier(endpoint="", owner_email="owner@x.com").notify(req, est, "INV-1") is False
        assert OwnerNotifier(endpoint="https://formspree.io/f/x", owner_email="").notify(req, est, "INV-1") is False
    m.assert_not_called()


def test_posts_summary_to_endpoint():
    req, est = _quote()
    resp = MagicMock()
    resp.__enter__.return_value = resp
    resp.__exit__.return_value = False

    notifier = OwnerNotifier("https://formspree.io/f/abc", "owner@cravery.com", sender_name="Quotes Bot")
    with patch("urllib.request.urlopen", return_value=resp) as m:
        assert notifier.notify(req, est, "INV-1", None) is True

    sent = m.call_args[0][0]
    body = json.loads(sent.data.decode("utf-8"))
    assert sent.full_url == "https://formspree.io/f/abc"
    assert body["name"] == "Quotes Bot"
    assert body["email"] == "owner@cravery.com"
    assert body["message"].endswith("Invoice: INV-1")


def test_failure_is_logged_and_swallowed(caplog):
    req, est = _quote()
    notifier = OwnerNotifier("https://formspree.io/f/abc", "owner@cravery.com")
    with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("timed out")):
        assert notifier.notify(req, est, "INV-1") is False

    assert "Owner notify failed" in caplog.text


def test_http_error_is_swallowed():
    req, est = _quote()
    notifier = OwnerNotifier("https://formspree.io/f/abc", "owner@cravery.com")
    err = urllib.error.HTTPError("https://formspree.io/f/abc", 422, "bad", {}, None)
    with patch("urllib.request.urlopen", side_effect=err):
        assert notifier.notify(req, est, "INV-1") is False


def test_truncated_response_is_swallowed(caplog):
    """http.client errors are not OSErrors; they must not escape either."""
    req, est = _quote()
    notifier = OwnerNotifier("https://formspree.io/f/abc", "owner@cravery.com")
    with patch("urllib.request.urlopen", side_effect=http.client.IncompleteRead(b"")):
        assert notifier.notify(req, est, "INV-1") is False

    assert "Owner notify failed" in caplog.text


def test_unexpected_error_is_swallowed(caplog):
    req, est = _quote()
    notifier = OwnerNotifier("https://formspree.io/f/abc", "owner@cravery.com")
    with patch("urllib.request.urlopen", side_effect=RuntimeError("boom")):
        assert notifier.notify(req, est, "INV-1") is False

    assert "Owner notify failed unexpectedly" in caplog.text
