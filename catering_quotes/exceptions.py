"""
Error taxonomy for the quote pipeline.

ValidationError   -> 400: caller sent an unusable quote
UpstreamError     -> 500: a vendor call failed or returned no usable object
NotificationError -> never surfaces: the owner notifier logs and drops it
"""


class QuoteError(Exception):
    """Base class for every error raised by the quote pipeline."""


class ValidationError(QuoteError):
    pass


class UpstreamError(QuoteError):
    """A vendor API call failed. `payload` holds the raw response, if any."""

    def __init__(self, message: str, payload=None):
        super().__init__(message)
        self.payload = payload


class NotificationError(QuoteError):
    pass
