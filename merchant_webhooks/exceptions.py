"""Errors raised while receiving and resolving merchant webhooks.

Only MalformedPayload is surfaced to callers of the core. The others are
raised and caught inside handlers so that one merchant, update or handler
can be skipped while the rest of the event is processed.
"""


class MerchantWebhookError(Exception):
    """Base class for all webhook processing errors."""


class MalformedPayload(MerchantWebhookError):
    """Inbound body could not be decoded into an Event."""


class UnknownObjectType(MerchantWebhookError):
    """An update's object reference has no recognized type code."""

    def __init__(self, object_ref: str):
        super().__init__(f"Unrecognized object reference: '{object_ref}'")
        self.object_ref = object_ref


class MissingToken(MerchantWebhookError):
    """No usable access token exists for a merchant."""

    def __init__(self, merchant_id: str):
        super().__init__(f"No access token found for merchant id = {merchant_id}")
        self.merchant_id = merchant_id


class DetailFetchFailure(MerchantWebhookError):
    """Outbound detail GET failed or returned a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class HandlerFailure(MerchantWebhookError):
    """A registered handler raised while handling an event."""

    def __init__(self, handler_name: str, cause: BaseException):
        super().__init__(f"Handler {handler_name} failed: {cause}")
        self.handler_name = handler_name
        self.cause = cause
