"""Protocols (interfaces) for dependency inversion."""

from typing import Protocol

from ..models import Event


class EventHandler(Protocol):
    """Protocol for webhook event handlers."""

    async def handle(self, event: Event) -> None:
        """Handle a parsed webhook event.

        Args:
            event: Parsed event. Handlers must not mutate it.
        """
        ...


class TokenLookup(Protocol):
    """Supplies Clover access tokens by merchant."""

    def get_access_token(self, merchant_id: str) -> str | None:
        """Return a token usable for REST calls for this merchant, or None."""
        ...


class DetailPayloadConsumer(Protocol):
    """Receives the raw body of each resolved object."""

    async def consume(self, raw_body: str) -> None: ...
