"""Webhook event dispatching."""
import logging
from typing import Iterable

from ..exceptions import HandlerFailure
from ..models import Event
from .protocols import EventHandler

logger = logging.getLogger(__name__)


class WebhookDispatcher:
    """Fans a parsed event out to every registered handler.

    Follows Single Responsibility Principle:
    - Only responsible for handler membership and isolation
    - Doesn't know about HTTP, tokens or Clover endpoints
    """

    def __init__(self, handlers: Iterable[EventHandler] = ()):
        """Initialize dispatcher with an optional set of handlers.

        Args:
            handlers: Handlers to register up front
        """
        # keyed by identity, insertion ordered
        self._handlers: dict[int, EventHandler] = {}
        for handler in handlers:
            self.register(handler)

    @property
    def handlers(self) -> list[EventHandler]:
        return list(self._handlers.values())

    def register(self, handler: EventHandler) -> None:
        """Add a handler. Registering the same object twice is a no-op."""
        self._handlers.setdefault(id(handler), handler)

    def unregister(self, handler: EventHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        self._handlers.pop(id(handler), None)

    async def dispatch(self, event: Event) -> list[HandlerFailure]:
        """Invoke every registered handler with the event.

        Args:
            event: Parsed webhook event

        Returns:
            Failures of handlers that raised, empty if all succeeded

        Note:
            If a handler fails, it logs the error and continues
            with other handlers (graceful degradation).
        """
        failures: list[HandlerFailure] = []

        for handler in self.handlers:
            try:
                await handler.handle(event)
            except Exception as e:
                failure = HandlerFailure(handler.__class__.__name__, e)
                logger.error(str(failure), exc_info=True)
                failures.append(failure)

        return failures
