"""Webhook event handlers."""
import asyncio
import logging
from typing import Any

from ..endpoints import (
    ACCESS_TOKEN_KEY,
    ENDPOINTS,
    MERCHANT_KEY,
    SERVER_KEY,
    redact_token,
    resolve_object_ref,
    substitute,
)
from ..exceptions import DetailFetchFailure, MissingToken, UnknownObjectType
from ..models import Event, Update
from .protocols import DetailPayloadConsumer, TokenLookup

logger = logging.getLogger(__name__)


class LoggingDetailConsumer:
    """Default detail consumer: logs each payload."""

    async def consume(self, raw_body: str) -> None:
        logger.info(f"Detailed data for the object: '{raw_body}'")


class DetailResolutionHandler:
    """Resolves every object referenced by an event through the Clover REST API.

    Follows Single Responsibility Principle:
    - Only responsible for turning object references into detail payloads
    - Token storage, HTTP transport and payload use are injected
    """

    def __init__(
        self,
        server: str,
        token_lookup: TokenLookup,
        clover_client: Any,
        consumer: DetailPayloadConsumer | None = None,
        timeout: float = 10.0,
    ):
        """Initialize with server and collaborators.

        Args:
            server: Base server for REST calls, e.g. https://apisandbox.dev.clover.com
            token_lookup: Looks up access tokens by merchant id
            clover_client: Client for Clover API calls (provides ``get_detail``)
            consumer: Receives each resolved payload (logs by default)
            timeout: Timeout in seconds for each detail call
        """
        self.token_lookup = token_lookup
        self.clover_client = clover_client
        self.consumer = consumer or LoggingDetailConsumer()
        self.timeout = timeout
        self._base_variables: dict[str, str] = {SERVER_KEY: server}

    async def handle(self, event: Event) -> None:
        """Fetch details for each update of each merchant with a token.

        Args:
            event: Parsed webhook event

        Note:
            Merchants without a token, unresolvable references and failed
            calls are logged and skipped; the remaining work continues.
        """
        if not event.merchants:
            return

        for merchant_id, updates in event.merchants.items():
            try:
                access_token = await self._access_token(merchant_id)
            except MissingToken as e:
                logger.warning(str(e))
                continue

            merchant_variables = {
                **self._base_variables,
                ACCESS_TOKEN_KEY: access_token,
                MERCHANT_KEY: merchant_id,
            }
            for update in updates:
                await self._resolve_update(merchant_id, update, merchant_variables)

    async def _access_token(self, merchant_id: str) -> str:
        # lookups may touch the filesystem, keep them off the event loop
        access_token = await asyncio.to_thread(self.token_lookup.get_access_token, merchant_id)
        if not access_token:
            raise MissingToken(merchant_id)
        return access_token

    async def _resolve_update(
        self, merchant_id: str, update: Update, merchant_variables: dict[str, str]
    ) -> None:
        try:
            object_type, object_id = resolve_object_ref(update.object_ref)
        except UnknownObjectType as e:
            logger.warning(f"Skipping update for merchant {merchant_id}: {e}")
            return

        endpoint = ENDPOINTS[object_type]
        url = substitute(endpoint.template, {**merchant_variables, endpoint.id_key: object_id})
        logger.debug(f"Resolving {object_type.name} {object_id}: {redact_token(url)}")

        try:
            detail = await self.clover_client.get_detail(url, timeout=self.timeout)
        except DetailFetchFailure as e:
            logger.warning(f"Failed to fetch {update.object_ref} for merchant {merchant_id}: {e}")
            return
        except Exception as e:
            logger.error(
                f"Unexpected error fetching {update.object_ref} for merchant {merchant_id}: "
                f"{e.__class__.__name__}",
                exc_info=True,
            )
            return

        try:
            await self.consumer.consume(detail)
        except Exception as e:
            logger.error(
                f"Detail consumer failed for {update.object_ref} of merchant {merchant_id}: {e}",
                exc_info=True,
            )


class VerificationHandler:
    """Surfaces the verification code sent when a webhook URL is registered."""

    async def handle(self, event: Event) -> None:
        if event.verification_code is not None:
            logger.warning(
                "Got verification code! Enter this code in the Clover dashboard to verify: "
                f"{event.verification_code}"
            )


class EchoHandler:
    """Logs the contents of every event."""

    async def handle(self, event: Event) -> None:
        logger.info(f"The application that sent the event was: '{event.app_id}'")
        for merchant_id, updates in event.merchants.items():
            logger.info(f"  updates for merchant: '{merchant_id}'")
            for index, update in enumerate(updates):
                update_type = update.type.value if update.type else None
                logger.info(f"    update[{index}].objectId: '{update.object_ref}'")
                logger.info(f"    update[{index}].type: '{update_type}'")
                logger.info(f"    update[{index}].ts: '{update.timestamp_millis}'")
