import json
import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException, Request

from . import clover_client
from .config import Settings, get_settings
from .exceptions import MalformedPayload
from .models import parse_event
from .services.dispatcher import WebhookDispatcher
from .services.handlers import DetailResolutionHandler, EchoHandler, VerificationHandler
from .token_store import FileAccessTokenStore

# Setup logging - will be configured on startup
logger = logging.getLogger(__name__)

app = FastAPI(title="Clover Merchant Webhooks", version="0.1.0")


@app.on_event("startup")
async def configure_logging() -> None:
    """Configure logging level from settings on startup."""
    try:
        settings = get_settings()
        log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            force=True,  # Override any existing config
        )
        logger.info(f"Logging configured with level: {settings.LOG_LEVEL.upper()}")
    except Exception as e:
        # Fallback to INFO if settings fail
        logging.basicConfig(level=logging.INFO)
        logger.warning(f"Failed to load LOG_LEVEL from settings, using INFO: {e}")


@lru_cache
def _token_store_for(path: str) -> FileAccessTokenStore:
    return FileAccessTokenStore(path)


def get_token_store(settings: Settings = Depends(get_settings)) -> FileAccessTokenStore:
    """Return the token store for the configured file.

    One store is kept per path so its modification-time cache survives
    across requests.
    """
    return _token_store_for(str(settings.get_access_token_path()))


def get_dispatcher(
    settings: Settings = Depends(get_settings),
    token_store: FileAccessTokenStore = Depends(get_token_store),
) -> WebhookDispatcher:
    """Create WebhookDispatcher with the default handlers.

    Follows Dependency Inversion Principle:
    - main.py depends on abstractions (EventHandler protocol)
    - Concrete implementations injected here
    """
    return WebhookDispatcher(
        handlers=[
            EchoHandler(),
            VerificationHandler(),
            DetailResolutionHandler(
                server=settings.CLOVER_SERVER,
                token_lookup=token_store,
                clover_client=clover_client,
                timeout=settings.HTTP_TIMEOUT,
            ),
        ]
    )


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)) -> dict[str, object]:
    return {"status": "ok", "server": settings.CLOVER_SERVER}


@app.api_route("/webhook", methods=["GET", "POST"])
async def clover_webhook(
    request: Request,
    dispatcher: WebhookDispatcher = Depends(get_dispatcher),
) -> dict[str, object]:
    """
    Receives Clover webhook notifications and dispatches them to handlers.

    GET is handled the same as POST. The sender is not authenticated. Only a
    malformed body fails the request; handler errors are logged and reported
    in the response.
    """
    body = await request.body()

    try:
        event = parse_event(body)
    except MalformedPayload:
        logger.error(f"Invalid webhook body: {body[:200]!r}")
        raise HTTPException(status_code=400, detail="invalid payload")

    logger.info(
        f"Received webhook from app {event.app_id}: "
        f"{len(event.merchants)} merchant(s), {event.update_count()} update(s)"
    )

    failures = await dispatcher.dispatch(event)

    return {
        "ok": True,
        "app_id": event.app_id,
        "merchants": list(event.merchants),
        "failed_handlers": [f.handler_name for f in failures],
    }


@app.post("/auth")
async def save_auth(
    request: Request,
    settings: Settings = Depends(get_settings),
    token_store: FileAccessTokenStore = Depends(get_token_store),
) -> dict[str, object]:
    """
    Stores merchant access tokens, body format {"<merchantId>": "<token>"}.
    """
    if settings.ADMIN_TOKEN:
        token = request.headers.get("x-admin-token") or request.query_params.get("token")
        if token != settings.ADMIN_TOKEN:
            logger.warning("Unauthorized token save attempt")
            raise HTTPException(status_code=401, detail="unauthorized")

    body = await request.body()
    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        logger.error(f"Failed to parse token payload: {e}")
        raise HTTPException(status_code=400, detail="invalid payload")

    if not isinstance(payload, dict) or not all(
        isinstance(k, str) and k and isinstance(v, str) and v for k, v in payload.items()
    ):
        logger.error("Token payload must map merchant ids to token strings")
        raise HTTPException(status_code=400, detail="invalid payload")

    token_store.save_tokens(payload)
    return {"ok": True, "saved": list(payload)}
