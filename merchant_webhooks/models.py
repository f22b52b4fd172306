"""Typed representation of inbound Clover webhook notifications."""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import MalformedPayload

logger = logging.getLogger(__name__)


class UpdateType(str, Enum):
    """Kind of change reported for an object."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class Update(BaseModel):
    """A single object change for one merchant.

    ``object_ref`` has the form ``<TypeCode>:<objectId>``, e.g. ``O:ORD123``.
    It is kept verbatim here and only checked when it is resolved. An
    unrecognized or missing ``type`` becomes None rather than rejecting the
    whole notification.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    object_ref: str = Field(alias="objectId")
    type: UpdateType | None = None
    timestamp_millis: str | None = Field(default=None, alias="ts")

    @field_validator("type", mode="before")
    @classmethod
    def tolerate_unknown_type(cls, v: Any) -> Any:
        if v is None or isinstance(v, UpdateType):
            return v
        try:
            return UpdateType(v)
        except ValueError:
            logger.warning(f"Unrecognized update type {v!r}, treating as unknown")
            return None

    @field_validator("timestamp_millis", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: Any) -> Any:
        # Clover sends ts as a number
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        return v


class Event(BaseModel):
    """Parsed webhook notification.

    ``merchants`` maps merchant id to that merchant's updates in delivery
    order. It is empty for verification-only notifications.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    app_id: str | None = Field(default=None, alias="appId")
    verification_code: str | None = Field(default=None, alias="verificationCode")
    merchants: dict[str, tuple[Update, ...]] = Field(default_factory=dict)

    @field_validator("merchants", mode="before")
    @classmethod
    def default_merchants(cls, v: Any) -> Any:
        if v is None:
            return {}
        return v

    @field_validator("merchants")
    @classmethod
    def validate_merchant_ids(
        cls, v: dict[str, tuple[Update, ...]]
    ) -> dict[str, tuple[Update, ...]]:
        for merchant_id in v:
            if not merchant_id.strip():
                raise ValueError("merchant id must be a non-empty string")
        return v

    def update_count(self) -> int:
        return sum(len(updates) for updates in self.merchants.values())


def parse_event(raw: bytes | str | dict[str, Any]) -> Event:
    """Parse a webhook body into an Event.

    Args:
        raw: Raw JSON body (bytes or text) or an already-decoded JSON object

    Returns:
        Parsed Event

    Raises:
        MalformedPayload: If the body is not JSON or does not fit the Event shape
    """
    try:
        if isinstance(raw, dict):
            return Event.model_validate(raw)
        return Event.model_validate_json(raw)
    except ValidationError as e:
        logger.error(f"Failed to parse webhook payload: {e.error_count()} error(s)")
        raise MalformedPayload(str(e)) from e
