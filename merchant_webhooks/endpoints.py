"""Clover REST endpoints used to resolve webhook object references.

The ENDPOINTS table is the single source of truth for which v3 endpoint
returns the details of each object type.
See https://docs.clover.com/reference
"""

import re
from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple

from .exceptions import UnknownObjectType

SERVER_KEY = "server"
ACCESS_TOKEN_KEY = "access_token"

APP_KEY = "aId"
CUSTOMER_KEY = "customerId"
ITEM_KEY = "itemId"
ORDER_KEY = "orderId"
PAYMENT_KEY = "payId"
MERCHANT_KEY = "mId"

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


class ObjectType(str, Enum):
    """Type codes used as the prefix of an update's object reference."""

    APP = "A"  # app installed, uninstalled or subscription changed
    CUSTOMER = "C"
    INVENTORY = "I"
    ORDER = "O"
    PAYMENT = "P"
    MERCHANT = "M"  # merchant properties changed or merchant added


class Endpoint(NamedTuple):
    template: str
    id_key: str


ENDPOINTS: Mapping[ObjectType, Endpoint] = MappingProxyType(
    {
        ObjectType.APP: Endpoint(
            "{server}/v3/apps/{aId}/merchants/{mId}/billing_info?access_token={access_token}",
            APP_KEY,
        ),
        ObjectType.CUSTOMER: Endpoint(
            "{server}/v3/merchants/{mId}/customers/{customerId}?access_token={access_token}",
            CUSTOMER_KEY,
        ),
        ObjectType.INVENTORY: Endpoint(
            "{server}/v3/merchants/{mId}/items/{itemId}?access_token={access_token}",
            ITEM_KEY,
        ),
        ObjectType.ORDER: Endpoint(
            "{server}/v3/merchants/{mId}/orders/{orderId}?access_token={access_token}",
            ORDER_KEY,
        ),
        ObjectType.PAYMENT: Endpoint(
            "{server}/v3/merchants/{mId}/payments/{payId}?access_token={access_token}",
            PAYMENT_KEY,
        ),
        ObjectType.MERCHANT: Endpoint(
            "{server}/v3/merchants/{mId}?access_token={access_token}",
            MERCHANT_KEY,
        ),
    }
)


def substitute(template: str, variables: Mapping[str, str]) -> str:
    """Replace ``{key}`` tokens in a template with values from a mapping.

    Tokens whose key is missing from ``variables`` are left as-is. Values are
    inserted verbatim (no URL escaping) and are not scanned again, so a value
    that itself contains ``{key}`` is never expanded.

    Args:
        template: String with brace-delimited placeholders
        variables: Placeholder name to replacement value

    Returns:
        Template with known placeholders replaced
    """
    return _PLACEHOLDER.sub(lambda m: variables.get(m.group(1), m.group(0)), template)


def resolve_object_ref(object_ref: str) -> tuple[ObjectType, str]:
    """Split an object reference into its type and id.

    Splits on the first colon only, so ``O:A:B`` resolves to id ``A:B``.

    Raises:
        UnknownObjectType: If either part is empty or the type code is unknown
    """
    code, sep, object_id = object_ref.partition(":")
    if not sep or not code or not object_id:
        raise UnknownObjectType(object_ref)
    try:
        return ObjectType(code), object_id
    except ValueError:
        raise UnknownObjectType(object_ref) from None


def redact_token(url: str) -> str:
    """Mask the access_token query value so URLs can be logged."""
    return re.sub(r"(access_token=)[^&]*", r"\1***", url)
