"""Unit tests for webhook event parsing."""
import json

import pytest
from pydantic import ValidationError

from merchant_webhooks.exceptions import MalformedPayload
from merchant_webhooks.models import Event, Update, UpdateType, parse_event
from tests.fixtures import clover_webhooks


class TestParseEvent:
    """Test suite for parse_event."""

    def test_parses_order_created(self) -> None:
        """Test a full payload is parsed into typed updates."""
        event = parse_event(clover_webhooks.order_created())

        assert event.app_id == "A1"
        assert event.verification_code is None
        assert list(event.merchants) == ["M1"]
        update = event.merchants["M1"][0]
        assert update.object_ref == "O:ORD123"
        assert update.type is UpdateType.CREATE
        assert update.timestamp_millis == "1000"

    def test_parses_json_bytes_and_text(self) -> None:
        """Test raw JSON bodies are accepted as bytes and str."""
        raw = json.dumps(clover_webhooks.order_created())

        assert parse_event(raw) == parse_event(raw.encode("utf-8"))

    def test_verification_only_has_empty_merchants(self) -> None:
        """Test missing merchants yields an empty mapping, not an error."""
        event = parse_event(clover_webhooks.verification_only())

        assert event.verification_code == "123456"
        assert event.app_id is None
        assert event.merchants == {}
        assert event.update_count() == 0

    def test_null_merchants_is_empty(self) -> None:
        """Test an explicit null merchants value is treated as empty."""
        event = parse_event({"appId": "A1", "merchants": None})

        assert event.merchants == {}

    def test_numeric_timestamp_coerced_to_string(self) -> None:
        """Test numeric ts values become their string form."""
        event = parse_event(clover_webhooks.mixed_updates())

        assert event.merchants["M1"][0].timestamp_millis == "1537970958000"

    def test_update_order_preserved(self) -> None:
        """Test updates keep delivery order."""
        event = parse_event(clover_webhooks.mixed_updates())

        refs = [u.object_ref for u in event.merchants["M1"]]
        assert refs == ["C:CUST1", "no-colon", "I:ITEM9", "Z:WHAT", "P:PAY7"]
        assert event.update_count() == 6

    def test_unknown_fields_ignored(self) -> None:
        """Test extra fields are ignored at every level."""
        payload = clover_webhooks.order_created()
        payload["extra"] = {"nested": True}
        payload["merchants"]["M1"][0]["source"] = "pos"

        event = parse_event(payload)

        assert event.merchants["M1"][0].object_ref == "O:ORD123"

    @pytest.mark.parametrize(
        "raw",
        [
            b"not json",
            b"[1, 2, 3]",
            b"",
            '{"merchants": {"M1": "not-a-list"}}',
            '{"merchants": {"M1": [{"type": "CREATE"}]}}',
            '{"merchants": {"": [{"objectId": "O:1", "type": "CREATE"}]}}',
        ],
    )
    def test_malformed_payloads_raise(self, raw: bytes | str) -> None:
        """Test bodies that don't fit the Event shape raise MalformedPayload."""
        with pytest.raises(MalformedPayload):
            parse_event(raw)

    def test_unknown_update_type_keeps_other_merchants(self) -> None:
        """Test an unrecognized update type doesn't reject the notification."""
        event = parse_event(
            '{"merchants": {"M1": [{"objectId": "O:1", "type": "CREATE"}],'
            ' "M2": [{"objectId": "O:2", "type": "ARCHIVE"}]}}'
        )

        assert event.merchants["M1"][0].type is UpdateType.CREATE
        assert event.merchants["M2"][0].object_ref == "O:2"
        assert event.merchants["M2"][0].type is None

    @pytest.mark.parametrize("value", [None, 7, ["CREATE"]])
    def test_missing_or_odd_update_type_is_none(self, value: object) -> None:
        event = parse_event({"merchants": {"M1": [{"objectId": "O:1", "type": value}]}})

        assert event.merchants["M1"][0].type is None

    def test_update_type_omitted_is_none(self) -> None:
        event = parse_event({"merchants": {"M1": [{"objectId": "O:1"}]}})

        assert event.merchants["M1"][0].type is None

    def test_unrecognized_object_ref_is_not_a_parse_error(self) -> None:
        """Test object references are only validated when resolved."""
        event = parse_event(clover_webhooks.unknown_object_type())

        assert event.merchants["M1"][0].object_ref == "X:ORD123"


class TestImmutability:
    """Events and updates are frozen."""

    def test_event_is_frozen(self) -> None:
        event = parse_event(clover_webhooks.order_created())

        with pytest.raises(ValidationError):
            event.app_id = "other"  # type: ignore[misc]

    def test_update_is_frozen(self) -> None:
        update = Update(object_ref="O:1", type=UpdateType.UPDATE)

        with pytest.raises(ValidationError):
            update.object_ref = "O:2"  # type: ignore[misc]

    def test_updates_stored_as_tuple(self) -> None:
        event = Event.model_validate(clover_webhooks.order_created())

        assert isinstance(event.merchants["M1"], tuple)
