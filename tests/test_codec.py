"""Tests for endpointkit.codec -- decoding, key casing and date conventions."""

from __future__ import annotations

import datetime as dt
import json
from dataclasses import dataclass
from typing import Optional

import pytest
from pydantic import BaseModel

from endpointkit.codec import decode, encode_body, to_camel, to_snake, transform_keys
from endpointkit.exceptions import DecodeFailureError
from endpointkit.models import DateFormat, DecodeConventions, KeyCasing

CAMEL = DecodeConventions(key_casing=KeyCasing.CAMEL)
EPOCH = DecodeConventions(date_format=DateFormat.EPOCH_SECONDS)


class User(BaseModel):
    id: int
    display_name: str
    avatar_url: Optional[str] = None


class Event(BaseModel):
    name: str
    starts_at: dt.datetime


class Schedule(BaseModel):
    events: list[Event]
    ends_at: Optional[dt.datetime] = None


@dataclass
class Point:
    x_pos: int
    y_pos: int


class TestKeyConversion:
    @pytest.mark.parametrize(
        "camel, snake",
        [
            ("displayName", "display_name"),
            ("avatarURL", "avatar_url"),
            ("userID", "user_id"),
            ("id", "id"),
            ("HTTPStatus", "http_status"),
        ],
    )
    def test_to_snake(self, camel: str, snake: str) -> None:
        assert to_snake(camel) == snake

    def test_to_camel(self) -> None:
        assert to_camel("display_name") == "displayName"
        assert to_camel("id") == "id"
        assert to_camel("_private_key") == "_privateKey"

    def test_transform_keys_is_recursive(self) -> None:
        data = {"outerKey": [{"innerKey": 1}], "plain": "valueStaysCamel"}
        assert transform_keys(data, to_snake) == {
            "outer_key": [{"inner_key": 1}],
            "plain": "valueStaysCamel",
        }


class TestDecode:
    def test_model(self) -> None:
        user = decode(b'{"id": 1, "display_name": "Ada"}', User)
        assert user == User(id=1, display_name="Ada")

    def test_camel_case_wire_keys(self) -> None:
        user = decode(b'{"id": 1, "displayName": "Ada", "avatarURL": "a.png"}', User, CAMEL)
        assert user.display_name == "Ada"
        assert user.avatar_url == "a.png"

    def test_list_of_models(self) -> None:
        users = decode(b'[{"id": 1, "display_name": "A"}, {"id": 2, "display_name": "B"}]', list[User])
        assert [u.id for u in users] == [1, 2]

    def test_dataclass_target(self) -> None:
        assert decode(b'{"xPos": 1, "yPos": 2}', Point, CAMEL) == Point(1, 2)

    def test_target_none_skips_decoding(self) -> None:
        assert decode(b"not json at all", None) is None

    def test_empty_body_decodes_to_none_for_optional(self) -> None:
        assert decode(b"", Optional[User]) is None

    def test_iso_date(self) -> None:
        event = decode(b'{"name": "launch", "starts_at": "2024-05-01T12:00:00+00:00"}', Event)
        assert event.starts_at == dt.datetime(2024, 5, 1, 12, tzinfo=dt.timezone.utc)

    def test_epoch_date(self) -> None:
        event = decode(b'{"name": "launch", "starts_at": 1714564800}', Event, EPOCH)
        assert event.starts_at == dt.datetime(2024, 5, 1, 12, tzinfo=dt.timezone.utc)

    @pytest.mark.parametrize(
        "body",
        [
            b"{not json",
            b'{"id": "abc", "display_name": "Ada"}',
            b'{"display_name": "Ada"}',
            b"[]",
            b"\xff\xfe",
            b'{"id": "42", "display_name": "Ada"}',
            b'{"id": 1.0, "display_name": "Ada"}',
            b'{"id": 1, "display_name": 7}',
        ],
    )
    def test_failures_raise_decode_failure(self, body: bytes) -> None:
        with pytest.raises(DecodeFailureError) as exc_info:
            decode(body, User)
        assert exc_info.value.cause is not None

    def test_malformed_date_is_decode_failure(self) -> None:
        with pytest.raises(DecodeFailureError):
            decode(b'{"name": "x", "starts_at": "yesterday-ish"}', Event)

    def test_epoch_number_rejected_under_iso(self) -> None:
        with pytest.raises(DecodeFailureError):
            decode(b'{"name": "launch", "starts_at": 1714564800}', Event)

    def test_iso_string_rejected_under_epoch(self) -> None:
        with pytest.raises(DecodeFailureError):
            decode(b'{"name": "launch", "starts_at": "2024-05-01T12:00:00+00:00"}', Event, EPOCH)

    def test_boolean_is_not_an_epoch(self) -> None:
        with pytest.raises(DecodeFailureError):
            decode(b'{"name": "launch", "starts_at": true}', Event, EPOCH)

    def test_epoch_dates_in_nested_and_optional_fields(self) -> None:
        body = b'{"events": [{"name": "a", "startsAt": 1714564800}], "endsAt": 1714568400.5}'
        conventions = DecodeConventions(
            key_casing=KeyCasing.CAMEL, date_format=DateFormat.EPOCH_SECONDS
        )
        schedule = decode(body, Schedule, conventions)
        assert schedule.events[0].starts_at == dt.datetime(2024, 5, 1, 12, tzinfo=dt.timezone.utc)
        assert schedule.ends_at == dt.datetime(2024, 5, 1, 13, 0, 0, 500000, tzinfo=dt.timezone.utc)

    def test_optional_date_may_be_null(self) -> None:
        schedule = decode(b'{"events": [], "ends_at": null}', Schedule, EPOCH)
        assert schedule.ends_at is None

    def test_nested_iso_dates_checked(self) -> None:
        with pytest.raises(DecodeFailureError):
            decode(b'{"events": [{"name": "a", "starts_at": 1714564800}]}', Schedule)


class TestEncodeBody:
    def test_model_excludes_none(self) -> None:
        body = json.loads(encode_body(User(id=1, display_name="Ada")))
        assert body == {"id": 1, "display_name": "Ada"}

    def test_camel_case_keys(self) -> None:
        body = json.loads(encode_body({"display_name": "Ada", "nested_obj": {"a_b": 1}}, CAMEL))
        assert body == {"displayName": "Ada", "nestedObj": {"aB": 1}}

    def test_dataclass(self) -> None:
        assert json.loads(encode_body(Point(1, 2))) == {"x_pos": 1, "y_pos": 2}

    def test_iso_datetime(self) -> None:
        when = dt.datetime(2024, 5, 1, 12, tzinfo=dt.timezone.utc)
        body = json.loads(encode_body({"starts_at": when}))
        assert body == {"starts_at": "2024-05-01T12:00:00+00:00"}

    def test_epoch_datetime(self) -> None:
        when = dt.datetime(2024, 5, 1, 12, tzinfo=dt.timezone.utc)
        body = json.loads(encode_body(Event(name="launch", starts_at=when), EPOCH))
        assert body == {"name": "launch", "starts_at": 1714564800.0}

    def test_unencodable_payload_raises(self) -> None:
        with pytest.raises((TypeError, ValueError)):
            encode_body({"handle": object()})
