"""JSON decode/encode pipeline with key-casing and date conventions.

Response bodies are parsed as JSON, their object keys rewritten according to
:class:`~endpointkit.models.KeyCasing`, and the result validated against the
caller's target type with a :class:`pydantic.TypeAdapter` in strict mode.
Any mismatch -- malformed JSON, a missing required field, a wrong type, a
date in the wrong wire form -- raises
:class:`~endpointkit.exceptions.DecodeFailureError`.  A partially populated
value is never returned.

Request bodies go the other way through :func:`encode_body`: models,
dataclasses and mappings are reduced to JSON-compatible data, keys are
rewritten for the wire, and datetimes are rendered per
:class:`~endpointkit.models.DateFormat`.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import functools
import json
import re
from typing import Any, Callable, Optional

from pydantic import BaseModel, TypeAdapter
from pydantic.errors import PydanticInvalidForJsonSchema
from pydantic_core import to_jsonable_python

from endpointkit.exceptions import DecodeFailureError
from endpointkit.models import DateFormat, DecodeConventions, KeyCasing

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake(key: str) -> str:
    """``displayName`` -> ``display_name``; ``avatarURL`` -> ``avatar_url``."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def to_camel(key: str) -> str:
    """``display_name`` -> ``displayName``.  Leading underscores are kept."""
    stripped = key.lstrip("_")
    prefix = key[: len(key) - len(stripped)]
    head, *rest = stripped.split("_")
    return prefix + head + "".join(part[:1].upper() + part[1:] for part in rest)


def transform_keys(data: Any, convert: Callable[[str], str]) -> Any:
    """Recursively rewrite every mapping key in *data* with *convert*."""
    if isinstance(data, dict):
        return {
            (convert(k) if isinstance(k, str) else k): transform_keys(v, convert)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [transform_keys(item, convert) for item in data]
    return data


def _build_decoder(target: Any) -> tuple[TypeAdapter[Any], dict[str, Any]]:
    adapter = TypeAdapter(target)
    try:
        schema = adapter.json_schema(mode="validation")
    except PydanticInvalidForJsonSchema:
        # no datetime positions to check
        schema = {}
    return adapter, schema


@functools.lru_cache(maxsize=256)
def _cached_decoder(target: Any) -> tuple[TypeAdapter[Any], dict[str, Any]]:
    return _build_decoder(target)


def _decoder(target: Any) -> tuple[TypeAdapter[Any], dict[str, Any]]:
    try:
        return _cached_decoder(target)
    except TypeError:
        # unhashable type expressions
        return _build_decoder(target)


def _deref(schema: dict[str, Any], defs: dict[str, Any]) -> dict[str, Any]:
    while "$ref" in schema:
        schema = defs.get(schema["$ref"].rsplit("/", 1)[-1], {})
    if "allOf" in schema and len(schema["allOf"]) == 1:
        return _deref(schema["allOf"][0], defs)
    return schema


def _wire_datetime(value: Any, date_format: DateFormat) -> str:
    """Check a datetime wire value against *date_format*; return it as ISO text."""
    if date_format is DateFormat.ISO8601:
        if not isinstance(value, str):
            raise ValueError(f"Expected an ISO 8601 date string, got {value!r}")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Expected a date as epoch seconds, got {value!r}")
    try:
        return dt.datetime.fromtimestamp(value, tz=dt.timezone.utc).isoformat()
    except (OverflowError, OSError) as exc:
        raise ValueError(f"Epoch timestamp out of range: {value!r}") from exc


def _pick_branch(data: Any, branches: list[dict[str, Any]]) -> Optional[dict[str, Any]]:
    if isinstance(data, dict):
        return next((b for b in branches if b.get("type") == "object" or "properties" in b), None)
    if isinstance(data, list):
        return next((b for b in branches if b.get("type") == "array"), None)
    if branches and all(b.get("format") == "date-time" for b in branches):
        return branches[0]
    return None


def _apply_date_format(
    data: Any, schema: dict[str, Any], defs: dict[str, Any], date_format: DateFormat
) -> Any:
    """Walk *data* alongside its JSON schema, normalising datetime positions.

    Every value the schema marks ``date-time`` must use the configured wire
    form; epoch numbers are rewritten to ISO text so strict validation can
    parse them.  Values outside datetime positions are returned untouched.
    """
    if data is None:
        return None
    schema = _deref(schema, defs)
    if schema.get("format") == "date-time":
        return _wire_datetime(data, date_format)
    for combinator in ("anyOf", "oneOf"):
        if combinator in schema:
            branches = [_deref(b, defs) for b in schema[combinator]]
            branch = _pick_branch(data, [b for b in branches if b.get("type") != "null"])
            if branch is None:
                return data
            return _apply_date_format(data, branch, defs, date_format)
    if isinstance(data, dict):
        properties = schema.get("properties", {})
        extra = schema.get("additionalProperties")
        fallback = extra if isinstance(extra, dict) else {}
        return {
            key: _apply_date_format(value, properties.get(key, fallback), defs, date_format)
            for key, value in data.items()
        }
    if isinstance(data, list):
        prefix = schema.get("prefixItems", [])
        items = schema.get("items")
        rest = items if isinstance(items, dict) else {}
        return [
            _apply_date_format(value, prefix[i] if i < len(prefix) else rest, defs, date_format)
            for i, value in enumerate(data)
        ]
    return data


def decode(
    content: bytes,
    target: Any,
    conventions: Optional[DecodeConventions] = None,
) -> Any:
    """Decode a response body into an instance of *target*.

    Validation is strict: ``"42"`` does not satisfy an ``int`` field and
    ``1.0`` does not satisfy an ``int`` either.  Datetime fields accept only
    the wire form selected by ``conventions.date_format``: ISO 8601 strings
    for ``ISO8601``, numbers for ``EPOCH_SECONDS``.

    Args:
        content: Raw response body.
        target: Any type pydantic can validate (a model, a dataclass,
            ``list[Model]``, ``dict[str, int]``...).  ``None`` means no body
            is expected and returns ``None`` without parsing.
        conventions: Key-casing and date conventions; defaults apply when
            omitted.

    Returns:
        The validated value.

    Raises:
        DecodeFailureError: If the body is not JSON or does not match *target*.
    """
    if target is None:
        return None
    conventions = conventions or DecodeConventions()
    adapter, schema = _decoder(target)

    try:
        data = json.loads(content) if content.strip() else None
        if conventions.key_casing is KeyCasing.CAMEL:
            data = transform_keys(data, to_snake)
        data = _apply_date_format(data, schema, schema.get("$defs", {}), conventions.date_format)
        return adapter.validate_json(json.dumps(data), strict=True)
    except ValueError as exc:
        # json.JSONDecodeError, UnicodeDecodeError and pydantic.ValidationError
        raise DecodeFailureError(exc) from exc


def _plain(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True, exclude_none=True)
    if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        return dataclasses.asdict(payload)
    return payload


def _render_dates(data: Any, date_format: DateFormat) -> Any:
    if isinstance(data, dt.datetime):
        if date_format is DateFormat.EPOCH_SECONDS:
            return data.timestamp()
        return data.isoformat()
    if isinstance(data, dt.date):
        return data.isoformat()
    if isinstance(data, dict):
        return {k: _render_dates(_plain(v), date_format) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [_render_dates(_plain(item), date_format) for item in data]
    return data


def encode_body(payload: Any, conventions: Optional[DecodeConventions] = None) -> bytes:
    """Serialise a request payload to JSON bytes under *conventions*.

    Raises:
        TypeError, ValueError: If the payload cannot be represented as JSON.
    """
    conventions = conventions or DecodeConventions()
    data = _render_dates(_plain(payload), conventions.date_format)
    if conventions.key_casing is KeyCasing.CAMEL:
        data = transform_keys(data, to_camel)
    return json.dumps(data, default=to_jsonable_python, separators=(",", ":")).encode("utf-8")
