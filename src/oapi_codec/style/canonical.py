"""Canonical string forms for native values.

The same rules run on the client encode path and the server decode path, so
a value canonicalized here parses back to an equal value with ``parse_scalar``.
"""

import re
import uuid
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel

from oapi_codec.errors import MalformedParameter, UnsupportedShape
from oapi_codec.style.base import Array, Object, ParameterValue, Scalar, ValueSchema

SCALAR_KINDS = ("string", "integer", "number", "boolean", "date", "date-time")

_INTEGER_RE = re.compile(r"[+-]?\d+")


def canonicalize(value: Any, name: str = "") -> str:
    """Convert a native scalar into its canonical string form."""
    if isinstance(value, Enum):
        return canonicalize(value.value, name)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, str):
        return value
    raise UnsupportedShape(name, f"cannot canonicalize a value of type {type(value).__name__}")


def to_parameter_value(value: Any, name: str = "") -> ParameterValue:
    """Convert a native value (scalar, list, tuple, mapping or model) into a ParameterValue."""
    if isinstance(value, (Scalar, Array, Object)):
        return value
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Mapping):
        return Object(entries={str(k): to_parameter_value(v, name) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return Array(elements=[to_parameter_value(v, name) for v in value])
    if value is None:
        raise UnsupportedShape(name, "None has no parameter representation")
    return Scalar(value=canonicalize(value, name))


def parse_scalar(raw: str, kind: str, name: str = "") -> Any:
    """Parse a canonical string back into a native value of the given kind."""
    try:
        if kind == "integer":
            if not _INTEGER_RE.fullmatch(raw):
                raise ValueError(f"'{raw}' is not an integer")
            return int(raw)
        if kind == "number":
            return float(raw)
        if kind == "boolean":
            lowered = raw.lower()
            if lowered not in ("true", "false"):
                raise ValueError(f"'{raw}' is not a boolean")
            return lowered == "true"
        if kind == "date":
            return date.fromisoformat(raw)
        if kind == "date-time":
            return datetime.fromisoformat(raw)
    except ValueError as e:
        raise MalformedParameter(name, raw, f"expected {kind}: {e}", cause=e) from e
    return raw


def to_native(value: ParameterValue, schema: ValueSchema, name: str = "") -> Any:
    """Convert a decoded ParameterValue into native values described by ``schema``."""
    if value.shape != schema.shape:
        raise MalformedParameter(name, value.model_dump(), f"expected a {schema.shape.value} value")
    if isinstance(value, Scalar):
        return parse_scalar(value.value, schema.kind, name)
    if isinstance(value, Array):
        return [_native_member(v, schema.kind, name) for v in value.elements]
    return {
        key: _native_member(v, schema.properties.get(key, "string"), name)
        for key, v in value.entries.items()
    }


def _native_member(value: ParameterValue, kind: str, name: str) -> Any:
    if not isinstance(value, Scalar):
        raise UnsupportedShape(name, f"nested {value.shape.value} values are not supported")
    return parse_scalar(value.value, kind, name)
