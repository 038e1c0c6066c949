"""Server-side parameter binding, independent of any web framework.

A router adapter collects the raw path, query, header and cookie input of a
request and hands it to ``bind_parameters``; failures map to a 400 problem
body through ``problem_for``.
"""

from collections.abc import Mapping
from typing import Any

from loguru import logger

from oapi_codec.errors import (
    CodecError,
    MalformedParameter,
    MissingParameter,
    StyleMismatch,
    UnsupportedShape,
)
from oapi_codec.parser.base import OperationSpec, ParameterSpec
from oapi_codec.style.base import Location, Shape
from oapi_codec.style.canonical import to_native
from oapi_codec.style.decode import RawInput, decode

_CLIENT_ERRORS = (MissingParameter, MalformedParameter, StyleMismatch, UnsupportedShape)


def bind_parameters(
    operation: OperationSpec,
    path_params: Mapping[str, str] | None = None,
    query: RawInput = None,
    headers: Mapping[str, str] | None = None,
    cookies: RawInput = None,
) -> dict[str, Any]:
    """Decode every declared parameter of ``operation`` into native values.

    Args:
        operation: The operation being served.
        path_params: Path segments captured by the router, still escaped.
        query: Raw query string, mapping of key to value(s), or pairs.
        headers: Request headers; names are matched case-insensitively.
        cookies: Raw Cookie header or a mapping of cookie name to value.

    Returns:
        Native values keyed by parameter name. Absent optional parameters
        are left out.

    Raises:
        MissingParameter: A required parameter is absent.
        MalformedParameter: A parameter cannot be parsed into its schema.
    """
    lowered_headers = {k.lower(): v for k, v in (headers or {}).items()}
    path_params = path_params or {}
    bound: dict[str, Any] = {}

    try:
        for spec in operation.parameters:
            if spec.location == Location.PATH:
                raw: RawInput = path_params.get(spec.name)
            elif spec.location == Location.HEADER:
                raw = lowered_headers.get(spec.name.lower())
            elif spec.location == Location.COOKIE:
                raw = cookies
            else:
                raw = query

            others = {p.name for p in operation.parameters_in(spec.location) if p.name != spec.name}
            value = _bind(spec, raw, others)
            if value is not None:
                bound[spec.name] = value
    except CodecError as e:
        logger.info("Rejected {} {}: {}", operation.method, operation.path, e)
        raise

    return bound


def _bind(spec: ParameterSpec, raw: RawInput, others: set[str]) -> Any:
    schema = spec.value_schema
    fields = list(schema.properties) if schema.shape == Shape.OBJECT and schema.properties else None
    value = decode(
        spec.name,
        raw,
        spec.style,
        spec.explode,
        schema.shape,
        location=spec.location,
        required=spec.required,
        fields=fields,
        exclude=others,
    )
    if value is None:
        return None
    return to_native(value, schema, spec.name)


def problem_for(error: CodecError) -> tuple[int, dict[str, Any]]:
    """Map a codec error to an HTTP status and an ``{code, message}`` body."""
    status = 400 if isinstance(error, _CLIENT_ERRORS) else 500
    return status, {"code": status, "message": error.message}
