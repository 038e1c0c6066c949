"""Serialize parameter values into path segments, query strings, headers and cookies."""

from typing import Any

from oapi_codec.style.base import EncodeRequest, Location, ParameterStyle
from oapi_codec.style.canonical import to_parameter_value
from oapi_codec.style.escape import Escaper, escape as default_escape, map_members
from oapi_codec.style.table import lookup

_PAIR_SEPARATORS = {Location.QUERY: "&", Location.COOKIE: "; "}


def encode(request: EncodeRequest, escape: Escaper | None = None) -> str:
    """Encode one parameter according to its style and explode flag.

    Path and header parameters yield the fragment itself; query and cookie
    parameters yield ``key=value`` pairs joined the way the location joins
    them. Path and header members are escaped before composition, query and
    cookie keys and values after it; separators added by the style stay
    literal either way.

    Raises:
        StyleMismatch: The style, location and value shape do not combine.
        UnsupportedShape: A composite value holds nested composites.
    """
    escape = escape or default_escape
    location = request.location
    strategy = lookup(request.name, request.style, location, request.value.shape, request.explode)

    if not strategy.pairs:
        value = map_members(request.value, lambda member: escape(member, location))
        return strategy.compose(request.name, value, request.explode)

    composed = strategy.compose(request.name, request.value, request.explode)
    return _PAIR_SEPARATORS[location].join(
        f"{escape(key, location)}={escape(value, location)}" for key, value in composed
    )


def style_param(
    style: ParameterStyle | str,
    explode: bool,
    name: str,
    value: Any,
    location: Location | str | None = None,
    escape: Escaper | None = None,
) -> str:
    """Canonicalize a native value and encode it in one step.

    When ``location`` is omitted, path styles go to the path and the others
    to the query.
    """
    style = ParameterStyle(style)
    if location is None:
        location = (
            Location.PATH
            if style in (ParameterStyle.SIMPLE, ParameterStyle.LABEL, ParameterStyle.MATRIX)
            else Location.QUERY
        )
    request = EncodeRequest(
        name=name,
        value=to_parameter_value(value, name),
        style=style,
        explode=explode,
        location=Location(location),
    )
    return encode(request, escape=escape)
