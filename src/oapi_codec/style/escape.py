"""Default percent-encoding per parameter location.

Path and header styles escape every member (scalar value or object key)
before it is composed, so the separators a style adds are the only literal
ones in the fragment. Query and cookie styles escape each composed key and
value.
"""

from collections.abc import Callable
from urllib.parse import quote, unquote, unquote_plus

from oapi_codec.style.base import Array, Location, Object, ParameterValue, Scalar

Escaper = Callable[[str, Location], str]
Unescaper = Callable[[str, Location], str]

QUERY_SAFE = ",|[]"


def escape(fragment: str, location: Location) -> str:
    """Percent-encode a path member, or a query/cookie key or value."""
    if location == Location.PATH:
        return quote(fragment, safe="")
    if location in (Location.QUERY, Location.COOKIE):
        return quote(fragment, safe=QUERY_SAFE)
    return fragment


def unescape(fragment: str, location: Location) -> str:
    """Undo ``escape`` for the given location; a '+' in a query reads as a space."""
    if location == Location.HEADER:
        return fragment
    if location == Location.QUERY:
        return unquote_plus(fragment)
    return unquote(fragment)


def map_members(value: ParameterValue, fn: Callable[[str], str]) -> ParameterValue:
    """Apply ``fn`` to every scalar and object key of ``value``."""
    if isinstance(value, Scalar):
        return Scalar(value=fn(value.value))
    if isinstance(value, Array):
        return Array(elements=[map_members(v, fn) for v in value.elements])
    return Object(entries={fn(k): map_members(v, fn) for k, v in value.entries.items()})
