"""Parse incoming parameters back into ParameterValues.

Decoding is the inverse of ``encode``. The target shape decides how the wire
data is read; nothing is guessed from the data alone.
"""

from collections.abc import Collection, Mapping, Sequence
from typing import Any

from oapi_codec.errors import MissingParameter
from oapi_codec.style.base import Location, ParameterStyle, ParameterValue, Shape
from oapi_codec.style.escape import Unescaper, map_members, unescape as default_unescape
from oapi_codec.style.table import Pairs, lookup

RawInput = str | Mapping[str, Any] | Sequence[tuple[str, str]] | None


def decode(
    name: str,
    raw: RawInput,
    style: ParameterStyle,
    explode: bool,
    shape: Shape,
    location: Location = Location.QUERY,
    required: bool = False,
    fields: Sequence[str] | None = None,
    exclude: Collection[str] = (),
    unescape: Unescaper | None = None,
) -> ParameterValue | None:
    """Decode one parameter.

    Args:
        name: Parameter name as declared.
        raw: For path and header, the fragment (``None`` when absent). For
            query and cookie, the raw query string or Cookie header, a
            mapping of key to value or list of values, or (key, value) pairs.
            Mapping and pair values are taken as already unescaped.
        style: Declared serialization style.
        explode: Declared explode flag.
        shape: Requested target shape.
        location: Where the parameter travels.
        required: Raise instead of returning ``None`` when absent.
        fields: Field names of an exploded form object; all keys when omitted.
        exclude: Query or cookie keys that belong to other parameters and
            are never read for this one.
        unescape: Replacement for the default per-location unescaper.

    Returns:
        The decoded value, or ``None`` for an absent optional parameter.

    Raises:
        StyleMismatch: The style, location and shape do not combine.
        MissingParameter: ``required`` is set and the parameter is absent.
        MalformedParameter: The input cannot be read as ``shape``.
        UnsupportedShape: The input encodes nesting the style cannot express.
    """
    unescape = unescape or default_unescape
    strategy = lookup(name, style, location, shape, explode)

    if strategy.pairs:
        pairs = [(k, v) for k, v in _pairs(raw, location, unescape) if k not in exclude]
        value = strategy.parse(name, pairs, explode, shape, fields)
    elif raw is None:
        value = None
    else:
        parsed = strategy.parse(name, str(raw), explode, shape, fields)
        value = map_members(parsed, lambda member: unescape(member, location))

    if value is None and required:
        raise MissingParameter(name, location.value)
    return value


def _pairs(raw: RawInput, location: Location, unescape: Unescaper) -> Pairs:
    if raw is None:
        return []
    if isinstance(raw, str):
        separator = ";" if location == Location.COOKIE else "&"
        pairs = []
        for item in raw.split(separator):
            item = item.strip()
            if not item:
                continue
            key, _, value = item.partition("=")
            pairs.append((unescape(key, location), unescape(value, location)))
        return pairs
    if isinstance(raw, Mapping):
        pairs = []
        for key, value in raw.items():
            if isinstance(value, (list, tuple)):
                pairs.extend((key, str(v)) for v in value)
            else:
                pairs.append((key, str(value)))
        return pairs
    return [(key, value) for key, value in raw]
