"""The (style, location, shape) lookup table.

Each valid combination maps to a ``Strategy`` holding the style's compose and
parse functions. Combinations missing from ``STRATEGIES`` are rejected with
``StyleMismatch`` before any value is touched.

Path and header styles compose into a single fragment string; query and
cookie styles compose into (key, value) pairs.
"""

from collections.abc import Callable, Sequence
from typing import Any, NamedTuple

from oapi_codec.errors import MalformedParameter, StyleMismatch, UnsupportedShape
from oapi_codec.style.base import (
    Array,
    Location,
    Object,
    ParameterStyle,
    ParameterValue,
    Scalar,
    Shape,
)

Pairs = list[tuple[str, str]]


class Strategy(NamedTuple):
    compose: Callable[[str, ParameterValue, bool], Any]
    parse: Callable[[str, Any, bool, Shape, Sequence[str] | None], ParameterValue | None]
    pairs: bool
    explode: frozenset[bool]


# -- member helpers -----------------------------------------------------------


def _elements(name: str, value: Array) -> list[str]:
    result = []
    for element in value.elements:
        if not isinstance(element, Scalar):
            raise UnsupportedShape(name, f"arrays of {element.shape.value} values are not supported")
        result.append(element.value)
    return result


def _entries(name: str, value: Object) -> list[tuple[str, str]]:
    result = []
    for key, member in value.entries.items():
        if not isinstance(member, Scalar):
            raise UnsupportedShape(
                name, f"field '{key}' holds a nested {member.shape.value}, which is not supported"
            )
        result.append((key, member.value))
    return result


def _flat(entries: list[tuple[str, str]]) -> list[str]:
    return [part for pair in entries for part in pair]


def _split(raw: str, sep: str) -> list[str]:
    return raw.split(sep) if raw else []


def _array(values: list[str]) -> Array:
    return Array(elements=[Scalar(value=v) for v in values])


def _object_from_tokens(name: str, raw: str, tokens: list[str]) -> Object:
    if len(tokens) % 2:
        raise MalformedParameter(name, raw, "object values need an even number of key,value tokens")
    return Object(entries={tokens[i]: Scalar(value=tokens[i + 1]) for i in range(0, len(tokens), 2)})


def _object_from_assignments(name: str, raw: str, parts: list[str]) -> Object:
    entries = {}
    for part in parts:
        key, sep, member = part.partition("=")
        if not sep:
            raise MalformedParameter(name, raw, f"expected key=value, got '{part}'")
        entries[key] = Scalar(value=member)
    return Object(entries=entries)


# -- simple -------------------------------------------------------------------


def compose_simple(name: str, value: ParameterValue, explode: bool) -> str:
    if isinstance(value, Scalar):
        return value.value
    if isinstance(value, Array):
        return ",".join(_elements(name, value))
    entries = _entries(name, value)
    if explode:
        return ",".join(f"{k}={v}" for k, v in entries)
    return ",".join(_flat(entries))


def parse_simple(name: str, raw: str, explode: bool, shape: Shape, fields=None) -> ParameterValue:
    if shape == Shape.SCALAR:
        return Scalar(value=raw)
    if shape == Shape.ARRAY:
        return _array(_split(raw, ","))
    if explode:
        return _object_from_assignments(name, raw, _split(raw, ","))
    return _object_from_tokens(name, raw, _split(raw, ","))


# -- label --------------------------------------------------------------------


def compose_label(name: str, value: ParameterValue, explode: bool) -> str:
    if isinstance(value, Array) and explode:
        return "." + ".".join(_elements(name, value))
    if isinstance(value, Object) and explode:
        return "." + ".".join(f"{k}={v}" for k, v in _entries(name, value))
    return "." + compose_simple(name, value, False)


def parse_label(name: str, raw: str, explode: bool, shape: Shape, fields=None) -> ParameterValue:
    if not raw.startswith("."):
        raise MalformedParameter(name, raw, "label values must start with '.'")
    body = raw[1:]
    if shape == Shape.SCALAR or not explode:
        return parse_simple(name, body, False, shape)
    if shape == Shape.ARRAY:
        return _array(_split(body, "."))
    return _object_from_assignments(name, raw, _split(body, "."))


# -- matrix -------------------------------------------------------------------


def compose_matrix(name: str, value: ParameterValue, explode: bool) -> str:
    if isinstance(value, Array) and explode:
        return "".join(f";{name}={v}" for v in _elements(name, value))
    if isinstance(value, Object) and explode:
        return "".join(f";{k}={v}" for k, v in _entries(name, value))
    return f";{name}=" + compose_simple(name, value, False)


def parse_matrix(name: str, raw: str, explode: bool, shape: Shape, fields=None) -> ParameterValue:
    if not raw.startswith(";"):
        raise MalformedParameter(name, raw, "matrix values must start with ';'")
    prefix = f"{name}="
    segments = raw[1:].split(";")
    if shape == Shape.OBJECT and explode:
        return _object_from_assignments(name, raw, segments)
    for segment in segments:
        if not segment.startswith(prefix):
            raise MalformedParameter(name, raw, f"expected '{prefix}' in every matrix segment")
    values = [segment[len(prefix):] for segment in segments]
    if shape == Shape.ARRAY and explode:
        return _array(values)
    if len(values) != 1:
        raise MalformedParameter(name, raw, "multiple values for a single value parameter")
    return parse_simple(name, values[0], False, shape)


# -- form ---------------------------------------------------------------------


def _values_for(name: str, pairs: Pairs) -> list[str]:
    return [v for k, v in pairs if k == name]


def _single(name: str, values: list[str]) -> str:
    if len(values) != 1:
        raise MalformedParameter(name, values, "multiple values for a single value parameter")
    return values[0]


def compose_form(name: str, value: ParameterValue, explode: bool) -> Pairs:
    if isinstance(value, Scalar):
        return [(name, value.value)]
    if isinstance(value, Array):
        elements = _elements(name, value)
        if explode:
            return [(name, v) for v in elements]
        return [(name, ",".join(elements))]
    entries = _entries(name, value)
    if explode:
        # Exploded objects use the field names as query keys, not the parameter name.
        return entries
    return [(name, ",".join(_flat(entries)))]


def parse_form(
    name: str, pairs: Pairs, explode: bool, shape: Shape, fields: Sequence[str] | None = None
) -> ParameterValue | None:
    if shape == Shape.OBJECT and explode:
        entries: dict[str, ParameterValue] = {}
        for key, value in pairs:
            if fields is not None and key not in fields:
                continue
            if key in entries:
                raise MalformedParameter(name, pairs, f"field '{key}' given more than once")
            entries[key] = Scalar(value=value)
        return Object(entries=entries) if entries else None

    values = _values_for(name, pairs)
    if not values:
        return None
    if shape == Shape.SCALAR:
        return Scalar(value=_single(name, values))
    if shape == Shape.ARRAY:
        if explode:
            return _array(values)
        return _array([v for value in values for v in _split(value, ",")])
    raw = _single(name, values)
    return _object_from_tokens(name, raw, _split(raw, ","))


# -- spaceDelimited / pipeDelimited -------------------------------------------


def _delimited(sep: str) -> tuple[Callable, Callable]:
    def compose(name: str, value: ParameterValue, explode: bool) -> Pairs:
        return [(name, sep.join(_elements(name, value)))]

    def parse(name: str, pairs: Pairs, explode: bool, shape: Shape, fields=None) -> ParameterValue | None:
        values = _values_for(name, pairs)
        if not values:
            return None
        return _array([v for value in values for v in _split(value, sep)])

    return compose, parse


compose_space, parse_space = _delimited(" ")
compose_pipe, parse_pipe = _delimited("|")


# -- deepObject ---------------------------------------------------------------


def compose_deep_object(name: str, value: ParameterValue, explode: bool) -> Pairs:
    result = []
    for key, member in value.entries.items():
        if not isinstance(member, Scalar):
            raise UnsupportedShape(name, f"deepObject field '{key}' is nested; nested objects are not supported")
        result.append((f"{name}[{key}]", member.value))
    return result


def parse_deep_object(name: str, pairs: Pairs, explode: bool, shape: Shape, fields=None) -> ParameterValue | None:
    prefix = f"{name}["
    entries: dict[str, ParameterValue] = {}
    for key, value in pairs:
        if not (key.startswith(prefix) and key.endswith("]")):
            continue
        field = key[len(prefix):-1]
        if "[" in field or "]" in field:
            raise UnsupportedShape(name, f"nested deepObject key '{key}' is not supported")
        if field in entries:
            raise MalformedParameter(name, pairs, f"field '{field}' given more than once")
        entries[field] = Scalar(value=value)
    return Object(entries=entries) if entries else None


# -- the table ----------------------------------------------------------------

_ALL_SHAPES = (Shape.SCALAR, Shape.ARRAY, Shape.OBJECT)
_ANY_EXPLODE = frozenset({True, False})
_NO_EXPLODE = frozenset({False})

_VALID = (
    (ParameterStyle.SIMPLE, (Location.PATH, Location.HEADER), _ALL_SHAPES,
     Strategy(compose_simple, parse_simple, False, _ANY_EXPLODE)),
    (ParameterStyle.LABEL, (Location.PATH,), _ALL_SHAPES,
     Strategy(compose_label, parse_label, False, _ANY_EXPLODE)),
    (ParameterStyle.MATRIX, (Location.PATH,), _ALL_SHAPES,
     Strategy(compose_matrix, parse_matrix, False, _ANY_EXPLODE)),
    (ParameterStyle.FORM, (Location.QUERY, Location.COOKIE), _ALL_SHAPES,
     Strategy(compose_form, parse_form, True, _ANY_EXPLODE)),
    (ParameterStyle.SPACE_DELIMITED, (Location.QUERY,), (Shape.ARRAY,),
     Strategy(compose_space, parse_space, True, _NO_EXPLODE)),
    (ParameterStyle.PIPE_DELIMITED, (Location.QUERY,), (Shape.ARRAY,),
     Strategy(compose_pipe, parse_pipe, True, _NO_EXPLODE)),
    (ParameterStyle.DEEP_OBJECT, (Location.QUERY,), (Shape.OBJECT,),
     Strategy(compose_deep_object, parse_deep_object, True, _ANY_EXPLODE)),
)

STRATEGIES: dict[tuple[ParameterStyle, Location, Shape], Strategy] = {
    (style, location, shape): strategy
    for style, locations, shapes, strategy in _VALID
    for location in locations
    for shape in shapes
}


def lookup(
    name: str,
    style: ParameterStyle,
    location: Location,
    shape: Shape,
    explode: bool,
) -> Strategy:
    """Return the strategy for a combination, or raise ``StyleMismatch``."""
    strategy = STRATEGIES.get((style, location, shape))
    if strategy is None:
        raise StyleMismatch(name, style.value, location.value, shape.value)
    if explode not in strategy.explode:
        raise StyleMismatch(name, style.value, location.value, shape.value, explode=explode)
    return strategy
