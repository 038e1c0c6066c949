"""Parameter style codec: OpenAPI style/explode serialization in both directions."""

from oapi_codec.style.base import (
    Array,
    EncodeRequest,
    Location,
    Object,
    ParameterStyle,
    ParameterValue,
    Scalar,
    Shape,
    ValueSchema,
    default_explode,
    default_style,
)
from oapi_codec.style.canonical import canonicalize, parse_scalar, to_native, to_parameter_value
from oapi_codec.style.decode import decode
from oapi_codec.style.encode import encode, style_param

__all__ = [
    "Array",
    "EncodeRequest",
    "Location",
    "Object",
    "ParameterStyle",
    "ParameterValue",
    "Scalar",
    "Shape",
    "ValueSchema",
    "canonicalize",
    "decode",
    "default_explode",
    "default_style",
    "encode",
    "parse_scalar",
    "style_param",
    "to_native",
    "to_parameter_value",
]
