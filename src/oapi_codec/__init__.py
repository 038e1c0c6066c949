"""OpenAPI 3 parameter style codec and content-negotiated response dispatcher."""

from loguru import logger

from oapi_codec.errors import (
    CodecError,
    DocumentError,
    MalformedParameter,
    MissingParameter,
    PayloadDecodeError,
    StyleMismatch,
    UnsupportedShape,
)
from oapi_codec.response import DecodedResponse, ResponseRule, dispatch
from oapi_codec.style import (
    EncodeRequest,
    Location,
    ParameterStyle,
    Shape,
    decode,
    encode,
    style_param,
)

__version__ = "0.1.0"

logger.disable("oapi_codec")

__all__ = [
    "CodecError",
    "DecodedResponse",
    "DocumentError",
    "EncodeRequest",
    "Location",
    "MalformedParameter",
    "MissingParameter",
    "ParameterStyle",
    "PayloadDecodeError",
    "ResponseRule",
    "Shape",
    "StyleMismatch",
    "UnsupportedShape",
    "__version__",
    "decode",
    "dispatch",
    "encode",
    "style_param",
]
