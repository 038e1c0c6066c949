"""Response dispatcher: map (status, content type, body) to one typed payload."""

from oapi_codec.response.base import DecodedResponse, ResponseRule, parse_status
from oapi_codec.response.decoders import unmarshal
from oapi_codec.response.dispatch import dispatch, select_rule

__all__ = [
    "DecodedResponse",
    "ResponseRule",
    "dispatch",
    "parse_status",
    "select_rule",
    "unmarshal",
]
