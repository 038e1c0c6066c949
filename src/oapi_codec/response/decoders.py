"""Default body unmarshaler used by ``dispatch``.

JSON bodies are handed to pydantic, which parses and validates them into the
rule's model in one pass. The dispatcher itself never parses a body.
"""

from collections.abc import Callable
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter

from oapi_codec.response.base import ResponseRule

Unmarshaler = Callable[[bytes, str | None, ResponseRule], Any]


@lru_cache(maxsize=256)
def _adapter(model: Any) -> TypeAdapter:
    return TypeAdapter(model)


def unmarshal(body: bytes, content_type: str | None, rule: ResponseRule) -> Any:
    """Decode ``body`` for a matched rule.

    Rules without a model carry no payload. JSON media types are validated
    against the model. ``text/*`` bodies are decoded to ``str`` and validated
    against models other than ``str``. Any other media type is returned as
    bytes, which only a ``bytes`` or ``Any`` model accepts.

    Raises:
        pydantic.ValidationError: The body does not fit the model.
        UnicodeDecodeError: A text body is not valid in its charset.
        TypeError: A raw body was matched to a model other than bytes.
    """
    if rule.model is None:
        return None

    media_type = (content_type or "").lower()
    if "json" in media_type:
        return _adapter(rule.model).validate_json(body)
    if media_type.startswith("text/"):
        text = body.decode(_charset(media_type))
        if rule.model in (str, Any):
            return text
        return _adapter(rule.model).validate_python(text)
    if rule.model not in (bytes, Any):
        raise TypeError(f"cannot decode {media_type or 'an untyped body'} into {rule.model!r}")
    return body


def _charset(media_type: str) -> str:
    for param in media_type.split(";")[1:]:
        key, _, value = param.strip().partition("=")
        if key == "charset" and value:
            return value.strip('"')
    return "utf-8"
