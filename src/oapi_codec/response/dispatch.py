"""Content-negotiated response dispatch."""

from collections.abc import Mapping, Sequence

from loguru import logger

from oapi_codec.config import get_settings
from oapi_codec.errors import PayloadDecodeError
from oapi_codec.response.base import DecodedResponse, ResponseRule
from oapi_codec.response.decoders import Unmarshaler, unmarshal as default_unmarshal


def select_rule(
    status: int,
    content_type: str | None,
    rules: Sequence[ResponseRule],
) -> ResponseRule | None:
    """Pick the rule a response matches.

    A rule matches when both its status and content-type matchers accept the
    response. Among matches the most specific status matcher wins (exact code,
    then range, then ``default``); equally specific matches go to the earliest.
    """
    best: ResponseRule | None = None
    for rule in rules:
        if not (rule.accepts_status(status) and rule.accepts_content_type(content_type)):
            continue
        if best is None or rule.specificity > best.specificity:
            best = rule
    return best


def dispatch(
    status: int,
    content_type: str | None,
    body: bytes,
    rules: Sequence[ResponseRule],
    headers: Mapping[str, str] | None = None,
    unmarshal: Unmarshaler | None = None,
) -> DecodedResponse:
    """Decode a materialized HTTP response into the shape of its matching rule.

    Returns a DecodedResponse with no rule and no payload when nothing
    matches; whether that is an error is the caller's decision.

    Raises:
        PayloadDecodeError: A rule matched but its body failed to decode. The
            undecoded response is attached to the error.
    """
    unmarshal = unmarshal or default_unmarshal
    response = DecodedResponse(
        body=body,
        status_code=status,
        headers=dict(headers or {}),
    )

    rule = select_rule(status, content_type, rules)
    if rule is None:
        logger.debug("No response rule matched status {} with content type {!r}", status, content_type)
        return response

    try:
        payload = unmarshal(body, content_type, rule)
    except Exception as e:
        preview_size = get_settings().body_preview_bytes
        preview = body[:preview_size].decode("utf-8", errors="replace")
        raise PayloadDecodeError(rule.name, response, e, body_preview=preview) from e

    logger.debug("Response {} ({!r}) matched rule {}", status, content_type, rule.name)
    return response.model_copy(update={"rule": rule.name, "payload": payload})
