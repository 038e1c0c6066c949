"""Error taxonomy for the style codec and the response dispatcher.

Every failure the codec can report is a ``CodecError``. They are local,
recoverable conditions returned to the immediate caller:

- **StyleMismatch**: style, location and value shape do not combine
- **UnsupportedShape**: composite value nested deeper than a style allows
- **MissingParameter**: required parameter absent from the input
- **MalformedParameter**: parameter present but unparsable for its target
- **PayloadDecodeError**: a response rule matched but its body did not decode
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from oapi_codec.response.base import DecodedResponse


class ErrorCode(Enum):
    """Stable identifiers for codec failures."""

    STYLE_MISMATCH = "STYLE_MISMATCH"
    UNSUPPORTED_SHAPE = "UNSUPPORTED_SHAPE"
    MISSING_PARAMETER = "MISSING_PARAMETER"
    MALFORMED_PARAMETER = "MALFORMED_PARAMETER"
    PAYLOAD_DECODE_ERROR = "PAYLOAD_DECODE_ERROR"
    DOCUMENT_ERROR = "DOCUMENT_ERROR"


class CodecError(Exception):
    """Base class for all oapi-codec errors.

    Args:
        error_code: Identifier of the failure kind
        message: Human-readable description
        context: Structured details for diagnostics
        cause: The exception that triggered this one, if any
    """

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.context = context or {}
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def __repr__(self) -> str:
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{self.__class__.__name__}(error_code='{self.error_code.value}', "
            f"message='{self.message}'{context_str})"
        )


class StyleMismatch(CodecError):
    """Raised when a (style, location, shape) combination is not serializable."""

    def __init__(
        self,
        name: str,
        style: str,
        location: str,
        shape: str,
        explode: bool | None = None,
    ) -> None:
        self.name = name
        detail = f"style '{style}'"
        if explode is not None:
            detail += f" (explode={str(explode).lower()})"
        super().__init__(
            ErrorCode.STYLE_MISMATCH,
            f"Parameter '{name}': {detail} cannot serialize a {shape} value in {location}",
            context={
                "name": name,
                "style": style,
                "location": location,
                "shape": shape,
                "explode": explode,
            },
        )


class UnsupportedShape(CodecError):
    """Raised when a value is nested deeper than its style can express."""

    def __init__(self, name: str, detail: str) -> None:
        self.name = name
        super().__init__(
            ErrorCode.UNSUPPORTED_SHAPE,
            f"Parameter '{name}': {detail}",
            context={"name": name},
        )


class MissingParameter(CodecError):
    """Raised when a required parameter is absent."""

    def __init__(self, name: str, location: str) -> None:
        self.name = name
        self.location = location
        super().__init__(
            ErrorCode.MISSING_PARAMETER,
            f"{location.capitalize()} argument {name} is required, but not found",
            context={"name": name, "location": location},
        )


class MalformedParameter(CodecError):
    """Raised when a present parameter cannot be parsed into its target."""

    def __init__(
        self,
        name: str,
        raw: Any,
        reason: str,
        cause: Exception | None = None,
    ) -> None:
        self.name = name
        self.raw = raw
        self.reason = reason
        super().__init__(
            ErrorCode.MALFORMED_PARAMETER,
            f"Invalid format for parameter {name}: {reason}",
            context={"name": name, "raw": raw, "reason": reason},
            cause=cause,
        )


class PayloadDecodeError(CodecError):
    """Raised when the body of a matched response rule fails to decode.

    The undecoded response stays reachable through ``response`` so callers
    can still inspect the raw status, headers and body.
    """

    def __init__(
        self,
        rule: str,
        response: DecodedResponse,
        cause: Exception,
        body_preview: str = "",
    ) -> None:
        self.rule = rule
        self.response = response
        super().__init__(
            ErrorCode.PAYLOAD_DECODE_ERROR,
            f"Response matched rule {rule} but its body could not be decoded: {cause}",
            context={
                "rule": rule,
                "status_code": response.status_code,
                "body_preview": body_preview,
            },
            cause=cause,
        )


class DocumentError(CodecError):
    """Raised when an OpenAPI document cannot be read or projected."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(ErrorCode.DOCUMENT_ERROR, message, cause=cause)
