"""Response rules and the decoded response they produce."""

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_RANGE_RE = re.compile(r"[1-5]XX")

DEFAULT_STATUS = "default"


class ResponseRule(BaseModel):
    """One (status, content type) -> target entry of a response rule table.

    ``status`` is an exact code, an OpenAPI range such as ``"4XX"``, or
    ``"default"``. ``content_type`` is matched as a case-insensitive
    substring; ``None`` accepts any content type, including none. ``model``
    is the type the body decodes into; ``None`` means the rule carries no
    payload (e.g. a 204).
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    name: str
    status: int | str
    content_type: str | None = None
    model: Any = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> int | str:
        return parse_status(v)

    @property
    def specificity(self) -> int:
        """2 for an exact code, 1 for a range, 0 for ``default``."""
        if isinstance(self.status, int):
            return 2
        if self.status == DEFAULT_STATUS:
            return 0
        return 1

    def accepts_status(self, status: int) -> bool:
        if isinstance(self.status, int):
            return status == self.status
        if self.status == DEFAULT_STATUS:
            return True
        return status // 100 == int(self.status[0])

    def accepts_content_type(self, content_type: str | None) -> bool:
        if self.content_type is None:
            return True
        if not content_type:
            return False
        return self.content_type.lower() in content_type.lower()


class DecodedResponse(BaseModel):
    """Raw response data plus at most one typed payload."""

    body: bytes = b""
    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    rule: str | None = None
    payload: Any = None

    @property
    def matched(self) -> bool:
        return self.rule is not None

    def get(self, name: str) -> Any:
        """Payload of the rule called ``name``, or ``None`` if another rule matched."""
        return self.payload if self.rule == name else None


def parse_status(v: Any) -> int | str:
    """Normalize a status matcher: exact code, ``"NXX"`` range or ``"default"``."""
    if isinstance(v, int) and not isinstance(v, bool):
        if not 100 <= v <= 599:
            raise ValueError(f"status {v} is outside 100-599")
        return v
    if isinstance(v, str):
        text = v.strip()
        if text.isdigit():
            return parse_status(int(text))
        if text.lower() == DEFAULT_STATUS:
            return DEFAULT_STATUS
        if _RANGE_RE.fullmatch(text.upper()):
            return text.upper()
    raise ValueError(f"invalid status matcher {v!r}")
