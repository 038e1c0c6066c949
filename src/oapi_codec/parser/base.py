"""Operation models projected from an OpenAPI document.

Generated bindings describe each operation with these models: how every
parameter is serialized and which response rules decode its replies.
"""

from pydantic import BaseModel, ConfigDict, Field

from oapi_codec.response.base import ResponseRule
from oapi_codec.style.base import Location, ParameterStyle, ValueSchema


class ParameterSpec(BaseModel):
    """A single operation parameter (path, query, header, or cookie)."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: Location
    required: bool = False
    style: ParameterStyle
    explode: bool
    value_schema: ValueSchema = Field(default_factory=ValueSchema)
    description: str = ""


class OperationSpec(BaseModel):
    """A single operation with its parameter specs and response rule table."""

    model_config = ConfigDict(frozen=True)

    operation_id: str
    method: str  # GET / POST / PUT / DELETE / PATCH
    path: str  # /pets/{id}
    summary: str = ""
    parameters: tuple[ParameterSpec, ...] = ()
    request_content_type: str | None = None
    rules: tuple[ResponseRule, ...] = ()
    tags: tuple[str, ...] = ()

    def parameters_in(self, location: Location) -> list[ParameterSpec]:
        return [p for p in self.parameters if p.location == location]


class ApiDocument(BaseModel):
    """An immutable projection of a whole OpenAPI document."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    version: str = ""
    operations: tuple[OperationSpec, ...] = ()

    def operation(self, operation_id: str) -> OperationSpec:
        for op in self.operations:
            if op.operation_id == operation_id:
                return op
        raise KeyError(operation_id)
