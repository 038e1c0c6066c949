"""Data models for the parameter style codec.

Native values are canonicalized to strings before they enter these models;
composite values are trees of ``Scalar``, ``Array`` and ``Object``.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ParameterStyle(str, Enum):
    """OpenAPI 3 serialization styles."""

    SIMPLE = "simple"
    FORM = "form"
    SPACE_DELIMITED = "spaceDelimited"
    PIPE_DELIMITED = "pipeDelimited"
    DEEP_OBJECT = "deepObject"
    LABEL = "label"
    MATRIX = "matrix"


class Location(str, Enum):
    """Where a parameter travels in the request."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class Shape(str, Enum):
    """Top-level kind of a parameter value, and the target of a decode."""

    SCALAR = "scalar"
    ARRAY = "array"
    OBJECT = "object"


class Scalar(BaseModel):
    """A single canonicalized value."""

    model_config = ConfigDict(frozen=True)

    shape: ClassVar[Shape] = Shape.SCALAR
    kind: Literal["scalar"] = "scalar"
    value: str


class Array(BaseModel):
    """An ordered sequence of values."""

    model_config = ConfigDict(frozen=True)

    shape: ClassVar[Shape] = Shape.ARRAY
    kind: Literal["array"] = "array"
    elements: list["ParameterValue"] = Field(default_factory=list)


class Object(BaseModel):
    """A mapping of field name to value."""

    model_config = ConfigDict(frozen=True)

    shape: ClassVar[Shape] = Shape.OBJECT
    kind: Literal["object"] = "object"
    entries: dict[str, "ParameterValue"] = Field(default_factory=dict)


ParameterValue = Annotated[Union[Scalar, Array, Object], Field(discriminator="kind")]

Array.model_rebuild()
Object.model_rebuild()


class ValueSchema(BaseModel):
    """Native target of a parameter.

    ``kind`` is the scalar kind for scalars and the element kind for arrays;
    ``properties`` maps object field names to their scalar kinds.
    """

    model_config = ConfigDict(frozen=True)

    shape: Shape = Shape.SCALAR
    kind: str = "string"
    properties: dict[str, str] = Field(default_factory=dict)


def default_style(location: Location) -> ParameterStyle:
    """The style OpenAPI assumes when a parameter declares none."""
    if location in (Location.QUERY, Location.COOKIE):
        return ParameterStyle.FORM
    return ParameterStyle.SIMPLE


def default_explode(style: ParameterStyle) -> bool:
    """The explode flag OpenAPI assumes when a parameter declares none."""
    return style == ParameterStyle.FORM


class EncodeRequest(BaseModel):
    """Everything ``encode`` needs to serialize one parameter."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: ParameterValue
    style: ParameterStyle
    explode: bool
    location: Location

    @model_validator(mode="before")
    @classmethod
    def fill_explode(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("explode") is None and "style" in data:
            data = {**data, "explode": default_explode(ParameterStyle(data["style"]))}
        return data
