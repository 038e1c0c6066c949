from oapi_codec.parser.base import ApiDocument, OperationSpec, ParameterSpec
from oapi_codec.parser.swagger import load_document, parse_document, parse_openapi

__all__ = [
    "ApiDocument",
    "OperationSpec",
    "ParameterSpec",
    "load_document",
    "parse_document",
    "parse_openapi",
]
