"""OpenAPI 3 document parser.

Projects an OpenAPI document into OperationSpecs: parameter specs with their
resolved styles and ordered response rule tables.
"""

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from oapi_codec.errors import DocumentError
from oapi_codec.response.base import ResponseRule
from oapi_codec.style.base import (
    Location,
    ParameterStyle,
    Shape,
    ValueSchema,
    default_explode,
    default_style,
)

from .base import ApiDocument, OperationSpec, ParameterSpec

METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")

Models = Mapping[str, Any]


def parse_openapi(file_path: Path, models: Models | None = None) -> ApiDocument:
    """Parse an OpenAPI file (YAML or JSON) into an ApiDocument.

    ``models`` maps component schema names to the Python types response
    bodies referencing them should decode into.
    """
    try:
        text = Path(file_path).read_text(encoding="utf-8")
        doc = yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as e:
        raise DocumentError(f"Cannot read OpenAPI document {file_path}: {e}", cause=e) from e

    if not isinstance(doc, dict) or "paths" not in doc:
        raise DocumentError(f"{file_path} is not an OpenAPI document")

    document = parse_document(doc, models)
    logger.info("Loaded {} operations from {}", len(document.operations), file_path)
    return document


@lru_cache(maxsize=32)
def _load_cached(resolved: str) -> ApiDocument:
    return parse_openapi(Path(resolved))


def load_document(file_path: Path | str) -> ApiDocument:
    """Parse a document once per path; later calls return the same immutable value."""
    return _load_cached(str(Path(file_path).resolve()))


def parse_document(doc: dict, models: Models | None = None) -> ApiDocument:
    """Project an already-loaded OpenAPI mapping."""
    models = models or {}
    operations = []
    paths = doc.get("paths") or {}

    for path, item in paths.items():
        item = _resolve(item, doc)
        shared = item.get("parameters", [])
        for method, operation in item.items():
            if method.upper() not in METHODS:
                continue

            try:
                params = _parse_parameters(_merge_parameters(shared, operation.get("parameters", []), doc), doc)
            except (KeyError, TypeError, ValueError) as e:
                raise DocumentError(f"Invalid parameter in {method.upper()} {path}: {e!r}", cause=e) from e
            operations.append(
                OperationSpec(
                    operation_id=operation.get("operationId") or _default_operation_id(method, path),
                    method=method.upper(),
                    path=path,
                    summary=operation.get("summary", ""),
                    parameters=tuple(params),
                    request_content_type=_detect_content_type(_resolve(operation.get("requestBody"), doc)),
                    rules=tuple(_parse_responses(operation.get("responses", {}), doc, models)),
                    tags=tuple(operation.get("tags", [])),
                )
            )

    info = doc.get("info") or {}
    return ApiDocument(
        title=info.get("title", ""),
        version=str(info.get("version", "")),
        operations=tuple(operations),
    )


def _resolve(node: Any, doc: dict) -> Any:
    """Follow local ``$ref`` pointers until a concrete node is reached."""
    seen = set()
    while isinstance(node, dict) and "$ref" in node:
        ref = node["$ref"]
        if not ref.startswith("#/") or ref in seen:
            raise DocumentError(f"Unsupported or circular reference {ref}")
        seen.add(ref)
        target: Any = doc
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(target, dict) or part not in target:
                raise DocumentError(f"Unresolvable reference {ref}")
            target = target[part]
        node = target
    return node


def _merge_parameters(shared: list, own: list, doc: dict) -> list[dict]:
    merged: dict[tuple[str, str], dict] = {}
    for p in [*shared, *own]:
        p = _resolve(p, doc)
        merged[(p["name"], p.get("in", "query"))] = p
    return list(merged.values())


def _parse_parameters(params: list[dict], doc: dict) -> list[ParameterSpec]:
    result = []
    for p in params:
        location = Location(p.get("in", "query"))
        style = ParameterStyle(p["style"]) if "style" in p else default_style(location)
        explode = p["explode"] if "explode" in p else default_explode(style)

        result.append(
            ParameterSpec(
                name=p["name"],
                location=location,
                # Path parameters are always required.
                required=location == Location.PATH or p.get("required", False),
                style=style,
                explode=explode,
                value_schema=_value_schema(p.get("schema", {}), doc),
                description=p.get("description", ""),
            )
        )
    return result


def _value_schema(schema: dict, doc: dict) -> ValueSchema:
    schema = _resolve(schema, doc)
    if schema.get("type") == "array":
        return ValueSchema(shape=Shape.ARRAY, kind=_scalar_kind(_resolve(schema.get("items", {}), doc)))
    if schema.get("type") == "object" or "properties" in schema:
        properties = {
            name: _scalar_kind(_resolve(prop, doc))
            for name, prop in (schema.get("properties") or {}).items()
        }
        return ValueSchema(shape=Shape.OBJECT, properties=properties)
    return ValueSchema(kind=_scalar_kind(schema))


def _scalar_kind(schema: dict) -> str:
    schema_type = schema.get("type", "string")
    if schema_type in ("integer", "number", "boolean"):
        return schema_type
    if schema.get("format") in ("date", "date-time"):
        return schema["format"]
    return "string"


def _detect_content_type(body: dict | None) -> str | None:
    if not body:
        return None
    content = body.get("content", {})
    for content_type in ("application/json", "multipart/form-data"):
        if content_type in content:
            return content_type
    # Fallback: first declared media type
    for content_type in content:
        return content_type
    return None


def _parse_responses(responses: dict, doc: dict, models: Models) -> list[ResponseRule]:
    rules: list[ResponseRule] = []
    names: set[str] = set()

    for status, response in responses.items():
        response = _resolve(response, doc)
        label = _status_label(status)
        content = response.get("content") or {}

        if not content:
            rules.append(ResponseRule(name=f"Empty{label}", status=status))
            continue

        for media_type, media in content.items():
            name = f"{_media_prefix(media_type)}{label}"
            if name in names:
                continue
            names.add(name)
            rules.append(
                ResponseRule(
                    name=name,
                    status=status,
                    content_type=_content_matcher(media_type),
                    model=_model_for((media or {}).get("schema"), doc, models),
                )
            )

    # Exact codes before ranges before default; declaration order within each.
    return sorted(rules, key=lambda rule: -rule.specificity)


def _status_label(status: Any) -> str:
    text = str(status).strip()
    return "Default" if text.lower() == "default" else text.upper()


def _media_prefix(media_type: str) -> str:
    lowered = media_type.lower()
    if "json" in lowered:
        return "JSON"
    if "xml" in lowered:
        return "XML"
    if lowered.startswith("text/"):
        return "Text"
    return "Body"


def _content_matcher(media_type: str) -> str | None:
    lowered = media_type.lower()
    if lowered == "*/*":
        return None
    if "json" in lowered:
        return "json"
    return lowered


def _model_for(schema: dict | None, doc: dict, models: Models) -> Any:
    if not schema:
        return Any
    ref_name = _ref_name(schema)
    if ref_name in models:
        return models[ref_name]
    resolved = _resolve(schema, doc)
    if resolved.get("type") == "array":
        item_name = _ref_name(resolved.get("items") or {})
        if item_name in models:
            return list[models[item_name]]
    return Any


def _ref_name(schema: dict) -> str | None:
    ref = schema.get("$ref", "")
    if ref.startswith("#/components/schemas/"):
        return ref.rsplit("/", 1)[-1]
    return None


def _default_operation_id(method: str, path: str) -> str:
    slug = "".join(c if c.isalnum() else "_" for c in path).strip("_")
    return f"{method.lower()}_{slug}" if slug else method.lower()
