"""CLI entry point for oapi-codec."""

import json
from pathlib import Path

import click
import yaml

from oapi_codec.config import get_settings
from oapi_codec.errors import CodecError
from oapi_codec.logging import setup_logging
from oapi_codec.parser.swagger import parse_openapi
from oapi_codec.style.base import EncodeRequest, Location, ParameterStyle, Shape, default_explode
from oapi_codec.style.canonical import to_parameter_value
from oapi_codec.style.decode import decode as decode_value
from oapi_codec.style.encode import encode as encode_value

STYLES = [s.value for s in ParameterStyle]
LOCATIONS = [loc.value for loc in Location]
SHAPES = [s.value for s in Shape]


def _parse_value(text: str):
    """Read a command-line value: bare strings, [a, b] and {k: v} all work."""
    try:
        value = yaml.safe_load(text)
    except yaml.YAMLError:
        return text
    return text if value is None else value


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
def main(verbose: bool):
    """oapi-codec: inspect OpenAPI parameter encodings and response rules."""
    settings = get_settings()
    if verbose:
        settings = settings.model_copy(update={"log_level": "DEBUG"})
    setup_logging(settings)


@main.command()
@click.argument("name")
@click.argument("value")
@click.option("--style", default="form", type=click.Choice(STYLES), help="Serialization style.")
@click.option("--explode/--no-explode", default=None, help="Explode flag (style default when omitted).")
@click.option("--location", "location", default="query", type=click.Choice(LOCATIONS), help="Parameter location.")
def encode(name: str, value: str, style: str, explode: bool | None, location: str):
    """Encode VALUE as parameter NAME."""
    try:
        request = EncodeRequest(
            name=name,
            value=to_parameter_value(_parse_value(value), name),
            style=style,
            explode=explode,
            location=location,
        )
        click.echo(encode_value(request))
    except CodecError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.argument("name")
@click.argument("raw")
@click.option("--style", default="form", type=click.Choice(STYLES), help="Serialization style.")
@click.option("--explode/--no-explode", default=None, help="Explode flag (style default when omitted).")
@click.option("--location", "location", default="query", type=click.Choice(LOCATIONS), help="Parameter location.")
@click.option("--shape", default="scalar", type=click.Choice(SHAPES), help="Target shape.")
def decode(name: str, raw: str, style: str, explode: bool | None, location: str, shape: str):
    """Decode RAW (a fragment, query string or Cookie header) as parameter NAME."""
    parsed_style = ParameterStyle(style)
    if explode is None:
        explode = default_explode(parsed_style)
    try:
        value = decode_value(
            name, raw, parsed_style, explode, Shape(shape), location=Location(location), required=True
        )
    except CodecError as e:
        raise click.ClickException(str(e)) from e
    click.echo(json.dumps(value.model_dump(), indent=2))


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
def operations(doc_path: Path):
    """List operations and how each parameter is serialized."""
    document = _load(doc_path)
    click.echo(f"Found {len(document.operations)} operations.")
    for op in document.operations:
        click.echo(f"{op.method} {op.path} ({op.operation_id})")
        for p in op.parameters:
            required = " required" if p.required else ""
            click.echo(
                f"  {p.location.value:<6} {p.name}: {p.value_schema.shape.value} "
                f"style={p.style.value} explode={str(p.explode).lower()}{required}"
            )


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.argument("operation_id")
def rules(doc_path: Path, operation_id: str):
    """Print the ordered response rule table of OPERATION_ID."""
    document = _load(doc_path)
    try:
        op = document.operation(operation_id)
    except KeyError:
        raise click.ClickException(f"Unknown operation {operation_id}") from None
    for rule in op.rules:
        matcher = rule.content_type or "*"
        click.echo(f"{rule.name}: status={rule.status} content-type~{matcher}")


def _load(doc_path: Path):
    try:
        return parse_openapi(doc_path)
    except CodecError as e:
        raise click.ClickException(str(e)) from e
