import json
import logging
from pathlib import Path

import click

from .cli_utils import describe_invocation, load_json, write_text
from .config import SchemaConfig
from .docs import MarkdownRenderer
from .errors import RoundTripMismatchError, SchemaError
from .serde import SchemaParser, SchemaSerializer
from .transforms import components_to_json_schema, to_json_schema
from .transforms.json_schema import JSON_SCHEMA_DIALECT

logger = logging.getLogger(__name__)


def _load_schemas(path, config):
    """Parse either a document with `components.schemas` or a bare schema file."""
    document = load_json(path)
    parser = SchemaParser(config)
    try:
        if isinstance(document, dict) and "components" in document:
            return parser.parse_components(document), document, True
        return {Path(path).stem: parser.parse_reference_or(document)}, document, False
    except SchemaError as e:
        raise click.ClickException(str(e)) from e


def _dump(data, config):
    return json.dumps(data, indent=config.indent, ensure_ascii=False) + "\n"


@click.group()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--strict", is_flag=True, default=False, help="Reject keys the chosen schema kind does not accept")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log parsing decisions")
@click.pass_context
def asyncapi_schema(ctx, config, strict, verbose):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        config = SchemaConfig.from_dict(load_json(config))
    else:
        config = SchemaConfig()

    # CLI flag overrides the config file
    if strict:
        config.strict = True

    ctx.obj = config


@asyncapi_schema.command()
@click.option("--check", is_flag=True, default=False, help="Fail if the output differs from the input")
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", required=False, default=None, type=click.Path(resolve_path=True))
@click.pass_obj
def roundtrip(config, check, path, output):
    """Parse a schema file and write it back out."""
    schemas, document, is_document = _load_schemas(path, config)
    serializer = SchemaSerializer()

    if is_document:
        result = serializer.serialize_components(schemas)
        expected = {"components": {"schemas": document["components"].get("schemas", {})}}
    else:
        (schema,) = schemas.values()
        result = serializer.serialize_reference_or(schema)
        expected = document

    if check and result != expected:
        error = RoundTripMismatchError(Path(path).name, expected, result)
        raise click.ClickException(str(error))
    logger.debug("Round-tripped %d schema(s) from %s", len(schemas), path)

    if output is None:
        click.echo(_dump(result, config), nl=False)
    else:
        write_text(output, _dump(result, config))


@asyncapi_schema.command("json-schema")
@click.option("--ref-prefix", default=None, type=str, help="Replacement for #/components/schemas/")
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(resolve_path=True))
@click.pass_obj
def json_schema(config, ref_prefix, path, output):
    """Export schemas as a JSON Schema (2020-12) document."""
    schemas, _, is_document = _load_schemas(path, config)
    ref_prefix = ref_prefix or config.ref_prefix

    if is_document:
        result = components_to_json_schema(schemas, ref_prefix)
    else:
        (schema,) = schemas.values()
        result = {"$schema": JSON_SCHEMA_DIALECT, **to_json_schema(schema, ref_prefix)}

    write_text(output, _dump(result, config))


@asyncapi_schema.command()
@click.option("--title", "-t", default=None, type=str)
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(resolve_path=True))
@click.pass_obj
def docs(config, title, path, output):
    """Render schemas as Markdown documentation."""
    schemas, _, _ = _load_schemas(path, config)
    renderer = MarkdownRenderer(config)
    write_text(output, renderer.render(schemas, title=title, header=describe_invocation()))
