import json
import logging
from pathlib import Path

import click

from .cli_utils import generation_comment
from .pipeline import AtomicWriter, CodeGeneratorConfig, CompileError, DefinitionsGenerator, RecordGenerator
from .pipeline.config import SUPPORTED_LANGUAGES
from .utils import snake_to_pascal_case

logger = logging.getLogger(__name__)


def _generate(schema, config, language, name, definition, multi_definitions, all_definitions, path):
    if definition is not None:
        return DefinitionsGenerator(schema, config, language).compile_definition(definition, name)

    if multi_definitions is not None:
        keys = [key.strip() for key in multi_definitions.split(",") if key.strip()]
        return DefinitionsGenerator(schema, config, language).compile_many(keys)

    if all_definitions:
        generator = DefinitionsGenerator(schema, config, language)
        return generator.compile_many(generator.list_definition_keys())

    if name is None:
        name = snake_to_pascal_case(Path(path).stem)
    return RecordGenerator(config, language).compile(schema, name)


@click.command()
@click.option("--output", "-o", default=None, type=click.Path(dir_okay=False, resolve_path=True), help="Output file (default: stdout)")
@click.option("--name", "-n", default=None, type=str, help="Record name (default: derived from the schema file name)")
@click.option("--definition", "-d", default=None, type=str, help="Generate the record for one definition")
@click.option("--multi-definitions", "-m", default=None, type=str, help="Comma separated definitions to generate")
@click.option("--all-definitions", "-a", is_flag=True, default=False, help="Generate every definition")
@click.option("--list-definitions", "-l", is_flag=True, default=False, help="List the definitions of the schema")
@click.option("--language", "-L", default=None, type=click.Choice(SUPPORTED_LANGUAGES), help="Target language (default: python)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
def json_schema_to_record(output, name, definition, multi_definitions, all_definitions, list_definitions, language, config, verbose, path):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    with open(path, encoding="utf-8") as f:
        try:
            schema = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"{Path(path).name} is not valid JSON: {e}") from e

    if config is not None:
        with open(config, encoding="utf-8") as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI flag overrides the config file
    if language is not None:
        config.language = language

    if list_definitions:
        keys = DefinitionsGenerator(schema, config).list_definition_keys()
        if not keys:
            click.echo("This schema contains no definitions.")
            return
        click.echo("Available definitions:")
        for key in keys:
            click.echo(f"- {key}")
        return

    try:
        out = _generate(schema, config, config.language, name, definition, multi_definitions, all_definitions, path)
    except CompileError as e:
        raise click.ClickException(str(e)) from e

    if config.add_generation_comment:
        out = f"{generation_comment(json_schema_to_record)}\n\n{out}"
    out += "\n"

    if output is None:
        click.echo(out, nl=False)
        return

    try:
        AtomicWriter().write(Path(output), out, config.language)
    except CompileError as e:
        raise click.ClickException(str(e)) from e
    logger.info("Generated %s", output)
    click.echo(f"Generated {output}", err=True)
