import json
import logging
from pathlib import Path

import click

from .pipeline import Backend, CodeGeneratorConfig, CodeMergeError, OutputMode, PipelineGenerator, SchemaError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("json_schema_to_objc")


@click.command()
@click.argument("schema", default="-", type=click.File("r", encoding="utf-8"))
@click.option(
    "--output-directory",
    "-o",
    required=True,
    type=click.Path(file_okay=False, resolve_path=True, path_type=Path),
    help="Directory receiving the generated files",
)
@click.option("--overwrite", is_flag=True, default=False, help="Replace existing files instead of merging")
@click.option(
    "--backend",
    "-b",
    default=None,
    type=click.Choice([b.value for b in Backend]),
    help="Target object model (default: plain)",
)
@click.option("--coredata", is_flag=True, default=False, help="Same as --backend managed-persistence")
@click.option(
    "--force-non-null-objects",
    is_flag=True,
    default=False,
    help="Use nonNullObjectForKey: for every property",
)
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--verbose", "-v", is_flag=True, default=False)
def json_schema_to_objc(schema, output_directory, overwrite, backend, coredata, force_non_null_objects, config, verbose):
    """Generate Objective-C classes from the JSON SCHEMA (default: stdin)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )

    if config is not None:
        with open(config, encoding="utf-8") as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # Command line flags override the config file
    if coredata:
        backend = Backend.MANAGED_PERSISTENCE.value
    if backend is not None:
        config = config.with_overrides(backend=Backend(backend))
    if force_non_null_objects:
        config = config.with_overrides(force_non_null_objects=True)
    config = config.with_output(directory=output_directory)
    if overwrite:
        config = config.with_output(mode=OutputMode.OVERWRITE)

    try:
        document = json.load(schema)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON schema: {e}") from e

    logger.info("Generating %s classes into %s", config.backend.value, output_directory)
    try:
        report = PipelineGenerator(document, config).write()
    except (SchemaError, CodeMergeError) as e:
        raise click.ClickException(str(e)) from e

    for result in report.conflicts:
        click.echo(f"Conflicts in {result.filename}: {result.conflict_count}", err=True)
    logger.info("%d files committed, %d merge conflict(s)", len(report.results), report.conflict_count)
