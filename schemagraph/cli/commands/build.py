"""CLI command for building a schema graph."""

import json
import sys

import click
import yaml

from schemagraph.core.builder import SchemaGraphBuilder
from schemagraph.core.exceptions import SchemaGraphError
from schemagraph.core.logging import configure_logging
from schemagraph.core.schema.serialize import dump_graph
from schemagraph.core.targets import load_target
from schemagraph.models.builder_config import BuilderConfig


@click.command()
@click.argument("target")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    help="Builder configuration YAML file",
)
@click.option(
    "--format",
    "output_format",
    default="json",
    type=click.Choice(["json", "yaml"]),
    help="Output format (default: json)",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Log level (default: WARNING)",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Use JSON format for logs",
)
def build(
    target: str,
    config_path: str | None,
    output_format: str,
    log_level: str,
    json_logs: bool,
):
    """Build the schema graph for TARGET and print it.

    TARGET names a contract, model, union alias or Arrow schema as
    'module:attr' or 'path/to/file.py:attr'. Named nodes below the root
    are printed under "definitions".

    Examples:

        schemagraph build myapp.contracts:PetContract
        schemagraph build models.py:Order --format yaml
    """
    configure_logging(level=log_level, json_format=json_logs, subject=target)

    try:
        if config_path:
            from schemagraph.models.loader import load_config

            config = load_config(config_path)
        else:
            config = BuilderConfig()

        subject = load_target(target)
        root = SchemaGraphBuilder(config=config).build(subject)
        if root is None:
            click.echo(f"Error: No handler can build a schema for '{target}'", err=True)
            sys.exit(1)

        document = dump_graph(root)
        if output_format == "yaml":
            plain = json.loads(json.dumps(document, default=str))
            click.echo(yaml.safe_dump(plain, sort_keys=False), nl=False)
        else:
            click.echo(json.dumps(document, indent=2, default=str))

    except SchemaGraphError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
