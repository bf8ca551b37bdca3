"""CLI command for listing schema handlers."""

import click

from schemagraph.handlers.registry import default_registry


@click.command("list-handlers")
def list_handlers():
    """List the built-in schema handlers in priority order.

    The first handler that accepts a subject builds its schema.
    """
    click.echo("Schema Handlers:")
    for position, handler in enumerate(default_registry(), start=1):
        kinds = ", ".join(sorted(kind.value for kind in handler.kinds))
        click.echo(f"  {position}. {handler.name} ({kinds})")
