"""Main CLI entry point for schemagraph."""

import click

from schemagraph import __version__
from schemagraph.cli.commands.build import build
from schemagraph.cli.commands.list_handlers import list_handlers


@click.group()
@click.version_option(version=__version__)
def main():
    """Schema Graph - schema graphs from contracts and Python types."""
    pass


# Register commands
main.add_command(build)
main.add_command(list_handlers)


if __name__ == "__main__":
    main()
