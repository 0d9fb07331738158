"""depguess CLI - depguess command."""

import click

from depguess.cli.guess import guess_command
from depguess.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="depguess")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """depguess - guess a project's dependencies from its import statements."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(guess_command, name="guess")


if __name__ == "__main__":
    cli()
