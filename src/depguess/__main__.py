"""Entry point for ``python -m depguess``."""

from depguess.cli.main import cli

if __name__ == "__main__":
    cli()
