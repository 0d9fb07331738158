"""depguess guess command - list the packages a source tree imports."""

import json
from pathlib import Path

import click

from depguess.config.loader import load_config
from depguess.core.errors import DepGuessError
from depguess.core.logging import configure_logging, get_log_file_path
from depguess.core.progress import pluralize, status
from depguess.scan.backends import BACKENDS
from depguess.scan.ops import scan_tree


@click.command()
@click.argument(
    "path",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--backend",
    type=click.Choice(sorted(BACKENDS)),
    default=None,
    help="Ecosystem backend (default: from config, normally nodejs)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--workers", type=int, default=None, help="Extraction worker threads")
@click.option("--timeout", type=float, default=None, help="Per-file timeout in seconds")
@click.option(
    "--lenient",
    is_flag=True,
    help="Collect imports from files with syntax errors instead of skipping them",
)
@click.pass_context
def guess_command(
    ctx: click.Context,
    path: Path,
    backend: str | None,
    as_json: bool,
    workers: int | None,
    timeout: float | None,
    lenient: bool,
) -> None:
    """Print the external packages imported by source files under PATH.

    PATH is the scan root (default: current directory). One package name is
    printed per line, sorted.
    """
    root = path.resolve()
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))

    scan_overrides: dict[str, object] = {}
    if workers is not None:
        scan_overrides["max_workers"] = workers
    if timeout is not None:
        scan_overrides["task_timeout_sec"] = timeout
    if lenient:
        scan_overrides["strict_parse"] = False

    overrides: dict[str, object] = {}
    if scan_overrides:
        overrides["scan"] = scan_overrides
    if verbose:
        overrides["logging"] = {"level": "DEBUG"}

    try:
        config = load_config(root, **overrides)
        configure_logging(config=config.logging)
        report = scan_tree(root, backend=backend, config=config)
    except DepGuessError as e:
        if as_json:
            click.echo(json.dumps({"error": e.to_dict()}, indent=2))
        status(e.message, style="error")
        if log_path := get_log_file_path():
            status(f"See {log_path} for details", style="info")
        raise SystemExit(1) from e

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    for name in sorted(report.packages):
        click.echo(name)

    if report.files_failed:
        status(
            f"Skipped {pluralize(report.files_failed, 'file')} that could not be parsed",
            style="warning",
        )
