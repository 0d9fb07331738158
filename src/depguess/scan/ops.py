"""Import scan operations.

Public entry points:
- guess_imports(): the set of external packages a source tree imports
- scan_tree(): the same scan, with per-file failure details
"""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

import structlog

from depguess.config.models import DepGuessConfig
from depguess.core.excludes import make_ignore_predicate
from depguess.core.logging import clear_scan_id, set_scan_id
from depguess.scan.backends import get_backend
from depguess.scan.classifier import classify_import_paths
from depguess.scan.extractor import ImportExtractor
from depguess.scan.models import ScanReport
from depguess.scan.walker import ExtractionScheduler, TreeWalker

logger = structlog.get_logger()


def scan_tree(
    root: Path | None = None,
    *,
    backend: str | None = None,
    config: DepGuessConfig | None = None,
    is_ignored: Callable[[str], bool] | None = None,
) -> ScanReport:
    """Scan a source tree and report the external packages it imports.

    Args:
        root: Directory to scan. Defaults to the current working directory.
        backend: Backend name. Defaults to ``config.scan.backend``.
        config: Resolved configuration. Defaults to built-in defaults.
        is_ignored: Directory base name predicate. Defaults to the built-in
            ignore list extended by ``config.scan.extra_ignored_dirs``.

    Raises:
        EnumerationError: If a directory under root cannot be listed.
        ConfigError: If the backend is unknown.
        GrammarUnavailableError: If a grammar package is not installed.
        QueryConstructionError: If a backend query does not compile.
    """
    config = config or DepGuessConfig()
    scan_config = config.scan
    root = (root or Path.cwd()).resolve()
    lang_backend = get_backend(backend or scan_config.backend)
    if is_ignored is None:
        is_ignored = make_ignore_predicate(scan_config.extra_ignored_dirs)

    extractor = ImportExtractor(lang_backend, strict_parse=scan_config.strict_parse)
    walker = TreeWalker(
        backend=lang_backend,
        is_ignored=is_ignored,
        max_file_size_bytes=scan_config.max_file_size_bytes,
    )
    scheduler = ExtractionScheduler(
        extractor=extractor,
        max_workers=scan_config.max_workers,
        task_timeout_sec=scan_config.task_timeout_sec,
    )

    set_scan_id()
    start = time.monotonic()
    logger.info("scan_started", root=str(root), backend=lang_backend.name)
    try:
        results = scheduler.run(walker.walk(root))

        raw_paths: list[str] = []
        failures = []
        for result in results:
            if result.ok:
                raw_paths.extend(result.import_paths)
            else:
                failures.append(result)

        packages = classify_import_paths(raw_paths, lang_backend)
        logger.info(
            "scan_completed",
            files=len(results),
            failed=len(failures),
            raw_imports=len(raw_paths),
            packages=len(packages),
            duration_ms=round((time.monotonic() - start) * 1000, 1),
        )
    finally:
        clear_scan_id()

    return ScanReport(
        root=root,
        backend=lang_backend.name,
        packages=packages,
        files_dispatched=len(results),
        failures=tuple(failures),
    )


def guess_imports(
    root: Path | None = None,
    *,
    backend: str | None = None,
    config: DepGuessConfig | None = None,
    is_ignored: Callable[[str], bool] | None = None,
) -> frozenset[str]:
    """Return the external package names imported under *root*.

    See scan_tree() for arguments and errors.
    """
    return scan_tree(root, backend=backend, config=config, is_ignored=is_ignored).packages
