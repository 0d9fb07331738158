"""Value types passed between the walker, extractors and the collector."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A file selected for extraction."""

    path: Path  # Absolute
    extension: str  # Lower-case, leading dot


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Outcome of extracting one file.

    Failed results carry no import paths; the failure has already been
    logged by the task that produced it.
    """

    path: Path
    import_paths: tuple[str, ...] = ()
    ok: bool = True
    error: str | None = None

    @classmethod
    def failed(cls, path: Path, error: str) -> ExtractionResult:
        return cls(path=path, ok=False, error=error)


@dataclass(frozen=True)
class ScanReport:
    """Everything a scan produced."""

    root: Path
    backend: str
    packages: frozenset[str]
    files_dispatched: int
    failures: tuple[ExtractionResult, ...] = field(default_factory=tuple)

    @property
    def files_failed(self) -> int:
        return len(self.failures)

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": str(self.root),
            "backend": self.backend,
            "packages": sorted(self.packages),
            "files_scanned": self.files_dispatched,
            "files_failed": self.files_failed,
            "failures": [{"path": str(f.path), "error": f.error} for f in self.failures],
        }
