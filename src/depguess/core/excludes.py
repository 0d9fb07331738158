"""Directories never descended into while guessing imports.

Tier 0 (HARDCODED_DIRS): VCS internals and depguess's own data directory.

Tier 1 (DEFAULT_IGNORED_DIRS): installed dependencies, caches, build output
and editor state. Scanning these would report the dependencies of
dependencies, or imports from generated bundles.

The scanner only consumes a predicate over directory base names; callers can
substitute their own or extend the default via ``scan.extra_ignored_dirs``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

# =============================================================================
# Tier 0: HARDCODED
# =============================================================================

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        # depguess data
        ".depguess",
    )
)

# =============================================================================
# Tier 1: DEFAULT_IGNORED
# =============================================================================

DEFAULT_IGNORED_DIRS: frozenset[str] = frozenset(
    (
        # -------------------------------------------------------------------------
        # JavaScript/Node.js ecosystem
        # -------------------------------------------------------------------------
        "node_modules",
        ".npm",
        ".yarn",
        ".pnpm-store",
        "bower_components",
        ".next",  # Next.js build
        ".nuxt",  # Nuxt.js build
        ".svelte-kit",
        ".turbo",  # Turborepo cache
        ".parcel-cache",
        ".expo",
        # -------------------------------------------------------------------------
        # Python ecosystem
        # -------------------------------------------------------------------------
        "venv",
        ".venv",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".tox",
        "site-packages",
        # -------------------------------------------------------------------------
        # Other package managers
        # -------------------------------------------------------------------------
        ".bundle",
        "target",  # Cargo build output
        "_build",
        "deps",
        # -------------------------------------------------------------------------
        # Generic build/output directories
        # -------------------------------------------------------------------------
        "dist",
        "build",
        "out",
        "coverage",
        ".nyc_output",
        # -------------------------------------------------------------------------
        # IDE/Editor directories
        # -------------------------------------------------------------------------
        ".idea",
        ".vscode",
        ".vs",
        # -------------------------------------------------------------------------
        # Misc caches and project config
        # -------------------------------------------------------------------------
        ".cache",
        ".config",
        "vendor",
    )
)

IGNORED_DIRS: frozenset[str] = HARDCODED_DIRS | DEFAULT_IGNORED_DIRS


def is_ignored_dir(dirname: str) -> bool:
    """Check if a directory base name is skipped by default."""
    return dirname in IGNORED_DIRS


def make_ignore_predicate(extra: Iterable[str] = ()) -> Callable[[str], bool]:
    """Build a predicate that also skips the given extra directory names."""
    extra_dirs = frozenset(extra)
    if not extra_dirs:
        return is_ignored_dir
    combined = IGNORED_DIRS | extra_dirs

    def predicate(dirname: str) -> bool:
        return dirname in combined

    return predicate


__all__ = [
    "HARDCODED_DIRS",
    "DEFAULT_IGNORED_DIRS",
    "IGNORED_DIRS",
    "is_ignored_dir",
    "make_ignore_predicate",
]
