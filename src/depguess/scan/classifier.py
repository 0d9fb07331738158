"""Raw import path -> canonical package name.

Rules run in a fixed order and the first one that applies wins:

1. built-in prefix (``node:fs``)            -> dropped
2. empty                                    -> dropped
3. absolute path (``/abs``)                 -> dropped
4. relative path (``./x``, ``../x``)        -> dropped
5. URL (``https://...``)                    -> dropped
6. loader syntax (``style-loader!./x.css``) -> dropped
7. scoped (``@scope/pkg/sub``)              -> ``@scope/pkg``; ``@scope`` alone dropped
8. bare (``lodash/debounce``)               -> ``lodash``, unless a built-in module
"""

from __future__ import annotations

from collections.abc import Iterable

from depguess.scan.backends import LanguageBackend


def classify_import_path(raw: str, backend: LanguageBackend) -> str | None:
    """Return the package a raw import path refers to, or None if it is not one."""
    if raw.startswith(backend.builtin_prefixes):
        return None
    if not raw:
        return None
    if raw[0] == "/":
        return None
    if raw[0] == ".":
        return None
    if raw.startswith(backend.url_prefixes):
        return None
    if backend.loader_marker in raw:
        return None

    parts = raw.split("/")
    if raw.startswith(backend.scope_marker):
        if len(parts) < 2:
            return None
        return "/".join(parts[:2])

    name = parts[0]
    if name in backend.builtin_modules:
        return None
    return name


def classify_import_paths(raw_paths: Iterable[str], backend: LanguageBackend) -> frozenset[str]:
    """Classify every raw path and collect the distinct package names."""
    packages: set[str] = set()
    for raw in raw_paths:
        name = classify_import_path(raw, backend)
        if name is not None:
            packages.add(name)
    return frozenset(packages)
