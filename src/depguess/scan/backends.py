"""Per-ecosystem scan configuration.

A LanguageBackend bundles everything the scanner needs to know about one
ecosystem: which file extensions to open, which tree-sitter grammar parses
each of them, the import query run against each grammar, and which module
names belong to the runtime rather than to an installable package.

Queries must capture the import source string as ``@import``. Helper
captures (e.g. ``@function`` for predicates) are allowed alongside it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from depguess.core.errors import ConfigError


@dataclass(frozen=True)
class GrammarSpec:
    """How to load one tree-sitter grammar."""

    name: str  # Grammar key ("javascript", "typescript", "tsx")
    module: str  # Python import ("tree_sitter_typescript")
    language_func: str = "language"  # Non-standard for typescript/tsx


@dataclass(frozen=True)
class LanguageBackend:
    """Complete import-scan configuration for a single ecosystem."""

    name: str
    # extension (with leading dot, lower-case) -> grammar key
    grammars: dict[str, str]
    # grammar key -> GrammarSpec
    grammar_specs: dict[str, GrammarSpec]
    # grammar key -> query text
    queries: dict[str, str]
    builtin_modules: frozenset[str]
    builtin_prefixes: tuple[str, ...] = ()
    scope_marker: str = "@"
    url_prefixes: tuple[str, ...] = ("http:", "https:")
    loader_marker: str = "!"
    extensions: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extensions", frozenset(self.grammars))

    def grammar_for(self, extension: str) -> str | None:
        return self.grammars.get(extension.lower())


# =========================================================================
# NODE.JS (JavaScript / TypeScript)
# =========================================================================

NODE_BUILTIN_MODULES: frozenset[str] = frozenset(
    (
        "assert",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "dns",
        "domain",
        "events",
        "fs",
        "http",
        "http2",
        "https",
        "inspector",
        "module",
        "net",
        "os",
        "path",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "repl",
        "stream",
        "string_decoder",
        "sys",
        "timers",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "v8",
        "vm",
        "worker_threads",
        "zlib",
    )
)

# Shared by all three grammars: static import, re-export, require(), import()
_JS_IMPORT_QUERY = """
(import_statement
  source: (string) @import)

(export_statement
  source: (string) @import)

((call_expression
   function: (identifier) @function
   arguments: (arguments . (string) @import .))
 (#eq? @function "require"))

(call_expression
  function: (import)
  arguments: (arguments . (string) @import .))
"""

# TypeScript adds `import x = require("y")`
_TS_IMPORT_QUERY = (
    _JS_IMPORT_QUERY
    + """
(import_require_clause
  (string) @import)
"""
)

NODEJS_BACKEND = LanguageBackend(
    name="nodejs",
    grammars={
        ".js": "javascript",
        ".jsx": "javascript",
        ".mjs": "javascript",
        ".cjs": "javascript",
        ".ts": "typescript",
        ".tsx": "tsx",
    },
    grammar_specs={
        "javascript": GrammarSpec("javascript", "tree_sitter_javascript"),
        "typescript": GrammarSpec(
            "typescript", "tree_sitter_typescript", language_func="language_typescript"
        ),
        "tsx": GrammarSpec("tsx", "tree_sitter_typescript", language_func="language_tsx"),
    },
    queries={
        "javascript": _JS_IMPORT_QUERY,
        "typescript": _TS_IMPORT_QUERY,
        "tsx": _TS_IMPORT_QUERY,
    },
    builtin_modules=NODE_BUILTIN_MODULES,
    # Node.js 16+ marks core modules explicitly
    builtin_prefixes=("node:",),
)


BACKENDS: dict[str, LanguageBackend] = {
    NODEJS_BACKEND.name: NODEJS_BACKEND,
}


def get_backend(name: str) -> LanguageBackend:
    """Look up a backend by name."""
    backend = BACKENDS.get(name)
    if backend is None:
        raise ConfigError.unknown_backend(name, sorted(BACKENDS))
    return backend
