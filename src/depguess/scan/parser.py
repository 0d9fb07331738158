"""Tree-sitter grammar loading and parsing.

Languages are loaded once per process and shared read-only across worker
threads. Parsers are not shared: each extraction creates its own.
"""

from __future__ import annotations

import importlib
import threading
from typing import TYPE_CHECKING

import tree_sitter

from depguess.core.errors import GrammarUnavailableError, ParseError

if TYPE_CHECKING:
    from depguess.scan.backends import GrammarSpec

_languages: dict[str, tree_sitter.Language] = {}
_languages_lock = threading.Lock()


def load_language(spec: GrammarSpec) -> tree_sitter.Language:
    """Get or load a tree-sitter Language from its grammar package."""
    with _languages_lock:
        lang = _languages.get(spec.name)
        if lang is not None:
            return lang
        try:
            mod = importlib.import_module(spec.module)
            lang_fn = getattr(mod, spec.language_func)
        except (ImportError, AttributeError) as err:
            raise GrammarUnavailableError.missing(spec.name, spec.module) from err
        lang = tree_sitter.Language(lang_fn())
        _languages[spec.name] = lang
        return lang


def _first_error_line(node: tree_sitter.Node) -> int | None:
    """1-based line of the first ERROR or MISSING node, depth-first."""
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error:
            return _first_error_line(child)
    return None


def parse_source(
    content: bytes,
    language: tree_sitter.Language,
    *,
    path: str,
    grammar: str,
    strict: bool = True,
) -> tree_sitter.Tree:
    """Parse source bytes into a syntax tree.

    Args:
        content: Raw file contents.
        language: Loaded grammar.
        path: File path, for error reporting only.
        grammar: Grammar key, for error reporting only.
        strict: Reject trees containing ERROR or MISSING nodes.

    Raises:
        ParseError: If the parser produces no tree, or (strict) the tree
            has syntax errors.
    """
    parser = tree_sitter.Parser(language)
    tree = parser.parse(content)
    if tree is None:
        raise ParseError.malformed(path, grammar)
    if strict and tree.root_node.has_error:
        raise ParseError.malformed(path, grammar, _first_error_line(tree.root_node))
    return tree
