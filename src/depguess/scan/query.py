"""Structural query compilation and match iteration."""

from __future__ import annotations

from collections.abc import Iterator

import tree_sitter

from depguess.core.errors import QueryConstructionError

# A match as (pattern index, capture name -> captured nodes)
Match = tuple[int, dict[str, list[tree_sitter.Node]]]


def compile_query(
    language: tree_sitter.Language, source: str, *, grammar: str
) -> tree_sitter.Query:
    """Compile a query against a grammar.

    Query text is a constant, so failure here is a defect in the backend
    definition rather than in user input.

    Raises:
        QueryConstructionError: If the query does not compile.
    """
    if not source.strip():
        raise QueryConstructionError.invalid(grammar, "query is empty")
    try:
        return tree_sitter.Query(language, source)
    except Exception as err:
        # QueryError on current bindings, NameError/SyntaxError on older ones
        raise QueryConstructionError.invalid(grammar, str(err)) from err


def iter_matches(query: tree_sitter.Query, tree: tree_sitter.Tree) -> Iterator[Match]:
    """Yield matches in discovery order, with text predicates applied."""
    cursor = tree_sitter.QueryCursor(query)
    yield from cursor.matches(tree.root_node)
