"""Raw import-path extraction for a single source file.

The extractor reads a file, parses it with the grammar for its extension,
runs that grammar's import query, and returns the text of every ``@import``
capture with one layer of quotes removed. It never classifies: ``./x``,
``node:fs`` and ``lodash/debounce`` all come back verbatim.
"""

from __future__ import annotations

from pathlib import Path

import structlog
import tree_sitter

from depguess.core.errors import (
    EmptyImportPathError,
    ExtractionError,
    ParseError,
    ReadError,
)
from depguess.scan.backends import LanguageBackend
from depguess.scan.models import ExtractionResult, SourceFile
from depguess.scan.parser import load_language, parse_source
from depguess.scan.query import compile_query, iter_matches

logger = structlog.get_logger()

IMPORT_CAPTURE = "import"
_QUOTES = "'\"`"


def strip_quotes(text: str) -> str:
    """Remove a single layer of surrounding quote characters."""
    if text and text[0] in _QUOTES:
        text = text[1:]
    if text and text[-1] in _QUOTES:
        text = text[:-1]
    return text


class ImportExtractor:
    """Extracts raw import paths using a backend's structural queries.

    Grammars and queries are loaded when the extractor is built, before any
    file is dispatched. The compiled queries are shared read-only by every
    worker; parsers and cursors are created per call.
    """

    def __init__(self, backend: LanguageBackend, *, strict_parse: bool = True) -> None:
        self._backend = backend
        self._strict_parse = strict_parse
        self._languages: dict[str, tree_sitter.Language] = {}
        self._queries: dict[str, tree_sitter.Query] = {}

        for grammar in sorted(set(backend.grammars.values())):
            language = load_language(backend.grammar_specs[grammar])
            self._languages[grammar] = language
            self._queries[grammar] = compile_query(
                language, backend.queries[grammar], grammar=grammar
            )

    @property
    def backend(self) -> LanguageBackend:
        return self._backend

    def extract_source(self, content: bytes, grammar: str, path: str = "<memory>") -> list[str]:
        """Extract raw import paths from in-memory source.

        Raises:
            ParseError: If the source does not parse.
            EmptyImportPathError: If a match has captures but no ``@import``.
        """
        tree = parse_source(
            content,
            self._languages[grammar],
            path=path,
            grammar=grammar,
            strict=self._strict_parse,
        )

        import_paths: list[str] = []
        for _pattern_idx, captures in iter_matches(self._queries[grammar], tree):
            if not captures:
                continue
            nodes = captures.get(IMPORT_CAPTURE)
            if not nodes:
                raise EmptyImportPathError.for_match(path, sorted(captures))
            raw = nodes[0].text.decode("utf-8", errors="replace") if nodes[0].text else ""
            import_paths.append(strip_quotes(raw))

        return import_paths

    def extract_file(self, source: SourceFile) -> list[str]:
        """Extract raw import paths from a file on disk.

        Raises:
            ReadError: If the file cannot be read.
            ParseError: If the file does not parse or has no grammar.
            EmptyImportPathError: If a match has captures but no ``@import``.
        """
        grammar = self._backend.grammar_for(source.extension)
        if grammar is None:
            raise ParseError.malformed(str(source.path), f"<no grammar for {source.extension}>")

        try:
            content = source.path.read_bytes()
        except OSError as exc:
            raise ReadError.from_os_error(str(source.path), exc) from exc

        return self.extract_source(content, grammar, str(source.path))

    def run(self, source: SourceFile) -> ExtractionResult:
        """Extract one file, converting per-file failures into a failed result."""
        try:
            import_paths = self.extract_file(source)
        except ExtractionError as exc:
            logger.warning(
                "import_extraction_failed",
                path=str(source.path),
                error=exc.error_name,
                message=exc.message,
            )
            return ExtractionResult.failed(source.path, str(exc))

        logger.debug("imports_extracted", path=str(source.path), count=len(import_paths))
        return ExtractionResult(path=source.path, import_paths=tuple(import_paths))


def extract_imports(
    path: Path, backend: LanguageBackend, *, strict_parse: bool = True
) -> list[str]:
    """Convenience wrapper: raw import paths of a single file."""
    extractor = ImportExtractor(backend, strict_parse=strict_parse)
    return extractor.extract_file(SourceFile(path=path, extension=path.suffix.lower()))
