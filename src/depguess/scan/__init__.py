"""Static import scanning.

Walks a source tree, extracts import paths with tree-sitter queries and
classifies them into external package names.
"""

from depguess.scan.backends import BACKENDS, NODEJS_BACKEND, LanguageBackend, get_backend
from depguess.scan.classifier import classify_import_path, classify_import_paths
from depguess.scan.extractor import ImportExtractor, extract_imports
from depguess.scan.models import ExtractionResult, ScanReport, SourceFile
from depguess.scan.ops import guess_imports, scan_tree
from depguess.scan.walker import ExtractionScheduler, TreeWalker

__all__ = [
    "BACKENDS",
    "NODEJS_BACKEND",
    "LanguageBackend",
    "get_backend",
    "classify_import_path",
    "classify_import_paths",
    "ImportExtractor",
    "extract_imports",
    "ExtractionResult",
    "ScanReport",
    "SourceFile",
    "guess_imports",
    "scan_tree",
    "ExtractionScheduler",
    "TreeWalker",
]
