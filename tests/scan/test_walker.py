"""Tests for tree walking and the extraction scheduler."""

from __future__ import annotations

import errno
import os
import threading
import time
from collections.abc import Callable
from pathlib import Path

import pytest

from depguess.core.errors import EnumerationError
from depguess.core.excludes import is_ignored_dir
from depguess.scan import walker as walker_module
from depguess.scan.backends import NODEJS_BACKEND
from depguess.scan.models import ExtractionResult, SourceFile
from depguess.scan.walker import ExtractionScheduler, TreeWalker


def _walk(root: Path, max_file_size_bytes: int | None = None) -> list[Path]:
    tree_walker = TreeWalker(NODEJS_BACKEND, is_ignored_dir, max_file_size_bytes)
    return sorted(source.path.relative_to(root) for source in tree_walker.walk(root))


class TestTreeWalker:
    """File discovery."""

    def test_selects_source_extensions(self, make_tree: Callable[[dict[str, str]], Path]) -> None:
        root = make_tree(
            {
                "a.js": "",
                "b.jsx": "",
                "c.ts": "",
                "d.tsx": "",
                "e.mjs": "",
                "f.cjs": "",
                "README.md": "",
                "style.css": "",
                "types.d.ts.map": "",
                "Makefile": "",
            }
        )
        assert _walk(root) == [
            Path(p) for p in ("a.js", "b.jsx", "c.ts", "d.tsx", "e.mjs", "f.cjs")
        ]

    def test_extension_match_is_case_insensitive(
        self, make_tree: Callable[[dict[str, str]], Path]
    ) -> None:
        root = make_tree({"LEGACY.JS": ""})
        sources = list(TreeWalker(NODEJS_BACKEND, is_ignored_dir).walk(root))
        assert [s.extension for s in sources] == [".js"]

    def test_recurses_into_subdirectories(
        self, make_tree: Callable[[dict[str, str]], Path]
    ) -> None:
        root = make_tree({"src/lib/deep/x.ts": "", "src/y.js": ""})
        assert _walk(root) == [Path("src/lib/deep/x.ts"), Path("src/y.js")]

    def test_skips_ignored_directories(self, make_tree: Callable[[dict[str, str]], Path]) -> None:
        root = make_tree(
            {
                "node_modules/left-pad/index.js": "",
                "src/node_modules/nested/index.js": "",
                ".git/hooks/pre-commit.js": "",
                "dist/bundle.js": "",
                "src/app.js": "",
            }
        )
        assert _walk(root) == [Path("src/app.js")]

    def test_ignored_directory_is_not_listed(
        self, make_tree: Callable[[dict[str, str]], Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Ignored subtrees are skipped before their contents are read."""
        root = make_tree({"node_modules/x/index.js": "", "app.js": ""})
        listed: list[Path] = []
        real_list_dir = walker_module._list_dir

        def recording_list_dir(path: Path) -> list[os.DirEntry[str]]:
            listed.append(path)
            return real_list_dir(path)

        monkeypatch.setattr(walker_module, "_list_dir", recording_list_dir)
        _walk(root)
        assert listed == [root]

    def test_custom_predicate(self, make_tree: Callable[[dict[str, str]], Path]) -> None:
        root = make_tree({"fixtures/a.js": "", "src/b.js": ""})
        tree_walker = TreeWalker(NODEJS_BACKEND, is_ignored=lambda name: name == "fixtures")
        assert [s.path.name for s in tree_walker.walk(root)] == ["b.js"]

    def test_ignored_root_yields_nothing(self, tmp_path: Path) -> None:
        root = tmp_path / "node_modules"
        root.mkdir()
        (root / "a.js").write_text("")
        assert list(TreeWalker(NODEJS_BACKEND, is_ignored_dir).walk(root)) == []

    def test_skips_large_files(self, make_tree: Callable[[dict[str, str]], Path]) -> None:
        root = make_tree({"big.min.js": "x" * 2048, "small.js": "x"})
        assert _walk(root, max_file_size_bytes=1024) == [Path("small.js")]

    def test_does_not_follow_symlinked_directories(
        self, make_tree: Callable[[dict[str, str]], Path]
    ) -> None:
        root = make_tree({"src/a.js": ""})
        try:
            os.symlink(root / "src", root / "loop", target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")
        assert _walk(root) == [Path("src/a.js")]

    def test_directory_named_like_source_file_is_walked(
        self, make_tree: Callable[[dict[str, str]], Path]
    ) -> None:
        root = make_tree({"chart.js/index.js": ""})
        assert _walk(root) == [Path("chart.js/index.js")]

    def test_enumeration_failure_is_fatal(
        self, make_tree: Callable[[dict[str, str]], Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A directory that cannot be listed aborts the walk."""
        root = make_tree({"locked/a.js": "", "b.js": ""})
        real_scandir = os.scandir

        def failing_scandir(path: Path) -> object:
            if Path(path).name == "locked":
                raise PermissionError(errno.EACCES, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(walker_module.os, "scandir", failing_scandir)
        with pytest.raises(EnumerationError) as exc_info:
            _walk(root)
        assert exc_info.value.details["path"] == str(root / "locked")


class _FakeExtractor:
    """Stands in for ImportExtractor: returns canned paths per file name."""

    def __init__(
        self,
        imports: dict[str, tuple[str, ...]],
        hang: set[str] | None = None,
        delay: float = 0.0,
    ):
        self.imports = imports
        self.hang = hang or set()
        self.delay = delay
        self.release = threading.Event()
        self.calls: list[Path] = []
        self._lock = threading.Lock()

    def run(self, source: SourceFile) -> ExtractionResult:
        with self._lock:
            self.calls.append(source.path)
        if source.path.name in self.hang:
            self.release.wait(10)
        time.sleep(self.delay)
        if source.path.name.startswith("bad"):
            return ExtractionResult.failed(source.path, "boom")
        imports = self.imports.get(source.path.name, ())
        return ExtractionResult(path=source.path, import_paths=imports)


def _sources(*names: str) -> list[SourceFile]:
    return [SourceFile(path=Path("/repo") / name, extension=".js") for name in names]


class TestExtractionScheduler:
    """Fan-out and fan-in."""

    def test_one_result_per_source(self) -> None:
        fake = _FakeExtractor({"a.js": ("x",), "b.js": ("y", "z")})
        scheduler = ExtractionScheduler(extractor=fake, max_workers=4)  # type: ignore[arg-type]

        results = scheduler.run(iter(_sources("a.js", "b.js", "c.js")))

        assert len(results) == 3
        assert {r.path.name: r.import_paths for r in results} == {
            "a.js": ("x",),
            "b.js": ("y", "z"),
            "c.js": (),
        }

    def test_no_sources(self) -> None:
        scheduler = ExtractionScheduler(extractor=_FakeExtractor({}))  # type: ignore[arg-type]
        assert scheduler.run(iter([])) == []

    def test_failed_results_are_kept_for_the_collector(self) -> None:
        fake = _FakeExtractor({"good.js": ("ok",)})
        scheduler = ExtractionScheduler(extractor=fake, max_workers=2)  # type: ignore[arg-type]
        results = scheduler.run(iter(_sources("good.js", "bad.js")))
        outcomes = sorted((r.path.name, r.ok) for r in results)
        assert outcomes == [("bad.js", False), ("good.js", True)]

    def test_results_are_not_mixed_between_files(self) -> None:
        """Each result carries exactly its own file's imports."""
        names = [f"f{i}.js" for i in range(200)]
        fake = _FakeExtractor({name: (f"pkg-{name}",) for name in names})
        scheduler = ExtractionScheduler(extractor=fake, max_workers=16)  # type: ignore[arg-type]

        results = scheduler.run(iter(_sources(*names)))

        assert len(results) == len(names)
        for result in results:
            assert result.import_paths == (f"pkg-{result.path.name}",)

    def test_timeout_synthesizes_failed_result(self) -> None:
        """A hung file is reported as failed without blocking the others."""
        fake = _FakeExtractor({"fast.js": ("fast",)}, hang={"slow.js"})
        scheduler = ExtractionScheduler(
            extractor=fake,  # type: ignore[arg-type]
            max_workers=2,
            task_timeout_sec=0.2,
        )
        try:
            start = time.monotonic()
            results = scheduler.run(iter(_sources("slow.js", "fast.js")))
            elapsed = time.monotonic() - start
        finally:
            fake.release.set()

        by_name = {r.path.name: r for r in results}
        assert not by_name["slow.js"].ok
        assert "timed out" in (by_name["slow.js"].error or "")
        assert by_name["fast.js"].import_paths == ("fast",)
        assert elapsed < 5

    def test_queued_file_is_not_charged_for_a_hung_one(self) -> None:
        """With one worker, a file waiting behind a hung file still succeeds."""
        fake = _FakeExtractor({"fast.js": ("fast",)}, hang={"slow.js"})
        scheduler = ExtractionScheduler(
            extractor=fake,  # type: ignore[arg-type]
            max_workers=1,
            task_timeout_sec=0.3,
        )
        try:
            start = time.monotonic()
            results = scheduler.run(iter(_sources("slow.js", "fast.js")))
            elapsed = time.monotonic() - start
        finally:
            fake.release.set()

        by_name = {r.path.name: r for r in results}
        assert len(results) == 2
        assert not by_name["slow.js"].ok
        assert by_name["fast.js"].ok
        assert by_name["fast.js"].import_paths == ("fast",)
        assert [p.name for p in fake.calls].count("fast.js") == 1
        assert elapsed < 5

    def test_timeout_does_not_accumulate_across_tasks(self) -> None:
        """Tasks that each finish within the budget all succeed, however many queue up."""
        fake = _FakeExtractor({}, delay=0.15)
        scheduler = ExtractionScheduler(
            extractor=fake,  # type: ignore[arg-type]
            max_workers=1,
            task_timeout_sec=0.5,
        )
        results = scheduler.run(iter(_sources("a.js", "b.js", "c.js", "d.js", "e.js")))
        assert len(results) == 5
        assert all(r.ok for r in results)
