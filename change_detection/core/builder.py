# change_detection/core/builder.py
"""
Builder collecting path declarations and emitting change detection instructions.

Typical use from a build script::

    from change_detection import ChangeDetection, glob

    ChangeDetection.exclude(glob("another_path/**/*.tmp")) \\
        .path("static") \\
        .path("another_path") \\
        .path("build.rs") \\
        .generate()

which prints one ``cargo:rerun-if-changed=<path>`` line for every collected path.
"""
from pathlib import Path
from typing import List, Optional, Tuple, Union
import structlog

from change_detection.core.declaration import ChangeDetectionPath
from change_detection.core.matchers import MatcherLike, PathMatcher, as_matcher
from change_detection.core.output import PathCollector, PathSink, print_change_detection_instruction
from change_detection.core.walker import collect_resources
from change_detection.exceptions import BuilderConsumedError

log = structlog.get_logger(__name__)

PathLike = Union[str, Path]


class ChangeDetectionBuilder:
    """
    Accumulates path declarations and global filters.

    Every mutating call returns the builder so calls can be chained. The
    builder is single-shot: once `generate` ran, any further use raises
    `BuilderConsumedError`. Prefer the `ChangeDetection` entry points over
    constructing this directly.
    """

    def __init__(self):
        self._include: Optional[PathMatcher] = None
        self._exclude: Optional[PathMatcher] = None
        self._paths: List[ChangeDetectionPath] = []
        self._max_depth: Optional[int] = None
        self._consumed = False

    @property
    def declarations(self) -> Tuple[ChangeDetectionPath, ...]:
        return tuple(self._paths)

    @property
    def global_include(self) -> Optional[PathMatcher]:
        return self._include

    @property
    def global_exclude(self) -> Optional[PathMatcher]:
        return self._exclude

    def _ensure_not_consumed(self):
        if self._consumed:
            raise BuilderConsumedError("change detection builder was already consumed by generate()")

    def path(self, path: Union[PathLike, ChangeDetectionPath]) -> "ChangeDetectionBuilder":
        """Collects instructions from `path`, a single file or a directory."""
        self._ensure_not_consumed()
        if isinstance(path, ChangeDetectionPath):
            self._paths.append(path)
        else:
            self._paths.append(ChangeDetectionPath.bare(path))
        return self

    def path_include(self, path: PathLike, filter: MatcherLike) -> "ChangeDetectionBuilder":
        """Collects instructions from `path`, keeping only descendants matching `filter`."""
        self._ensure_not_consumed()
        self._paths.append(ChangeDetectionPath.with_include(path, filter))
        return self

    def path_exclude(self, path: PathLike, filter: MatcherLike) -> "ChangeDetectionBuilder":
        """Collects instructions from `path`, pruning descendants matching `filter`."""
        self._ensure_not_consumed()
        self._paths.append(ChangeDetectionPath.with_exclude(path, filter))
        return self

    def path_filter(self, path: PathLike, include: MatcherLike, exclude: MatcherLike) -> "ChangeDetectionBuilder":
        """Collects instructions from `path` applying both local `include` and `exclude` filters."""
        self._ensure_not_consumed()
        self._paths.append(ChangeDetectionPath.with_filter(path, include, exclude))
        return self

    def include(self, filter: MatcherLike) -> "ChangeDetectionBuilder":
        # sets the global include filter; a second call replaces the first.
        self._ensure_not_consumed()
        self._include = as_matcher(filter)
        return self

    def exclude(self, filter: MatcherLike) -> "ChangeDetectionBuilder":
        # sets the global exclude filter; a second call replaces the first.
        self._ensure_not_consumed()
        self._exclude = as_matcher(filter)
        return self

    def filter(self, include: MatcherLike, exclude: MatcherLike) -> "ChangeDetectionBuilder":
        return self.include(include).exclude(exclude)

    def max_depth(self, depth: Optional[int]) -> "ChangeDetectionBuilder":
        # limits how deep below each declared root the walk descends.
        self._ensure_not_consumed()
        if depth is not None and depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {depth}")
        self._max_depth = depth
        return self

    def filter_include_exclude(self, path: Path) -> bool:
        if self._include is not None and not self._include.matches(path):
            return False
        if self._exclude is not None and self._exclude.matches(path):
            return False
        return True

    def collect(self, declaration: ChangeDetectionPath) -> List[Path]:
        # walks one declaration with the global and local filters combined.
        def effective_filter(path: Path) -> bool:
            return self.filter_include_exclude(path) and declaration.local_filter(path)

        return collect_resources(declaration.path, effective_filter, self._max_depth)

    def generate_extended(self, sink: PathSink) -> None:
        """Walks every declaration in registration order and hands each path to `sink`."""
        self._ensure_not_consumed()
        self._consumed = True
        log.debug(
            "change_detection_generate_started",
            declarations=len(self._paths),
            global_include=repr(self._include) if self._include else None,
            global_exclude=repr(self._exclude) if self._exclude else None,
        )
        emitted = 0
        for declaration in self._paths:
            log.debug("declaration_walk_started", root=str(declaration.path), kind=declaration.kind.value)
            for path in self.collect(declaration):
                sink(path)
                emitted += 1
        log.debug("change_detection_generate_finished", emitted=emitted)

    def generate(self, sink: Optional[PathSink] = None) -> None:
        """Emits instructions for all declarations, by default as cargo lines on stdout."""
        self.generate_extended(sink if sink is not None else print_change_detection_instruction)

    def collect_all(self) -> List[Path]:
        # consumes the builder and returns the collected paths instead of printing them.
        collector = PathCollector()
        self.generate_extended(collector)
        return collector.paths


class ChangeDetection:
    """
    Entry point creating a `ChangeDetectionBuilder`.

    ``ChangeDetection.path("src/hello.c").generate()`` is the same as printing
    ``cargo:rerun-if-changed=src/hello.c``. Directories are walked recursively.
    """

    @staticmethod
    def path(path: Union[PathLike, ChangeDetectionPath]) -> ChangeDetectionBuilder:
        return ChangeDetectionBuilder().path(path)

    @staticmethod
    def path_include(path: PathLike, filter: MatcherLike) -> ChangeDetectionBuilder:
        return ChangeDetectionBuilder().path_include(path, filter)

    @staticmethod
    def path_exclude(path: PathLike, filter: MatcherLike) -> ChangeDetectionBuilder:
        return ChangeDetectionBuilder().path_exclude(path, filter)

    @staticmethod
    def path_filter(path: PathLike, include: MatcherLike, exclude: MatcherLike) -> ChangeDetectionBuilder:
        return ChangeDetectionBuilder().path_filter(path, include, exclude)

    @staticmethod
    def include(filter: MatcherLike) -> ChangeDetectionBuilder:
        return ChangeDetectionBuilder().include(filter)

    @staticmethod
    def exclude(filter: MatcherLike) -> ChangeDetectionBuilder:
        return ChangeDetectionBuilder().exclude(filter)

    @staticmethod
    def filter(include: MatcherLike, exclude: MatcherLike) -> ChangeDetectionBuilder:
        return ChangeDetectionBuilder().include(include).exclude(exclude)
