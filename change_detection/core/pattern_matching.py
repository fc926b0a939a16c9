# change_detection/core/pattern_matching.py
from pathlib import Path
from typing import Iterable, List, Optional
import pathspec
import structlog

from change_detection.core.matchers import PathMatcher
from change_detection.exceptions import PatternError

log = structlog.get_logger(__name__)

def compile_glob_patterns_to_spec(glob_patterns: Iterable[str]) -> Optional[pathspec.PathSpec]:
    # compiles a list of glob patterns into a pathspec object for matching.
    patterns = [p for p in glob_patterns if p and p.strip()]
    if not patterns:
        return None
    try:
        return pathspec.GitIgnoreSpec.from_lines(patterns)
    except Exception as e:
        raise PatternError(f"error compiling glob patterns {patterns}: {e}") from e


class GlobMatcher(PathMatcher):
    """
    Matches paths against git-wildmatch style glob patterns.

    The path is tested in its slash-separated form, so ``**/*.tmp`` behaves the
    same on every platform. A directory matched by a pattern also matches
    everything below it, following gitignore semantics.
    """

    def __init__(self, patterns: Iterable[str]):
        self.patterns: List[str] = list(patterns)
        spec = compile_glob_patterns_to_spec(self.patterns)
        if spec is None:
            raise PatternError("at least one non-empty glob pattern is required")
        self._spec = spec
        log.debug("glob_matcher_compiled", patterns=self.patterns)

    def matches(self, path: Path) -> bool:
        path = Path(path)
        path_str = path.as_posix()
        if self._spec.match_file(path_str):
            return True
        # directory-only patterns such as ``node_modules/`` need the trailing slash.
        try:
            is_dir = path.is_dir()
        except OSError as e:
            log.debug("glob_matcher_stat_failed", path=path_str, error=str(e))
            return False
        return is_dir and self._spec.match_file(path_str.rstrip("/") + "/")

    def __repr__(self) -> str:
        return f"GlobMatcher({self.patterns!r})"


def glob(*patterns: str) -> GlobMatcher:
    return GlobMatcher(patterns)
