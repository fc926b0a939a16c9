"""change-detection: emit rerun-if-changed instructions for build scripts."""

__version__ = "1.2.0"

from change_detection.core.builder import ChangeDetection, ChangeDetectionBuilder
from change_detection.core.declaration import ChangeDetectionPath
from change_detection.core.matchers import PathMatcher, equal, func, file_name_matches
from change_detection.core.output import PathCollector, print_change_detection_instruction
from change_detection.core.pattern_matching import GlobMatcher, glob

__all__ = [
    "ChangeDetection",
    "ChangeDetectionBuilder",
    "ChangeDetectionPath",
    "GlobMatcher",
    "PathCollector",
    "PathMatcher",
    "equal",
    "file_name_matches",
    "func",
    "glob",
    "print_change_detection_instruction",
]
