# change_detection/core/declaration.py
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from change_detection.core.matchers import MatcherLike, PathMatcher, as_matcher


class DeclarationKind(Enum):
    # the four shapes a registered path can take.
    PATH = "path"
    PATH_INCLUDE = "path_include"
    PATH_EXCLUDE = "path_exclude"
    PATH_INCLUDE_EXCLUDE = "path_include_exclude"


@dataclass(frozen=True)
class ChangeDetectionPath:
    # one registered root path plus its own optional local filters.
    path: Path
    include: Optional[PathMatcher] = None
    exclude: Optional[PathMatcher] = None

    @classmethod
    def bare(cls, path: Union[str, Path]) -> "ChangeDetectionPath":
        return cls(Path(path))

    @classmethod
    def with_include(cls, path: Union[str, Path], include: MatcherLike) -> "ChangeDetectionPath":
        return cls(Path(path), include=as_matcher(include))

    @classmethod
    def with_exclude(cls, path: Union[str, Path], exclude: MatcherLike) -> "ChangeDetectionPath":
        return cls(Path(path), exclude=as_matcher(exclude))

    @classmethod
    def with_filter(
        cls, path: Union[str, Path], include: MatcherLike, exclude: MatcherLike
    ) -> "ChangeDetectionPath":
        return cls(Path(path), include=as_matcher(include), exclude=as_matcher(exclude))

    @property
    def kind(self) -> DeclarationKind:
        if self.include is not None and self.exclude is not None:
            return DeclarationKind.PATH_INCLUDE_EXCLUDE
        if self.include is not None:
            return DeclarationKind.PATH_INCLUDE
        if self.exclude is not None:
            return DeclarationKind.PATH_EXCLUDE
        return DeclarationKind.PATH

    def local_filter(self, path: Path) -> bool:
        # an absent include admits everything, an absent exclude rejects nothing.
        if self.include is not None and not self.include.matches(path):
            return False
        if self.exclude is not None and self.exclude.matches(path):
            return False
        return True
