# change_detection/core/matchers.py
"""
Path predicates used as include/exclude filters.

A matcher answers a single question, ``matches(path) -> bool``. Matchers are
combined with ``&``, ``|`` and ``~`` (or ``and_``, ``or_``, ``not_``), and any
plain callable taking a path can be used wherever a matcher is expected.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Union

PathPredicate = Callable[[Path], bool]


class PathMatcher(ABC):
    """Boolean test over a filesystem path."""

    @abstractmethod
    def matches(self, path: Path) -> bool:
        raise NotImplementedError

    def __call__(self, path: Path) -> bool:
        return self.matches(path)

    def and_(self, other: "MatcherLike") -> "PathMatcher":
        return AndMatcher(self, as_matcher(other))

    def or_(self, other: "MatcherLike") -> "PathMatcher":
        return OrMatcher(self, as_matcher(other))

    def not_(self) -> "PathMatcher":
        return NotMatcher(self)

    def __and__(self, other: "MatcherLike") -> "PathMatcher":
        return self.and_(other)

    def __rand__(self, other: "MatcherLike") -> "PathMatcher":
        return AndMatcher(as_matcher(other), self)

    def __or__(self, other: "MatcherLike") -> "PathMatcher":
        return self.or_(other)

    def __ror__(self, other: "MatcherLike") -> "PathMatcher":
        return OrMatcher(as_matcher(other), self)

    def __invert__(self) -> "PathMatcher":
        return self.not_()


MatcherLike = Union[PathMatcher, PathPredicate, Any]


class FnMatcher(PathMatcher):
    # wraps an arbitrary boolean test over a path.
    def __init__(self, func: PathPredicate):
        if not callable(func):
            raise TypeError(f"expected a callable path predicate, got {type(func).__name__}")
        self.func = func

    def matches(self, path: Path) -> bool:
        return bool(self.func(path))

    def __repr__(self) -> str:
        return f"FnMatcher({getattr(self.func, '__name__', repr(self.func))})"


class EqualMatcher(PathMatcher):
    # matches exactly one path, compared component-wise.
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def matches(self, path: Path) -> bool:
        return Path(path) == self.path

    def __repr__(self) -> str:
        return f"EqualMatcher({self.path.as_posix()!r})"


class AndMatcher(PathMatcher):
    def __init__(self, left: PathMatcher, right: PathMatcher):
        self.left = left
        self.right = right

    def matches(self, path: Path) -> bool:
        return self.left.matches(path) and self.right.matches(path)

    def __repr__(self) -> str:
        return f"({self.left!r} & {self.right!r})"


class OrMatcher(PathMatcher):
    def __init__(self, left: PathMatcher, right: PathMatcher):
        self.left = left
        self.right = right

    def matches(self, path: Path) -> bool:
        return self.left.matches(path) or self.right.matches(path)

    def __repr__(self) -> str:
        return f"({self.left!r} | {self.right!r})"


class NotMatcher(PathMatcher):
    def __init__(self, inner: PathMatcher):
        self.inner = inner

    def matches(self, path: Path) -> bool:
        return not self.inner.matches(path)

    def __repr__(self) -> str:
        return f"~{self.inner!r}"


def as_matcher(candidate: MatcherLike) -> PathMatcher:
    # coerces matchers, objects exposing matches() and plain callables into a PathMatcher.
    if isinstance(candidate, PathMatcher):
        return candidate
    matches_method = getattr(candidate, "matches", None)
    if callable(matches_method):
        return FnMatcher(matches_method)
    if callable(candidate):
        return FnMatcher(candidate)
    raise TypeError(f"cannot use {type(candidate).__name__} as a path matcher")


def equal(path: Union[str, Path]) -> PathMatcher:
    return EqualMatcher(path)


def func(predicate: PathPredicate) -> PathMatcher:
    return FnMatcher(predicate)


def file_name_matches(predicate: Callable[[str], bool]) -> PathMatcher:
    """
    Builds a matcher testing the final path component.

    Paths without a file name (e.g. ``/`` or ``..``) never match.
    """
    def _test(path: Path) -> bool:
        name = Path(path).name
        if not name or name == "..":
            return False
        return predicate(name)

    return FnMatcher(_test)
