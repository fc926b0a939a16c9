# change_detection/core/__init__.py
"""
Path collection engine: matchers, declarations, the recursive walker and the
builder that drives them.
"""
from .builder import ChangeDetection, ChangeDetectionBuilder
from .declaration import ChangeDetectionPath, DeclarationKind
from .walker import collect_resources

__all__ = [
    "ChangeDetection",
    "ChangeDetectionBuilder",
    "ChangeDetectionPath",
    "DeclarationKind",
    "collect_resources",
]
