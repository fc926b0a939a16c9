# change_detection/exceptions.py
from pathlib import Path
from typing import Optional


class ChangeDetectionError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(ChangeDetectionError):
    # errors related to configuration.
    pass

class CollectionError(ChangeDetectionError):
    # fatal filesystem errors while walking a declared path.
    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path

class PatternError(ChangeDetectionError):
    # errors compiling glob patterns.
    pass

class OutputError(ChangeDetectionError):
    # errors during output operations.
    pass

class OutputEncodingError(OutputError):
    # a path cannot be rendered as utf-8 text for the orchestrator.
    pass

class BuilderConsumedError(ChangeDetectionError):
    # a builder was used again after generate() consumed it.
    pass

class BuildCommandError(ChangeDetectionError):
    # errors from the build command run by the stability check.
    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr

class UnstableBuildError(ChangeDetectionError):
    # two consecutive build runs produced different output.
    def __init__(self, message: str, first_output: str, second_output: str):
        super().__init__(message)
        self.first_output = first_output
        self.second_output = second_output
