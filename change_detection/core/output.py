# change_detection/core/output.py
import sys
import threading
from pathlib import Path, PurePath
from typing import Callable, List, Optional, TextIO
import structlog

from change_detection.exceptions import OutputEncodingError, OutputError

log = structlog.get_logger(__name__)

DEFAULT_INSTRUCTION_PREFIX = "cargo:rerun-if-changed="

PathSink = Callable[[Path], None]


def to_slash_path(path: PurePath) -> str:
    # renders a path with forward slashes only, failing on text that is not valid utf-8.
    slash_path = PurePath(path).as_posix()
    try:
        slash_path.encode("utf-8")
    except UnicodeEncodeError as e:
        raise OutputEncodingError(f"can't convert path to utf-8 string: {slash_path!r}") from e
    if "\n" in slash_path or "\r" in slash_path:
        raise OutputEncodingError(f"path contains a line break and can't be emitted: {slash_path!r}")
    return slash_path


def format_change_detection_instruction(path: PurePath, prefix: str = DEFAULT_INSTRUCTION_PREFIX) -> str:
    return f"{prefix}{to_slash_path(path)}"


class InstructionPrinter:
    """
    Sink writing one instruction line per path.

    The stream defaults to whatever ``sys.stdout`` is at write time. Writes are
    serialized so a printer can be shared between threads without interleaving.
    """

    def __init__(self, prefix: str = DEFAULT_INSTRUCTION_PREFIX, stream: Optional[TextIO] = None):
        self.prefix = prefix
        self.stream = stream
        self.count = 0
        self._lock = threading.Lock()

    def __call__(self, path: Path) -> None:
        line = format_change_detection_instruction(path, self.prefix) + "\n"
        stream = self.stream if self.stream is not None else sys.stdout
        with self._lock:
            try:
                stream.write(line)
                stream.flush()
            except (OSError, ValueError) as e:
                raise OutputError(f"failed to write change detection instruction for '{path}': {e}") from e
            self.count += 1


def print_change_detection_instruction(path: Path) -> None:
    # default sink: writes a cargo:rerun-if-changed line to stdout.
    InstructionPrinter()(path)


class PathCollector:
    # sink that accumulates paths in memory instead of printing them.
    def __init__(self):
        self.paths: List[Path] = []

    def __call__(self, path: Path) -> None:
        self.paths.append(Path(path))


def write_to_file(output_file_path: Path, text_content: str):
    # writes text content to the specified file path.
    log.info("writing_output_to_file", path=str(output_file_path))
    try:
        output_file_path.write_text(text_content, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"failed to write to file '{output_file_path}': {e}") from e
