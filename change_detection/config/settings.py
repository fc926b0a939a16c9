from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import structlog

from change_detection.core.output import DEFAULT_INSTRUCTION_PREFIX
from change_detection.exceptions import ConfigError

log = structlog.get_logger(__name__)

DEFAULT_CONSOLE_SHOW_SUMMARY = False

@dataclass
class ChangeDetectionConfig:
    # holds all configuration parameters for a single run.
    input_paths: List[Path] = field(default_factory=list)
    include_patterns: List[str] = field(default_factory=list)
    exclude_patterns: List[str] = field(default_factory=list)
    instruction_prefix: str = DEFAULT_INSTRUCTION_PREFIX
    max_depth: Optional[int] = None
    output_file: Optional[Path] = None
    console_show_summary: bool = DEFAULT_CONSOLE_SHOW_SUMMARY

    def __post_init__(self):
        # coerces values that may arrive as plain strings from toml files.
        self.input_paths = [Path(p) for p in self.input_paths]
        if self.output_file is not None and not isinstance(self.output_file, Path):
            self.output_file = Path(self.output_file)
        if self.max_depth is not None and self.max_depth < 0:
            raise ConfigError(f"max_depth must be non-negative, got {self.max_depth}")
        log.debug("config_initialized", input_paths=[str(p) for p in self.input_paths])
