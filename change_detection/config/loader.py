# change_detection/config/loader.py
"""
Handles loading and merging of configurations from TOML files.

Settings are read from the user file first, then from the first project file
found in the working directory. Project values override user values and
``[profiles.<name>]`` tables from both files are merged by name.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Optional
import structlog

from change_detection.exceptions import ConfigError

from .settings import ChangeDetectionConfig

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".change-detection.toml", "change-detection.toml", "pyproject.toml"]
PYPROJECT_TOOL_TABLE = "change-detection"
USER_CONFIG_DIR = Path.home() / ".config" / "change-detection"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

# toml key -> expected python type(s) of the value.
CONFIG_KEY_TYPES: Dict[str, tuple] = {
    "input_paths": (list,),
    "include_patterns": (list,),
    "exclude_patterns": (list,),
    "instruction_prefix": (str,),
    "max_depth": (int,),
    "output_file": (str,),
    "console_show_summary": (bool,),
}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file(): return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Could not read configuration file {file_path}: {e}") from e
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get(PYPROJECT_TOOL_TABLE, {})
    return data

def load_and_merge_configs(project_dir: Optional[Path] = None) -> Dict[str, Any]:
    merged_toml_data: Dict[str, Any] = {}
    if USER_CONFIG_FILE.is_file():
        log.info("loading_user_global_config", path=str(USER_CONFIG_FILE))
        merged_toml_data.update(_load_toml_file_data(USER_CONFIG_FILE))

    search_dir = project_dir if project_dir is not None else Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = search_dir / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            # a pyproject.toml without our table does not end the search.
            continue
        log.info("loading_project_local_config", path=str(candidate))
        user_profiles = merged_toml_data.get("profiles", {})
        project_profiles = project_settings.pop("profiles", {})
        if isinstance(user_profiles, dict) and isinstance(project_profiles, dict):
            user_profiles.update(project_profiles)
            merged_toml_data["profiles"] = user_profiles
        elif isinstance(project_profiles, dict):
            merged_toml_data["profiles"] = project_profiles
        merged_toml_data.update(project_settings)
        break
    if not merged_toml_data: log.debug("no_configuration_files_loaded")
    return merged_toml_data

def select_profile(raw_configs: Dict[str, Any], profile_name: Optional[str]) -> Dict[str, Any]:
    # flattens top-level settings and the named profile into one settings dict.
    settings = {k: v for k, v in raw_configs.items() if k != "profiles"}
    if not profile_name:
        return settings
    profiles = raw_configs.get("profiles", {})
    profile_values = profiles.get(profile_name) if isinstance(profiles, dict) else None
    if not isinstance(profile_values, dict):
        raise ConfigError(f"Configuration profile '{profile_name}' not found")
    log.info("applying_profile_settings", profile=profile_name)
    settings.update(profile_values)
    return settings

def validate_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    validated: Dict[str, Any] = {}
    for key, value in settings.items():
        expected = CONFIG_KEY_TYPES.get(key)
        if expected is None:
            log.warning("unknown_config_key_ignored", key=key)
            continue
        # bool is an int subclass, so max_depth = true would otherwise pass.
        if not isinstance(value, expected) or (expected == (int,) and isinstance(value, bool)):
            raise ConfigError(
                f"Invalid value for '{key}': expected {expected[0].__name__}, got {type(value).__name__}"
            )
        if expected == (list,) and not all(isinstance(item, str) for item in value):
            raise ConfigError(f"Invalid value for '{key}': expected a list of strings")
        validated[key] = value
    return validated

def build_config(
    raw_configs: Dict[str, Any],
    profile_name: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ChangeDetectionConfig:
    # layers file settings, the selected profile and command line overrides.
    options = validate_settings(select_profile(raw_configs, profile_name))
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)) and not value:
            continue
        options[key] = list(value) if isinstance(value, tuple) else value
    log.debug("effective_config_options", options={k: str(v) for k, v in options.items()})
    return ChangeDetectionConfig(**options)
