# change_detection/cli/interface.py
import io
import shlex
import sys
from pathlib import Path
from typing import Any, Dict, Tuple

import click
from click_option_group import optgroup
from rich.console import Console as RichConsole
from rich.progress import Progress, SpinnerColumn, TextColumn
import structlog
import logging as stdlib_logging

from change_detection import __version__ as app_version
from change_detection.cli.console_output import print_cli_summary_output
from change_detection.config.loader import build_config, load_and_merge_configs
from change_detection.config.settings import ChangeDetectionConfig, DEFAULT_CONSOLE_SHOW_SUMMARY
from change_detection.core.builder import ChangeDetectionBuilder
from change_detection.core.output import DEFAULT_INSTRUCTION_PREFIX, InstructionPrinter, write_to_file
from change_detection.core.pattern_matching import glob
from change_detection.core.stability import check_rebuild_stability
from change_detection.exceptions import ChangeDetectionError, UnstableBuildError
from change_detection.logging_setup import configure_logging

log = structlog.get_logger(__name__)

def _build_change_detection(config: ChangeDetectionConfig) -> ChangeDetectionBuilder:
    builder = ChangeDetectionBuilder().max_depth(config.max_depth)
    if config.include_patterns:
        builder.include(glob(*config.include_patterns))
    if config.exclude_patterns:
        builder.exclude(glob(*config.exclude_patterns))
    for input_path in config.input_paths:
        builder.path(input_path)
    return builder

def _run_generation_flow(config: ChangeDetectionConfig) -> int:
    if not config.input_paths:
        # no paths given anywhere: declare the current directory.
        config.input_paths = [Path(".")]
    log.info("change_detection_generation_started", paths=[str(p) for p in config.input_paths])
    builder = _build_change_detection(config)

    buffer = io.StringIO() if config.output_file else None
    printer = InstructionPrinter(prefix=config.instruction_prefix, stream=buffer)

    app_log_level = stdlib_logging.getLogger("change_detection").getEffectiveLevel()
    progress_disabled = app_log_level > stdlib_logging.INFO or not sys.stderr.isatty()
    stderr_console = RichConsole(file=sys.stderr)

    with Progress(
        SpinnerColumn(), TextColumn("[bold blue]{task.description}"),
        transient=True, disable=progress_disabled, console=stderr_console
    ) as progress:
        collect_task = progress.add_task("collecting paths...", total=None)

        def sink(path: Path):
            printer(path)
            progress.update(collect_task, advance=1, description=f"collected {printer.count} paths")

        builder.generate(sink)

    if buffer is not None:
        write_to_file(config.output_file, buffer.getvalue())
        click.echo(f"Info: Instructions written to: {config.output_file}", err=True)

    log.info("change_detection_generation_complete", emitted=printer.count)
    print_cli_summary_output(config, printer.count)
    return printer.count

def _fail(e: Exception):
    if isinstance(e, ChangeDetectionError):
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
    else:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Unexpected critical error: {e}. Please report this.", fg="red", err=True)
    sys.exit(1)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@click.option("--force-json-logs", "force_json_logs", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, package_name="change-detection", prog_name="change-detection", help="Show version and exit.")
def main_cli_group(verbosity_level: int, force_json_logs: bool):
    """change-detection: emit rerun-if-changed instructions for every file
    under the given paths, narrowed by include/exclude globs."""
    log_level = "warning"
    if verbosity_level == 1: log_level = "info"
    elif verbosity_level >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level, force_json_logs=force_json_logs)


@main_cli_group.command("generate")
@click.argument("input_paths", nargs=-1, type=click.Path(path_type=Path))
@optgroup.group("Filtering Options", help="Control which descendants are reported.")
@optgroup.option("-i", "--include", "include_patterns", multiple=True, help="Glob patterns a descendant must match (global include).")
@optgroup.option("-e", "--exclude", "exclude_patterns", multiple=True, help="Glob patterns pruning descendants (global exclude).")
@optgroup.option("--max-depth", "max_depth", type=click.IntRange(min=0), default=None, help="Do not descend more than this many levels below each path.")
@optgroup.group("Output Options", help="Where and how instructions are written.")
@optgroup.option("--prefix", "instruction_prefix", default=None, help=f"Instruction prefix. Default: {DEFAULT_INSTRUCTION_PREFIX}")
@optgroup.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Path to write the instructions to instead of stdout.")
@optgroup.option("--summary/--no-summary", "console_show_summary", default=None, help=f"Show a summary on stderr. Default: {'on' if DEFAULT_CONSOLE_SHOW_SUMMARY else 'off'}.")
@optgroup.group("Configuration", help="Configuration files and profiles.")
@optgroup.option("--config-profile", "active_config_profile_name", default=None, help="Load a profile from config file(s).")
def generate_command(active_config_profile_name, **cli_params: Any):
    """Print one instruction for every path collected from INPUT_PATHS.

    Paths default to the current directory. Missing paths are skipped.
    """
    log.debug("cli_command_invoked", command="generate", params={k: str(v) for k, v in cli_params.items()})
    try:
        raw_configs_from_toml_files = load_and_merge_configs()
        overrides: Dict[str, Any] = dict(cli_params)
        config = build_config(raw_configs_from_toml_files, active_config_profile_name, overrides)
        _run_generation_flow(config)
    except click.exceptions.Exit: raise
    except click.ClickException: raise
    except Exception as e:
        _fail(e)


@main_cli_group.command("check-stable", context_settings=dict(ignore_unknown_options=True))
@click.option("--cwd", "cwd", type=click.Path(exists=True, file_okay=False, path_type=Path), default=Path("."), help="Directory to run the build command in.")
@click.option("--clean", "clean_command", default=None, metavar="COMMAND", help="Command run once before the two builds, e.g. 'cargo clean --release'.")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
def check_stable_command(cwd: Path, clean_command: str, command: Tuple[str, ...]):
    """Run COMMAND twice and fail if the two outputs differ.

    Differing outputs mean the build script re-ran although none of the paths
    it declared changed.
    """
    log.debug("cli_command_invoked", command="check-stable", build_command=list(command), cwd=str(cwd))
    try:
        clean = shlex.split(clean_command) if clean_command else None
        check_rebuild_stability(list(command), cwd, clean_command=clean)
        click.secho("Info: outputs of two sequential runs match.", fg="green", err=True)
    except UnstableBuildError as e:
        log.error("unstable_build_detected", message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(2)
    except Exception as e:
        _fail(e)
