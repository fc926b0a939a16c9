# change_detection/core/stability.py
import subprocess
from pathlib import Path
from typing import Optional, Sequence
import structlog

from change_detection.exceptions import BuildCommandError, UnstableBuildError

log = structlog.get_logger(__name__)


def run_build_command(command: Sequence[str], cwd: Path) -> str:
    """
    Runs a build command and returns its standard output.

    Args:
        command: The command and its arguments, e.g. ["cargo", "run", "--release"]
        cwd: Directory to run the command from

    Raises:
        BuildCommandError: if the command cannot be started or exits non-zero
    """
    log.info("build_command_started", command=" ".join(command), cwd=str(cwd))
    try:
        result = subprocess.run(
            list(command),
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False
        )
    except OSError as e:
        raise BuildCommandError(f"could not run '{' '.join(command)}': {e}") from e

    if result.returncode != 0:
        log.error(
            "build_command_failed",
            command=" ".join(command),
            returncode=result.returncode,
            error=result.stderr,
        )
        raise BuildCommandError(
            f"'{' '.join(command)}' failed with exit code {result.returncode}",
            stderr=result.stderr,
        )

    return result.stdout


def check_rebuild_stability(
    command: Sequence[str],
    cwd: Path,
    clean_command: Optional[Sequence[str]] = None,
) -> str:
    """
    Runs `command` twice and verifies both runs print the same output.

    A build whose change detection instructions are correct does not re-run its
    build script the second time, so any difference in output means the script
    was triggered although nothing it declared had changed. The optional
    `clean_command` runs first so the first build starts from scratch.

    Returns the (identical) output of the two runs.
    """
    if clean_command:
        run_build_command(clean_command, cwd)

    first_run = run_build_command(command, cwd)
    second_run = run_build_command(command, cwd)

    if first_run != second_run:
        log.warning("rebuild_outputs_differ", command=" ".join(command))
        raise UnstableBuildError(
            f"outputs of two sequential '{' '.join(command)}' runs do not match: "
            f"{first_run!r} != {second_run!r}\n"
            "This means the build script was triggered a second time but it should not.",
            first_output=first_run,
            second_output=second_run,
        )

    log.info("rebuild_outputs_match", command=" ".join(command))
    return first_run
