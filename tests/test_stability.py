# tests/test_stability.py
import sys
import pytest
from pathlib import Path

from change_detection.core.stability import check_rebuild_stability, run_build_command
from change_detection.exceptions import BuildCommandError, UnstableBuildError

COUNTER_SCRIPT = (
    "import pathlib; p = pathlib.Path('generated.in'); "
    "n = int(p.read_text()) if p.exists() else 0; "
    "p.write_text(str(n + 1)); print(n + 1)"
)


def python(code: str) -> list:
    return [sys.executable, "-c", code]


def test_run_build_command_returns_stdout(tmp_path: Path):
    assert run_build_command(python("print('hello')"), tmp_path) == "hello\n"


def test_run_build_command_failure(tmp_path: Path):
    with pytest.raises(BuildCommandError) as exc_info:
        run_build_command(python("import sys; sys.stderr.write('boom'); sys.exit(1)"), tmp_path)
    assert exc_info.value.stderr == "boom"


def test_missing_executable(tmp_path: Path):
    with pytest.raises(BuildCommandError):
        run_build_command([str(tmp_path / "no-such-binary")], tmp_path)


def test_stable_build(tmp_path: Path):
    output = check_rebuild_stability(python("print('cargo:rerun-if-changed=build.rs')"), tmp_path)
    assert output == "cargo:rerun-if-changed=build.rs\n"


def test_unstable_build(tmp_path: Path):
    with pytest.raises(UnstableBuildError) as exc_info:
        check_rebuild_stability(python(COUNTER_SCRIPT), tmp_path)
    assert exc_info.value.first_output == "1\n"
    assert exc_info.value.second_output == "2\n"


def test_clean_command_runs_first(tmp_path: Path):
    (tmp_path / "generated.in").write_text("41")
    clean = python("import pathlib; pathlib.Path('generated.in').unlink(); pathlib.Path('cleaned').touch()")

    with pytest.raises(UnstableBuildError) as exc_info:
        check_rebuild_stability(python(COUNTER_SCRIPT), tmp_path, clean_command=clean)

    assert (tmp_path / "cleaned").exists()
    assert exc_info.value.first_output == "1\n"
