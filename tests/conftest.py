# tests/conftest.py
import pytest
from pathlib import Path

from change_detection.config import loader
from change_detection.logging_setup import configure_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    # keeps structlog off stdout, which carries the instructions under test.
    configure_logging(log_level_str="warning")


@pytest.fixture(autouse=True)
def no_user_config(tmp_path_factory, monkeypatch):
    missing = tmp_path_factory.mktemp("user_config") / "config.toml"
    monkeypatch.setattr(loader, "USER_CONFIG_FILE", missing)


@pytest.fixture
def fixtures_root(tmp_path: Path, monkeypatch) -> Path:
    """Creates the fixtures-01..03 trees and makes their parent the cwd."""
    layout = {
        "fixtures-01": ["a", "ab", "b", "bc", "c", "cd"],
        "fixtures-02": ["abc", "def", "ghk"],
        "fixtures-03": ["hello", "hello.c", "hello.js"],
    }
    for dir_name, file_names in layout.items():
        directory = tmp_path / dir_name
        directory.mkdir()
        for file_name in file_names:
            (directory / file_name).write_text(file_name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def web_tree(tmp_path: Path, monkeypatch) -> Path:
    """A small npm-style project with a dependency directory worth pruning."""
    web = tmp_path / "web"
    (web / "src" / "components").mkdir(parents=True)
    (web / "node_modules" / "left-pad" / "lib").mkdir(parents=True)
    (web / "index.html").write_text("<html></html>")
    (web / "package-lock.json").write_text('{"version":"0.1.0"}')
    (web / "src" / "app.js").write_text("console.log('app')")
    (web / "src" / "components" / "button.js").write_text("export default 1")
    (web / "node_modules" / "left-pad" / "index.js").write_text("module.exports = 1")
    (web / "node_modules" / "left-pad" / "lib" / "pad.js").write_text("")
    monkeypatch.chdir(tmp_path)
    return tmp_path
