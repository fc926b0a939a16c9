# tests/test_walker.py
import os
import sys
import pytest
from pathlib import Path

from change_detection.core import walker
from change_detection.core.walker import collect_resources
from change_detection.exceptions import CollectionError


def accept_all(path: Path) -> bool:
    return True


def test_missing_root_yields_nothing(tmp_path: Path):
    assert collect_resources(tmp_path / "missing", accept_all) == []


def test_file_root_yields_only_itself(tmp_path: Path):
    target = tmp_path / "build.rs"
    target.write_text("fn main() {}")
    assert collect_resources(target, lambda path: False) == [target]


def test_empty_directory_yields_only_itself(tmp_path: Path):
    empty = tmp_path / "empty"
    empty.mkdir()
    assert collect_resources(empty, accept_all) == [empty]


def test_nested_tree(tmp_path: Path):
    (tmp_path / "a" / "b" / "c").mkdir(parents=True)
    (tmp_path / "a" / "b" / "c" / "leaf.txt").write_text("leaf")
    (tmp_path / "a" / "top.txt").write_text("top")

    result = collect_resources(tmp_path / "a", accept_all)

    assert set(result) == {
        tmp_path / "a",
        tmp_path / "a" / "top.txt",
        tmp_path / "a" / "b",
        tmp_path / "a" / "b" / "c",
        tmp_path / "a" / "b" / "c" / "leaf.txt",
    }
    assert len(result) == 5


def test_filter_is_not_consulted_for_root(tmp_path: Path):
    seen = []
    (tmp_path / "child").write_text("")

    def recording_filter(path: Path) -> bool:
        seen.append(path)
        return True

    collect_resources(tmp_path, recording_filter)
    assert seen == [tmp_path / "child"]


def test_max_depth(tmp_path: Path):
    (tmp_path / "one" / "two" / "three").mkdir(parents=True)

    assert collect_resources(tmp_path / "one", accept_all, max_depth=0) == [tmp_path / "one"]
    assert set(collect_resources(tmp_path / "one", accept_all, max_depth=1)) == {
        tmp_path / "one",
        tmp_path / "one" / "two",
    }
    assert len(collect_resources(tmp_path / "one", accept_all, max_depth=None)) == 3


def test_enumeration_failure_is_fatal(tmp_path: Path, monkeypatch):
    (tmp_path / "locked").mkdir()

    def denied(path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(walker.os, "scandir", denied)

    with pytest.raises(CollectionError) as exc_info:
        collect_resources(tmp_path / "locked", accept_all)
    assert exc_info.value.path == tmp_path / "locked"
    assert isinstance(exc_info.value.__cause__, PermissionError)


def test_directory_vanishing_during_walk_is_skipped(tmp_path: Path, monkeypatch):
    (tmp_path / "gone").mkdir()

    def vanished(path):
        raise FileNotFoundError(2, "No such file or directory", str(path))

    monkeypatch.setattr(walker.os, "scandir", vanished)
    assert collect_resources(tmp_path / "gone", accept_all) == [tmp_path / "gone"]


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need extra privileges on windows")
class TestSymlinks:
    def test_symlink_cycle_is_listed_but_not_entered(self, tmp_path: Path):
        root = tmp_path / "root"
        (root / "sub").mkdir(parents=True)
        (root / "sub" / "file.txt").write_text("x")
        os.symlink(root, root / "sub" / "back")

        result = collect_resources(root, accept_all)

        assert set(result) == {
            root,
            root / "sub",
            root / "sub" / "file.txt",
            root / "sub" / "back",
        }

    def test_symlinked_directory_is_followed(self, tmp_path: Path):
        shared = tmp_path / "shared"
        shared.mkdir()
        (shared / "data.json").write_text("{}")
        project = tmp_path / "project"
        project.mkdir()
        os.symlink(shared, project / "linked")

        result = collect_resources(project, accept_all)

        assert project / "linked" / "data.json" in result

    def test_broken_symlink_root_is_treated_as_missing(self, tmp_path: Path):
        link = tmp_path / "dangling"
        os.symlink(tmp_path / "nowhere", link)
        assert collect_resources(link, accept_all) == []
