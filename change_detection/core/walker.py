# change_detection/core/walker.py
import os
from pathlib import Path
from typing import Callable, List, Optional, Set, Tuple
import structlog

from change_detection.exceptions import CollectionError

log = structlog.get_logger(__name__)

DirectoryIdentity = Tuple[int, int]


def collect_resources(
    path: Path,
    path_filter: Callable[[Path], bool],
    max_depth: Optional[int] = None,
) -> List[Path]:
    """
    Collects `path` and every descendant admitted by `path_filter`.

    The root itself is never filtered. A missing root yields an empty list.
    A descendant rejected by the filter is pruned together with its subtree.
    Directory contents are listed before the directory entry that holds them.
    `max_depth` limits how far below the root the walk goes (root is depth 0).
    """
    result: List[Path] = []

    try:
        if not path.exists():
            log.debug("declared_path_missing", path=str(path))
            return result
        result.append(path)
        if not path.is_dir():
            return result
        root_identity = _directory_identity(path)
    except OSError as e:
        raise CollectionError(f"error collecting resources from '{path}': {e}", path=path) from e

    ancestors: Set[DirectoryIdentity] = {root_identity}
    result.extend(_collect_children(path, path_filter, max_depth, 1, ancestors))
    return result


def _directory_identity(path: Path) -> DirectoryIdentity:
    st = path.stat()
    return (st.st_dev, st.st_ino)


def _collect_children(
    directory: Path,
    path_filter: Callable[[Path], bool],
    max_depth: Optional[int],
    depth: int,
    ancestors: Set[DirectoryIdentity],
) -> List[Path]:
    result: List[Path] = []
    if max_depth is not None and depth > max_depth:
        log.debug("max_depth_reached", path=str(directory), max_depth=max_depth)
        return result

    # entries are read eagerly so the directory handle is closed before recursing.
    try:
        with os.scandir(directory) as entries:
            children = [(directory / entry.name, entry.is_dir()) for entry in entries]
    except FileNotFoundError:
        log.debug("directory_vanished_during_walk", path=str(directory))
        return result
    except OSError as e:
        raise CollectionError(f"error collecting resources under '{directory}': {e}", path=directory) from e

    for child, is_dir in children:
        if not path_filter(child):
            continue

        if is_dir:
            try:
                identity = _directory_identity(child)
            except FileNotFoundError:
                identity = None
            except OSError as e:
                raise CollectionError(f"error reading directory '{child}': {e}", path=child) from e

            if identity is None:
                log.debug("directory_vanished_during_walk", path=str(child))
            elif identity in ancestors:
                # a symlink pointing back up the tree; listed, never entered.
                log.warning("symlink_cycle_skipped", path=str(child))
            else:
                ancestors.add(identity)
                try:
                    result.extend(_collect_children(child, path_filter, max_depth, depth + 1, ancestors))
                finally:
                    ancestors.discard(identity)

        result.append(child)

    return result
