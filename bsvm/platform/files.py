"""Filesystem helpers."""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Iterable
from pathlib import Path

__all__ = ["atomic_write_text", "copy_tree", "remove_tree"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def copy_tree(src: Path, dest: Path, *, exclude: Iterable[str] = ()) -> None:
    """Recursively copy ``src`` into ``dest``, overwriting existing files.

    Names in ``exclude`` are skipped at the root of ``src`` only; nested
    entries with the same name are copied.

    Raises:
        OSError: If any file cannot be copied.
    """
    excluded = frozenset(exclude)
    root = os.path.normpath(str(src))

    def _ignore(directory: str, names: list[str]) -> set[str]:
        if os.path.normpath(directory) != root:
            return set()
        return {name for name in names if name in excluded}

    shutil.copytree(src, dest, ignore=_ignore, dirs_exist_ok=True, symlinks=True)


def remove_tree(path: Path) -> None:
    """Remove a directory tree (or a single file).

    Raises:
        OSError: If removal fails.
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
