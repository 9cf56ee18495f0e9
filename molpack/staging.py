"""Copying a library into a staging area and locating files inside it."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from molpack.pathutils import PackageError

DOT_LIBRARY = ".library"


def copy_file(source: str | os.PathLike[str], target: str | os.PathLike[str]) -> None:
    """Copy the contents and permission bits of ``source`` to ``target``."""
    try:
        shutil.copyfile(source, target)
    except OSError as exc:
        raise PackageError(
            f'When copying file "{source}" to "{target}": {exc.strerror or exc}'
        ) from exc
    try:
        shutil.copymode(source, target)
    except OSError as exc:
        raise PackageError(
            f'When copying file permissions from file "{source}" to file '
            f'"{target}": {exc.strerror or exc}'
        ) from exc


def copy_directory(source: str | os.PathLike[str], target: str | os.PathLike[str]) -> None:
    """Copy the directories and regular files below ``source`` into ``target``.

    ``target`` must already exist. Entries named ``.library`` are skipped, as
    is anything that is neither a directory nor a regular file.
    """
    try:
        entries = sorted(os.scandir(source), key=lambda entry: entry.name)
    except OSError as exc:
        raise PackageError(f"Failed to open directory {source}") from exc

    target_dir = Path(target)
    for entry in entries:
        if entry.name == DOT_LIBRARY:
            continue
        destination = target_dir / entry.name
        if entry.is_dir(follow_symlinks=False):
            try:
                destination.mkdir(exist_ok=True)
            except OSError as exc:
                raise PackageError(f"Failed to create folder {destination}.") from exc
            copy_directory(entry.path, destination)
        elif entry.is_file(follow_symlinks=False):
            copy_file(entry.path, destination)


def remove_folder(path: str | os.PathLike[str]) -> None:
    """Remove ``path`` and everything below it."""
    try:
        shutil.rmtree(path)
    except OSError as exc:
        raise PackageError(f"Failed to remove folder {path}: {exc.strerror or exc}") from exc


def find_file(filename: str, root: str | os.PathLike[str]) -> str | None:
    """Search ``root`` depth first for a regular file named ``filename``.

    Returns the path of the first match, or None if there is none.
    """
    try:
        entries = sorted(os.scandir(root), key=lambda entry: entry.name)
    except OSError as exc:
        raise PackageError(f"Failed to open directory {root}") from exc

    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            found = find_file(filename, entry.path)
            if found is not None:
                return found
        elif entry.is_file(follow_symlinks=False) and entry.name == filename:
            return entry.path
    return None


def icon_relative_path(
    icon_path: str | os.PathLike[str] | None, source_dir: str | os.PathLike[str]
) -> str:
    """Return ``icon_path`` relative to ``source_dir`` with ``/`` separators."""
    if icon_path is None:
        raise PackageError("Path to icon is empty.")
    try:
        relative = Path(icon_path).relative_to(Path(source_dir))
    except ValueError as exc:
        raise PackageError(
            f"Icon file {icon_path} is not inside the library folder {source_dir}."
        ) from exc
    result = relative.as_posix()
    if result in ("", "."):
        raise PackageError("Unable to remove tmp or library path from the icon file path.")
    return result