"""Packing a staged library into a ``.mol`` zip archive."""

from __future__ import annotations

import os
import zipfile
from pathlib import Path
from typing import Iterator

from molpack.pathutils import PackageError, is_modelica_file

ARCHIVE_EXTENSION = ".mol"
BEST_COMPRESSION_LEVEL = 9


def zip_entry_name(path: str | os.PathLike[str], staging_dir: str | os.PathLike[str]) -> str:
    """Return the archive name of ``path``: its location below ``staging_dir`` with ``/``."""
    try:
        relative = Path(path).relative_to(Path(staging_dir))
    except ValueError as exc:
        raise PackageError(f"File {path} is not inside the staging folder {staging_dir}.") from exc
    name = relative.as_posix()
    if name in ("", "."):
        raise PackageError(f"File {path} has no name inside the staging folder {staging_dir}.")
    return name


def _regular_files(directory: str | os.PathLike[str]) -> Iterator[os.DirEntry[str]]:
    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError as exc:
        raise PackageError(f"Failed to open directory {directory}") from exc
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            yield from _regular_files(entry.path)
        elif entry.is_file(follow_symlinks=False):
            yield entry


def archive_entries(
    staging_dir: str | os.PathLike[str], encrypted: bool
) -> list[tuple[str, str]]:
    """List ``(file path, entry name)`` pairs for every file to put in the archive.

    Modelica source files are left out of an encrypted library.
    """
    return [
        (entry.path, zip_entry_name(entry.path, staging_dir))
        for entry in _regular_files(staging_dir)
        if not (encrypted and is_modelica_file(entry.name))
    ]


def create_zip_archive(
    staging_dir: str | os.PathLike[str],
    archive_path: str | os.PathLike[str],
    encrypted: bool,
) -> Path:
    """Zip the contents of ``staging_dir`` into ``archive_path`` and return its path.

    Any previous file at ``archive_path`` is replaced.
    """
    target = Path(archive_path)
    entries = archive_entries(staging_dir, encrypted)
    if target.exists():
        try:
            target.unlink()
        except OSError as exc:
            raise PackageError(f'Failed to remove old archive "{target}".') from exc

    try:
        archive = zipfile.ZipFile(
            target, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=BEST_COMPRESSION_LEVEL
        )
    except OSError as exc:
        raise PackageError(f'Failed to open zip archive "{target}": {exc}') from exc

    with archive:
        for path, name in entries:
            try:
                archive.write(path, name)
            except OSError as exc:
                raise PackageError(
                    f'Failed to write input file "{path}" to zip archive entry "{name}" '
                    f'in zip archive "{target}": {exc}'
                ) from exc
    return target