"""Path helpers shared by the packaging steps."""

from __future__ import annotations

import os
import sys
from pathlib import Path

LVE_NAMES: tuple[str, ...] = (
    "lve_win32.exe",
    "lve_win64.exe",
    "lve_linux32",
    "lve_linux64",
    "lve_darwin64",
)
"""Names of the licensing executables that may accompany an encrypted library."""

LVE_FOLDER = "LVE"


class PackageError(Exception):
    """Raised when a library cannot be packaged."""


def _separators() -> str:
    return "/\\" if os.sep == "\\" else "/"


def file_exists(path: str | os.PathLike[str]) -> bool:
    """Return True if a file or directory exists at ``path``."""
    return os.path.exists(path)


def is_directory(path: str | os.PathLike[str]) -> bool:
    """Return True if ``path`` exists and is a directory."""
    return os.path.isdir(path)


def validate_path(path: str | None) -> str:
    """Strip trailing separators from ``path`` and check it names a directory.

    Returns the trimmed path; raises PackageError when it is empty, missing
    or not a directory.
    """
    if not path:
        raise PackageError("Path is empty!")

    trimmed = str(path)
    while len(trimmed) > 1 and trimmed[-1] in "\\/":
        trimmed = trimmed[:-1]

    if not os.path.exists(trimmed):
        raise PackageError(f"Library path {trimmed} does not exist.")
    if not os.path.isdir(trimmed):
        raise PackageError(f"Library path {trimmed} is not a directory.")
    return trimmed


def extract_filename(path: str) -> str:
    """Return the part of ``path`` after its last separator."""
    cut = max(path.rfind(sep) for sep in _separators())
    return path[cut + 1:] if cut >= 0 else path


def extract_path(path: str) -> str:
    """Return ``path`` without its last component.

    A path with no separator is returned unchanged.
    """
    head, sep, _ = path.rpartition(os.sep)
    return head if sep else path


def _has_extension(filename: str | None, extension: str) -> bool:
    if not filename:
        return False
    dot = filename.rfind(".")
    return dot >= 0 and filename[dot:].lower() == extension


def is_modelica_file(filename: str | None) -> bool:
    """Return True if ``filename`` has the extension ``.mo`` in any case."""
    return _has_extension(filename, ".mo")


def is_encrypted_file(filename: str | None) -> bool:
    """Return True if ``filename`` has the extension ``.moc`` in any case."""
    return _has_extension(filename, ".moc")


def executable_directory() -> str | None:
    """Return the directory the running program was started from, if known."""
    if not sys.argv or not sys.argv[0]:
        return None
    return os.path.dirname(os.path.realpath(sys.argv[0]))


def lve_paths(directory: str | os.PathLike[str]) -> list[Path]:
    """Return the expected location of every LVE below ``directory``."""
    base = Path(directory) / LVE_FOLDER
    return [base / name for name in LVE_NAMES]


def count_lve(directory: str | os.PathLike[str] | None) -> int:
    """Count the LVEs present in the LVE folder of ``directory``."""
    if directory is None:
        raise PackageError("Cannot extract the executable path.")
    return sum(1 for path in lve_paths(directory) if path.exists())