"""Command entry point that packages a library into a ``.mol`` container."""

from __future__ import annotations

import os
import sys
from typing import Callable, Optional, Sequence

from molpack.arguments import format_help, help_requested, parse_arguments
from molpack.packager import Packager
from molpack.pathutils import PackageError, executable_directory

_STEPS: tuple[tuple[Callable[[Packager], object], int], ...] = (
    (Packager.copy_folder_structure, 2),
    (Packager.create_library_folder, 3),
    (Packager.prepare_icon_file, 4),
    (Packager.copy_lve, 5),
    (Packager.copy_extra_files, 6),
    (Packager.create_manifest, 7),
    (Packager.create_zip_archive, 9),
)


def _discard_staging(packager: Packager) -> None:
    try:
        packager.cleanup()
    except PackageError:
        pass


def do_work(argv: Sequence[str]) -> int:
    """Package the library described by ``argv`` (program name excluded).

    Returns 0 on success, 1 for invalid arguments and a step-specific code
    above 1 when a packaging step fails.
    """
    if help_requested(argv):
        print(format_help(), end="")
        return 0

    print("\nValidating arguments.")
    exe_dir = executable_directory()
    try:
        arguments = parse_arguments(argv)
        arguments.validate(exe_dir)
    except PackageError as exc:
        print(f"Error: {exc}")
        return 1

    print("Start packing library.")
    packager = Packager(arguments, exe_dir, os.getcwd())
    for step, code in _STEPS:
        try:
            step(packager)
        except PackageError as exc:
            print(f"Error: {exc}")
            _discard_staging(packager)
            return code

    staged = packager.source_dir
    try:
        packager.cleanup()
    except PackageError:
        print(f"Ignoring failure to remove temporary files ({staged})")
        return 0

    print("Library is done.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command with ``argv`` or the process arguments."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    if not argv:
        print("Too few arguments.")
        print("For usage use -h or --help")
        return 1
    return do_work(argv)


if __name__ == "__main__":
    raise SystemExit(main())