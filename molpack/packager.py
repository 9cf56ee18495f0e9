"""The packaging steps that turn a library folder into a ``.mol`` archive."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

from molpack.archive import ARCHIVE_EXTENSION
from molpack.archive import create_zip_archive as zip_directory
from molpack.arguments import ICON_PATH, LIBRARY_PATH, Arguments
from molpack.manifest import create_manifest_file
from molpack.pathutils import PackageError, extract_filename, lve_paths
from molpack.staging import (
    DOT_LIBRARY,
    copy_directory,
    copy_file,
    find_file,
    icon_relative_path,
    remove_folder,
)

STAGING_PREFIX = "TemporaryFolder"


class Packager:
    """Stages a library in a temporary folder and packs it into an archive.

    The steps are meant to run in the order ``run`` calls them.
    """

    def __init__(
        self,
        arguments: Arguments,
        executable_dir: str | os.PathLike[str] | None,
        output_dir: str | os.PathLike[str],
    ) -> None:
        self.arguments = arguments
        self.executable_dir = None if executable_dir is None else Path(executable_dir)
        self.output_dir = Path(output_dir)
        self.icon_path: Optional[str] = None
        self.lve_files: list[Optional[str]] = []
        self._staging_dir: Optional[Path] = None

    @property
    def library_name(self) -> str:
        """The last folder name of the library path."""
        name = self.arguments.library_name()
        if not name:
            raise PackageError("No path for the top-level library exists.")
        return name

    @property
    def staging_dir(self) -> Path:
        """The temporary staging folder, created on first use."""
        if self._staging_dir is None:
            try:
                self._staging_dir = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX))
            except OSError as exc:
                raise PackageError("Unable to create temporary folder. Abort!") from exc
        return self._staging_dir

    @property
    def source_dir(self) -> Path:
        """The copy of the library inside the staging folder."""
        return self.staging_dir / self.library_name

    @property
    def dot_library_dir(self) -> Path:
        """The ``.library`` folder of the staged library."""
        return self.source_dir / DOT_LIBRARY

    def _require_executable_dir(self) -> Path:
        if self.executable_dir is None:
            raise PackageError("Cannot extract the executable path.")
        return self.executable_dir

    def copy_folder_structure(self) -> None:
        """Copy the library folder into the staging folder."""
        source = self.arguments.get(LIBRARY_PATH)
        if source is None:
            raise PackageError("Fail to get librarypath")
        try:
            self.source_dir.mkdir()
        except OSError as exc:
            raise PackageError("Failed to create source folder. Abort.") from exc
        copy_directory(source, self.source_dir)

    def create_library_folder(self) -> None:
        """Create the ``.library`` folder in the staged library."""
        try:
            self.dot_library_dir.mkdir()
        except OSError as exc:
            raise PackageError(
                f"Failed to create directory with path {self.dot_library_dir}: "
                f"{exc.strerror or exc}"
            ) from exc

    def prepare_icon_file(self) -> None:
        """Find the icon in the staged library and record its relative path."""
        icon = self.arguments.get(ICON_PATH)
        if icon is None:
            return
        found = find_file(extract_filename(icon), self.source_dir)
        if found is None:
            raise PackageError("Unable to locate the icon file in the source folder.")
        self.icon_path = icon_relative_path(found, self.source_dir)

    def copy_lve(self) -> None:
        """Copy the available LVEs into ``.library`` when encrypting."""
        if not self.arguments.using_encryption():
            return
        directory = self._require_executable_dir()
        copied: list[Optional[str]] = []
        for path in lve_paths(directory):
            if path.exists():
                copy_file(path, self.dot_library_dir / path.name)
                copied.append(path.name)
            else:
                copied.append(None)
        self.lve_files = copied

    def copy_extra_files(self) -> None:
        """Copy a ``.library`` folder found next to the program into the staged one."""
        directory = self._require_executable_dir()
        extra = directory / DOT_LIBRARY
        if extra.exists():
            copy_directory(extra, self.dot_library_dir)

    def create_manifest(self) -> Path:
        """Write ``manifest.xml`` into ``.library`` and return its path."""
        return create_manifest_file(
            self.dot_library_dir, self.arguments, self.icon_path, self.lve_files
        )

    def create_zip_archive(self) -> Path:
        """Pack the staging folder into ``<library>.mol`` in the output folder."""
        target = self.output_dir / f"{self.library_name}{ARCHIVE_EXTENSION}"
        return zip_directory(self.staging_dir, target, self.arguments.using_encryption())

    def cleanup(self) -> None:
        """Remove the staging folder if it was created."""
        if self._staging_dir is not None and self._staging_dir.exists():
            remove_folder(self._staging_dir)
        self._staging_dir = None

    def run(self) -> Path:
        """Run every step and return the path of the archive.

        A failure to remove the staging folder afterwards is reported but
        not raised.
        """
        self.copy_folder_structure()
        self.create_library_folder()
        self.prepare_icon_file()
        self.copy_lve()
        self.copy_extra_files()
        self.create_manifest()
        archive = self.create_zip_archive()
        staged = self.source_dir
        try:
            self.cleanup()
        except PackageError:
            print(f"Ignoring failure to remove temporary files ({staged})")
        return archive