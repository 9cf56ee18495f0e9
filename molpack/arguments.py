"""Command-line arguments that describe the library being packaged."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from molpack.pathutils import (
    PackageError,
    count_lve,
    extract_filename,
    file_exists,
    validate_path,
)

LIBRARY_PATH = "librarypath"
ENABLED = "enabled"
TITLE = "title"
DESCRIPTION = "description"
LIBRARY_VERSION = "version"
BUILD_NUMBER = "build"
BUILD_DATE = "date"
LANGUAGE_VERSION = "language"
COPYRIGHT = "copyright"
LICENSE = "license"
ENCRYPT = "encrypt"
ICON_PATH = "icon"
TOOLS_FILE = "tools"
DEPENDENCIES_FILE = "dependencies"
HELP = "--help"
SHORT_HELP = "-h"

VALID_ARGUMENTS: tuple[str, ...] = (
    LIBRARY_PATH,
    ENABLED,
    TITLE,
    DESCRIPTION,
    LIBRARY_VERSION,
    BUILD_NUMBER,
    BUILD_DATE,
    LANGUAGE_VERSION,
    COPYRIGHT,
    LICENSE,
    ENCRYPT,
    ICON_PATH,
    TOOLS_FILE,
    DEPENDENCIES_FILE,
)

MANDATORY_ARGUMENTS: tuple[str, ...] = (LIBRARY_PATH, LIBRARY_VERSION, LANGUAGE_VERSION)

HELP_ARGUMENTS: tuple[str, ...] = (HELP, SHORT_HELP)


class ArgumentError(PackageError):
    """Raised when the command-line arguments are invalid."""


@dataclass
class Arguments:
    """Argument names mapped to their values, in command-line order."""

    values: dict[str, str] = field(default_factory=dict)

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def get(self, key: str) -> str | None:
        """Return the value given for ``key``, or None if it was not given."""
        return self.values.get(key)

    def validate_mandatory(self) -> None:
        """Raise ArgumentError if a mandatory argument is missing."""
        for key in MANDATORY_ARGUMENTS:
            if key not in self.values:
                raise ArgumentError(f"Mandatory argument {key} is missing.")

    def validate_library_path(self) -> None:
        """Check that the library path names a directory.

        Trailing separators are removed from the stored path.
        """
        value = self.get(LIBRARY_PATH)
        if value is None:
            raise ArgumentError("No path for the top-level library exists.")
        try:
            self.values[LIBRARY_PATH] = validate_path(value)
        except ArgumentError:
            raise
        except PackageError as exc:
            raise ArgumentError(str(exc)) from exc

    def validate_encryption(self, lve_directory: str | os.PathLike[str] | None) -> None:
        """When encryption is requested, require at least one LVE."""
        if not self.using_encryption():
            return
        try:
            found = count_lve(lve_directory)
        except ArgumentError:
            raise
        except PackageError as exc:
            raise ArgumentError(str(exc)) from exc
        if found == 0:
            raise ArgumentError("No LVE was found. Encryption not possible.")

    def validate_xml_file(self, key: str) -> None:
        """If ``key`` was given, require the XML file it names to exist."""
        value = self.get(key)
        if value is not None and not file_exists(value):
            raise ArgumentError(f'Xml-file "{value}" was not found.')

    def validate_icon(self) -> None:
        """If an icon was given, require the file to exist."""
        value = self.get(ICON_PATH)
        if value is not None and not file_exists(value):
            raise ArgumentError(f"Icon file {value} doesn't exist.")

    def validate(self, lve_directory: str | os.PathLike[str] | None) -> None:
        """Run every validation step in order, stopping at the first failure."""
        self.validate_mandatory()
        self.validate_library_path()
        self.validate_encryption(lve_directory)
        self.validate_xml_file(TOOLS_FILE)
        self.validate_xml_file(DEPENDENCIES_FILE)
        self.validate_icon()

    def library_name(self) -> str | None:
        """Return the last folder name of the library path."""
        path = self.get(LIBRARY_PATH)
        if path is None:
            return None
        if os.sep == "/" and path.endswith("/"):
            path = path[:-1]
        return extract_filename(path)

    def using_encryption(self) -> bool:
        """Return True if the encrypt argument is ``true`` in any case."""
        value = self.get(ENCRYPT)
        return value is not None and value.lower() == "true"


def parse_arguments(argv: Sequence[str]) -> Arguments:
    """Parse ``-name value`` pairs; ``argv`` excludes the program name.

    The first character of each name is dropped before it is looked up.
    """
    arguments = Arguments()
    items = iter(argv)
    for raw in items:
        key = raw[1:]
        if not key or key not in VALID_ARGUMENTS:
            raise ArgumentError(f"Argument {raw} is not valid.")
        if key in arguments.values:
            raise ArgumentError(f"Can not add argument {key} twice.")
        value = next(items, "")
        if value == "":
            raise ArgumentError(f"Argument {key} is missing a value.")
        arguments.values[key] = value
    return arguments


def help_requested(argv: Iterable[str]) -> bool:
    """Return True if any argument asks for help."""
    return any(arg in HELP_ARGUMENTS for arg in argv)


def wrap_aligned(text: str, max_length: int, level: int) -> str:
    """Word-wrap ``text`` at ``max_length`` columns, indented by ``level`` tabs."""
    indent = "\t" * level
    words = text.split(" ")
    if words[-1] == "":
        words.pop()

    parts = [indent]
    printed = 0
    for position, word in enumerate(words):
        if printed + len(word) >= max_length:
            parts.append("\n" + indent)
            printed = 0
        parts.append(word)
        printed += len(word) + 1
        if position < len(words) - 1:
            parts.append(" ")
    parts.append("\n")
    return "".join(parts)


_MANDATORY_HELP: tuple[tuple[str, str], ...] = (
    (LANGUAGE_VERSION, "Version of the Modelica language the library uses."),
    (
        LIBRARY_PATH,
        "Path to the top-level directory. If this argument is missing or the path is wrong, "
        "the tool will abort since it's not possible to build a container.",
    ),
    (LIBRARY_VERSION, "The version number of the library."),
)

_OPTIONAL_HELP: tuple[tuple[str, str], ...] = (
    (BUILD_NUMBER, "Build number of the library."),
    (COPYRIGHT, "Textual copyright information."),
    (BUILD_DATE, "Release date of the library."),
    (
        DEPENDENCIES_FILE,
        "Adds a list of libraries (in an xml file) that this library depends on. If the "
        "supplied path to the dependency-xml file is wrong the tool will abort.",
    ),
    (DESCRIPTION, "Description of the library."),
    (ENABLED, "If the library should be loaded by default."),
    (
        ENCRYPT,
        "If the value of this argument is true then LVEs must be copied to the .library "
        "directory of the source structure. If the path to copy from is wrong or LVEs are "
        "missing or have the wrong names the tool will abort.",
    ),
    (
        ICON_PATH,
        "An icon to use for the library. If the supplied path to the icon file is wrong or "
        "the file can't be located in the library structure the tool will abort.",
    ),
    (LICENSE, "Textual license information."),
    (TITLE, "Official title of the library."),
    (
        TOOLS_FILE,
        "Adds a list of Modelica tools (in an xml file) that this library is compatible "
        "with. If the supplied path to the tool-xml file is wrong the tool will abort.",
    ),
)

_DESCRIPTION_TEXT = (
    "Tool for packaging a Modelica library into a container for distribution. The "
    "container is a zip file with a .mol file extension. It contains one top-level "
    "directory and several subdirectories according to the Modelica structure."
)


def format_help() -> str:
    """Return the help text for the command."""
    max_length = 80
    tab_size = 8
    indented_width = max_length - tab_size * 2

    parts = [
        "SYNOPSIS\n",
        "\tpackagetool <-arg1> <value1> <-arg2> <value2> ...\n",
        "\n",
        "DESCRIPTION\n",
        wrap_aligned(_DESCRIPTION_TEXT, max_length - tab_size, 1),
        "\n",
        "\tMandatory:\n",
    ]
    for name, description in _MANDATORY_HELP:
        parts.append(f"\t-{name}\n")
        parts.append(wrap_aligned(description, indented_width, 2))
    parts.append("\n")
    parts.append("\tOptional:\n")
    for name, description in _OPTIONAL_HELP:
        parts.append(f"\t-{name}\n")
        parts.append(wrap_aligned(description, indented_width, 2))
    parts.append(f"\t{SHORT_HELP}, {HELP}\n")
    parts.append(wrap_aligned("Print help information.", indented_width, 2))
    parts.append("SEE ALSO\n")
    parts.append("\tFull documentation, LibraryEncryption_PackageTool.docx\n")
    return "".join(parts)