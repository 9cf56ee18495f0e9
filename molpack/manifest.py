"""Generation of the ``manifest.xml`` file placed in a library's ``.library`` folder."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional, TextIO

from molpack.arguments import (
    BUILD_DATE,
    BUILD_NUMBER,
    COPYRIGHT,
    DEPENDENCIES_FILE,
    DESCRIPTION,
    ENABLED,
    ICON_PATH,
    LANGUAGE_VERSION,
    LIBRARY_VERSION,
    LICENSE,
    TITLE,
    TOOLS_FILE,
    Arguments,
)

MANIFEST_FILENAME = "manifest.xml"
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'
_INDENT = "\t"

_ENTITIES = {
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "&": "&amp;",
}
_ESCAPE_TABLE = str.maketrans(_ENTITIES)


def escape_text(text: str) -> str:
    """Replace the XML reserved characters ``< > " &`` with entities."""
    return text.translate(_ESCAPE_TABLE)


class XmlWriter:
    """Writes indented XML elements to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self.indent = 0
        self.in_attributes = False
        self.on_new_line = True

    def _write_indent(self) -> None:
        if self.on_new_line:
            self.stream.write(_INDENT * self.indent)
        self.on_new_line = False

    def _end_attributes(self, add_newline: bool) -> None:
        if self.in_attributes:
            self.stream.write(">")
            self.in_attributes = False
            if add_newline:
                self.stream.write("\n")
                self.on_new_line = True

    def open(self, element: str) -> None:
        """Start an element; attributes may follow until content is added."""
        self._end_attributes(True)
        self._write_indent()
        self.stream.write(f"<{element}")
        self.in_attributes = True
        self.on_new_line = False
        self.indent += 1

    def close(self, element: str) -> None:
        """End an element, as ``/>`` if it received no content."""
        self.indent -= 1
        if self.in_attributes:
            self.stream.write("/>\n")
            self.in_attributes = False
        else:
            self._write_indent()
            self.stream.write(f"</{element}>\n")
        self.on_new_line = True

    def attribute(self, name: str, value: str) -> None:
        """Add an attribute to the element most recently opened."""
        self.stream.write(f' {name}="{escape_text(value)}"')

    def text(self, text: str, separate_line: bool) -> None:
        """Add text content, optionally on a line of its own."""
        self._end_attributes(separate_line)
        self._write_indent()
        self.stream.write(escape_text(text))
        if separate_line:
            self.stream.write("\n")
            self.on_new_line = True

    def raw_lines(self, lines: Iterable[str]) -> None:
        """Paste lines verbatim; only a line starting a fresh line is indented."""
        for line in lines:
            self._write_indent()
            self.stream.write(f"{line}\n")
        self.on_new_line = True


def extract_platform(filename: str) -> str:
    """Return the platform part of an LVE name: after the first ``_``, before the first ``.``."""
    _, underscore, rest = filename.partition("_")
    if not underscore:
        return ""
    return rest.partition(".")[0]


def copy_file_information(writer: XmlWriter, path: str | os.PathLike[str]) -> None:
    """Paste every complete line of an XML file except the first into ``writer``."""
    with open(path, encoding="utf-8", newline="") as source:
        content = source.read()
    # The last piece is either empty or a line lacking its newline; both are dropped.
    lines = content.split("\n")[1:-1]
    writer.raw_lines(lines)


def _value_attribute(writer: XmlWriter, name: str, arguments: Arguments, key: str) -> None:
    value = arguments.get(key)
    if value is not None:
        writer.attribute(name, value)


def _value_element_text(
    writer: XmlWriter, element: str, arguments: Arguments, key: str, separate_line: bool
) -> None:
    value = arguments.get(key)
    if value is not None:
        writer.open(element)
        writer.text(value, separate_line)
        writer.close(element)


def _value_element_attribute(
    writer: XmlWriter, element: str, attribute: str, arguments: Arguments, key: str
) -> None:
    value = arguments.get(key)
    if value is not None:
        writer.open(element)
        writer.attribute(attribute, value)
        writer.close(element)


def _write_header(writer: XmlWriter) -> None:
    writer.stream.write(XML_DECLARATION)
    writer.open("archive")
    writer.open("manifest")
    writer.attribute("version", "1.0")
    writer.close("manifest")


def _write_library_header(writer: XmlWriter, arguments: Arguments) -> None:
    writer.open("library")
    writer.attribute("id", arguments.library_name() or "")
    _value_attribute(writer, "enabled", arguments, ENABLED)
    _value_element_text(writer, "title", arguments, TITLE, False)
    _value_element_text(writer, "description", arguments, DESCRIPTION, True)

    version = arguments.get(LIBRARY_VERSION)
    if version is not None:
        writer.open("version")
        writer.attribute("number", version)
        _value_attribute(writer, "build", arguments, BUILD_NUMBER)
        _value_attribute(writer, "date", arguments, BUILD_DATE)
        writer.close("version")

    _value_element_attribute(writer, "language", "version", arguments, LANGUAGE_VERSION)
    _value_element_text(writer, "copyright", arguments, COPYRIGHT, True)
    _value_element_text(writer, "license", arguments, LICENSE, True)


def _write_encryption(
    writer: XmlWriter, arguments: Arguments, lve_files: Iterable[Optional[str]]
) -> None:
    if not arguments.using_encryption():
        return
    writer.open("encryption")
    for name in lve_files:
        if not name:
            continue
        writer.open("executable")
        writer.attribute("path", f".library/{name}")
        writer.attribute("platform", extract_platform(name))
        writer.attribute("licensing", "true")
        writer.close("executable")
    writer.close("encryption")


def _write_icon(writer: XmlWriter, arguments: Arguments, icon_path: Optional[str]) -> None:
    if ICON_PATH in arguments:
        writer.open("icon")
        writer.attribute("file", icon_path or "")
        writer.close("icon")


def write_manifest(
    stream: TextIO,
    arguments: Arguments,
    icon_path: Optional[str],
    lve_files: Iterable[Optional[str]],
) -> None:
    """Write the manifest for ``arguments`` to ``stream``.

    ``icon_path`` is the icon's path relative to the library folder and
    ``lve_files`` the names of the LVEs copied to ``.library`` (empty
    entries are skipped).
    """
    writer = XmlWriter(stream)
    _write_header(writer)
    _write_library_header(writer, arguments)
    _write_encryption(writer, arguments, lve_files)
    _write_icon(writer, arguments, icon_path)
    for key in (TOOLS_FILE, DEPENDENCIES_FILE):
        path = arguments.get(key)
        if path:
            copy_file_information(writer, path)
    writer.close("library")
    writer.close("archive")


def create_manifest_file(
    directory: str | os.PathLike[str],
    arguments: Arguments,
    icon_path: Optional[str],
    lve_files: Iterable[Optional[str]],
) -> Path:
    """Write ``manifest.xml`` into ``directory`` and return its path."""
    target = Path(directory) / MANIFEST_FILENAME
    with open(target, "w", encoding="utf-8") as stream:
        write_manifest(stream, arguments, icon_path, lve_files)
    return target