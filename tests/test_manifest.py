import io
import xml.etree.ElementTree as ET

import pytest

from molpack.arguments import Arguments
from molpack.manifest import (
    XmlWriter,
    copy_file_information,
    create_manifest_file,
    escape_text,
    extract_platform,
    write_manifest,
)


def _render(arguments, icon_path=None, lve_files=()):
    stream = io.StringIO()
    write_manifest(stream, arguments, icon_path, lve_files)
    return stream.getvalue()


def _base(**extra):
    values = {"librarypath": "some/where/Lib", "version": "1.0", "language": "3.2"}
    values.update(extra)
    return Arguments(values=values)


def test_escape_text_replaces_reserved_characters():
    assert escape_text('a<b>&"c') == "a&lt;b&gt;&amp;&quot;c"


def test_escape_text_leaves_plain_text():
    assert escape_text("plain text") == "plain text"


@pytest.mark.parametrize(
    "name, platform",
    [
        ("lve_win32.exe", "win32"),
        ("lve_win64.exe", "win64"),
        ("lve_linux64", "linux64"),
        ("lve_darwin64", "darwin64"),
        ("noplatform", ""),
    ],
)
def test_extract_platform(name, platform):
    assert extract_platform(name) == platform


def test_empty_element_is_self_closing():
    stream = io.StringIO()
    writer = XmlWriter(stream)
    writer.open("a")
    writer.close("a")
    assert stream.getvalue() == "<a/>\n"


def test_inline_text_round_trips():
    stream = io.StringIO()
    writer = XmlWriter(stream)
    writer.open("title")
    writer.text("x < y & z", False)
    writer.close("title")
    element = ET.fromstring(stream.getvalue())
    assert element.text == "x < y & z"
    assert stream.getvalue().count("\n") == 1


def test_minimal_manifest_exact_output():
    expected = (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        "<archive>\n"
        '\t<manifest version="1.0"/>\n'
        '\t<library id="Lib">\n'
        '\t\t<version number="1.0"/>\n'
        '\t\t<language version="3.2"/>\n'
        "\t</library>\n"
        "</archive>\n"
    )
    assert _render(_base()) == expected


def test_full_library_header_parses():
    arguments = _base(
        enabled="true",
        title='My "Lib" & <co>',
        description="A description",
        build="42",
        date="2020-01-01",
        copyright="Nobody",
        license="Free",
    )
    root = ET.fromstring(_render(arguments))
    assert root.tag == "archive"
    assert root.find("manifest").get("version") == "1.0"
    library = root.find("library")
    assert library.get("id") == "Lib"
    assert library.get("enabled") == "true"
    assert library.find("title").text == 'My "Lib" & <co>'
    assert library.find("description").text.strip() == "A description"
    version = library.find("version")
    assert version.get("number") == "1.0"
    assert version.get("build") == "42"
    assert version.get("date") == "2020-01-01"
    assert library.find("language").get("version") == "3.2"
    assert library.find("copyright").text.strip() == "Nobody"
    assert library.find("license").text.strip() == "Free"


def test_encryption_lists_copied_lves_only():
    arguments = _base(encrypt="TRUE")
    output = _render(arguments, lve_files=["lve_win64.exe", None, "", "lve_linux64"])
    executables = ET.fromstring(output).find("library/encryption").findall("executable")
    assert [e.get("path") for e in executables] == [
        ".library/lve_win64.exe",
        ".library/lve_linux64",
    ]
    assert [e.get("platform") for e in executables] == ["win64", "linux64"]
    assert all(e.get("licensing") == "true" for e in executables)


def test_no_encryption_element_without_encrypt():
    output = _render(_base(encrypt="false"), lve_files=["lve_win64.exe"])
    assert ET.fromstring(output).find("library/encryption") is None


def test_icon_element_uses_given_path():
    output = _render(_base(icon="/elsewhere/icon.png"), icon_path="Resources/icon.png")
    assert ET.fromstring(output).find("library/icon").get("file") == "Resources/icon.png"


def test_no_icon_without_argument():
    output = _render(_base(), icon_path="Resources/icon.png")
    assert ET.fromstring(output).find("library/icon") is None


def test_copy_file_information_skips_first_and_unterminated_lines(tmp_path):
    source = tmp_path / "data.xml"
    source.write_text("head\nline1\nline2\ntail", encoding="utf-8")
    stream = io.StringIO()
    copy_file_information(XmlWriter(stream), source)
    assert stream.getvalue() == "line1\nline2\n"


def test_copy_file_information_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        copy_file_information(XmlWriter(io.StringIO()), tmp_path / "missing.xml")


def test_tools_and_dependencies_are_pasted(tmp_path):
    tools = tmp_path / "tools.xml"
    tools.write_text(
        '<?xml version="1.0"?>\n<compatibility>\n<tool name="A"/>\n</compatibility>\n',
        encoding="utf-8",
    )
    deps = tmp_path / "deps.xml"
    deps.write_text(
        '<?xml version="1.0"?>\n<dependencies>\n<library id="B"/>\n</dependencies>\n',
        encoding="utf-8",
    )
    output = _render(_base(tools=str(tools), dependencies=str(deps)))
    library = ET.fromstring(output).find("library")
    assert library.find("compatibility/tool").get("name") == "A"
    assert library.find("dependencies/library").get("id") == "B"
    assert output.count("<?xml") == 1


def test_create_manifest_file_matches_stream_output(tmp_path):
    arguments = _base(title="T", encrypt="true")
    lves = ["lve_win32.exe"]
    target = create_manifest_file(tmp_path, arguments, None, lves)
    assert target == tmp_path / "manifest.xml"
    assert target.read_text(encoding="utf-8") == _render(arguments, None, lves)