import os

import pytest

from molpack.arguments import (
    ArgumentError,
    Arguments,
    format_help,
    help_requested,
    parse_arguments,
    wrap_aligned,
)
from molpack.pathutils import PackageError


def _library(tmp_path, name="MyLib"):
    lib = tmp_path / name
    lib.mkdir()
    return lib


def test_parse_collects_pairs_in_order():
    args = parse_arguments(["-librarypath", "/a/B", "-version", "1.0", "-language", "3.4"])
    assert args.values == {"librarypath": "/a/B", "version": "1.0", "language": "3.4"}
    assert list(args.values) == ["librarypath", "version", "language"]
    assert args.get("version") == "1.0"
    assert args.get("title") is None


def test_parse_empty_argv_gives_no_values():
    assert parse_arguments([]).values == {}


def test_parse_rejects_duplicate():
    with pytest.raises(ArgumentError, match="Can not add argument version twice"):
        parse_arguments(["-version", "1", "-version", "2"])


def test_parse_rejects_missing_value_at_end():
    with pytest.raises(ArgumentError, match="Argument title is missing a value"):
        parse_arguments(["-version", "1", "-title"])


def test_parse_rejects_empty_value():
    with pytest.raises(ArgumentError, match="missing a value"):
        parse_arguments(["-title", "", "-version", "1"])


@pytest.mark.parametrize("bad", ["-unknown", "-", "", "--help"])
def test_parse_rejects_invalid_argument(bad):
    with pytest.raises(ArgumentError, match="is not valid"):
        parse_arguments([bad, "value"])


def test_argument_error_is_package_error():
    with pytest.raises(PackageError):
        parse_arguments(["-bogus", "x"])


def test_value_may_start_with_dash():
    args = parse_arguments(["-build", "-7"])
    assert args.get("build") == "-7"


@pytest.mark.parametrize(
    "argv, expected",
    [
        (["-h"], True),
        (["-version", "1", "--help"], True),
        (["-version", "1"], False),
        ([], False),
        (["-help"], False),
    ],
)
def test_help_requested(argv, expected):
    assert help_requested(argv) is expected


def test_validate_mandatory_reports_first_missing():
    args = parse_arguments(["-librarypath", "/x", "-language", "3.4"])
    with pytest.raises(ArgumentError, match="Mandatory argument version is missing"):
        args.validate_mandatory()


def test_validate_mandatory_passes_when_complete():
    args = parse_arguments(["-librarypath", "/x", "-version", "1", "-language", "3.4"])
    args.validate_mandatory()
    assert args.get("language") == "3.4"


def test_validate_library_path_trims_trailing_separator(tmp_path):
    lib = _library(tmp_path)
    args = Arguments({"librarypath": str(lib) + "/"})
    args.validate_library_path()
    assert args.get("librarypath") == str(lib)


def test_validate_library_path_missing_argument():
    with pytest.raises(ArgumentError, match="No path for the top-level library"):
        Arguments().validate_library_path()


def test_validate_library_path_not_a_directory(tmp_path):
    target = tmp_path / "file.txt"
    target.write_text("x")
    with pytest.raises(ArgumentError, match="is not a directory"):
        Arguments({"librarypath": str(target)}).validate_library_path()


def test_validate_library_path_does_not_exist(tmp_path):
    with pytest.raises(ArgumentError, match="does not exist"):
        Arguments({"librarypath": str(tmp_path / "nope")}).validate_library_path()


@pytest.mark.parametrize("value, expected", [("true", True), ("TRUE", True), ("false", False), ("yes", False)])
def test_using_encryption(value, expected):
    assert Arguments({"encrypt": value}).using_encryption() is expected


def test_using_encryption_absent():
    assert Arguments().using_encryption() is False


def test_validate_encryption_without_lve(tmp_path):
    args = Arguments({"encrypt": "True"})
    with pytest.raises(ArgumentError, match="No LVE was found"):
        args.validate_encryption(tmp_path)


def test_validate_encryption_with_lve(tmp_path):
    (tmp_path / "LVE").mkdir()
    (tmp_path / "LVE" / "lve_linux64").write_bytes(b"")
    args = Arguments({"encrypt": "true"})
    args.validate_encryption(tmp_path)
    assert args.using_encryption() is True


def test_validate_encryption_ignored_when_off(tmp_path):
    args = Arguments({"encrypt": "false"})
    args.validate_encryption(tmp_path)
    assert args.using_encryption() is False


def test_validate_xml_file(tmp_path):
    xml = tmp_path / "tools.xml"
    xml.write_text("<?xml?>\n")
    args = Arguments({"tools": str(xml), "dependencies": str(tmp_path / "missing.xml")})
    args.validate_xml_file("tools")
    with pytest.raises(ArgumentError, match="missing.xml"):
        args.validate_xml_file("dependencies")


def test_validate_icon(tmp_path):
    with pytest.raises(ArgumentError, match="doesn't exist"):
        Arguments({"icon": str(tmp_path / "icon.png")}).validate_icon()
    icon = tmp_path / "icon.png"
    icon.write_bytes(b"png")
    args = Arguments({"icon": str(icon)})
    args.validate_icon()
    assert args.get("icon") == str(icon)


def test_validate_runs_all_steps(tmp_path):
    lib = _library(tmp_path)
    args = parse_arguments(
        ["-librarypath", str(lib) + "/", "-version", "1.0", "-language", "3.4",
         "-icon", str(tmp_path / "missing.png")]
    )
    with pytest.raises(ArgumentError, match="Icon file"):
        args.validate(tmp_path)
    assert args.get("librarypath") == str(lib)


def test_library_name(tmp_path):
    args = Arguments({"librarypath": os.path.join("home", "Modelica", "MyLib")})
    assert args.library_name() == "MyLib"
    assert Arguments({"librarypath": "MyLib"}).library_name() == "MyLib"
    assert Arguments().library_name() is None


def test_library_name_trailing_slash():
    if os.sep == "/":
        assert Arguments({"librarypath": "/home/Modelica/"}).library_name() == "Modelica"
    else:
        assert Arguments({"librarypath": "C:\\Modelica"}).library_name() == "Modelica"


def test_wrap_aligned_single_line():
    assert wrap_aligned("one two", 80, 0) == "one two\n"


def test_wrap_aligned_breaks_lines():
    assert wrap_aligned("aa bb cc", 6, 1) == "\taa bb \n\tcc\n"


def test_wrap_aligned_empty_text():
    assert wrap_aligned("", 10, 2) == "\t\t\n"


def test_wrap_aligned_preserves_words():
    text = "Tool for packaging a Modelica library into a container for distribution."
    wrapped = wrap_aligned(text, 20, 2)
    assert wrapped.split() == text.split()
    assert all(line.startswith("\t\t") for line in wrapped.splitlines())


def test_format_help_lists_arguments():
    text = format_help()
    assert text.startswith("SYNOPSIS\n\tpackagetool <-arg1> <value1> <-arg2> <value2> ...\n")
    for name in ("librarypath", "version", "language", "encrypt", "icon", "tools", "dependencies"):
        assert f"\t-{name}\n" in text
    assert "\t-h, --help\n" in text
    assert text.index("\tMandatory:\n") < text.index("\tOptional:\n")