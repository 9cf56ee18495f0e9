# molpack

A command-line tool that packages a Modelica library directory into a
container for distribution. The container is a zip archive with a `.mol`
extension. It holds the library's top-level directory and everything below
it, plus a generated `<library>/.library/manifest.xml` describing the library.

## Installation

```
pip install .
```

This installs the `molpack` command. The same entry point can be run as
`python -m molpack.cli`.

## Usage

```
molpack -librarypath <dir> -version <version> -language <version> [options]
```

Every argument is a single dash followed by a name and then a non-empty value.
An argument may be given only once; an unknown name, a repeated name or a
missing value stops the tool with exit status 1.

Mandatory arguments:

- `-librarypath` — path to the top-level library directory. Trailing
  separators are removed; the last path component becomes the library id in
  the manifest and the name of the archive.
- `-version` — version number of the library.
- `-language` — version of the Modelica language the library uses.

Optional arguments:

- `-build` — build number of the library.
- `-date` — release date of the library.
- `-title` — official title of the library.
- `-description` — description of the library.
- `-enabled` — whether the library should be loaded by default.
- `-copyright` — textual copyright information.
- `-license` — textual license information.
- `-encrypt` — when the value is `true` (in any case), at least one LVE
  executable (`lve_win32.exe`, `lve_win64.exe`, `lve_linux32`,
  `lve_linux64`, `lve_darwin64`) must exist in an `LVE` directory next to the
  running program. The ones found are copied into `.library`, listed in the
  manifest's `<encryption>` element, and `.mo` files are left out of the
  archive.
- `-icon` — an icon file. The given path must exist, and a file with the same
  name must be present somewhere in the library directory; the manifest
  records its path relative to the library folder.
- `-tools` — XML file listing compatible Modelica tools. Every complete line
  except the first is pasted into the manifest.
- `-dependencies` — XML file listing libraries this library depends on,
  pasted into the manifest the same way.

`-h` or `--help` anywhere on the command line prints the help text and exits
with status 0. Running with no arguments prints a short usage hint and exits
with status 1.

### Example

```
molpack -librarypath ./MyLib -version 1.0.0 -language 3.4 -title "My Library"
```

This writes `MyLib.mol` to the current directory, replacing any existing file
of that name.

## How packaging works

1. The library directory is copied into a fresh temporary staging folder
   (directories and regular files only; any `.library` entries in the source
   are skipped).
2. A `.library` folder is created in the staged copy.
3. The icon, if given, is located in the staged copy.
4. LVE executables are copied into `.library` when encrypting.
5. If a `.library` folder exists next to the running program, its contents
   are copied into the staged `.library`.
6. `manifest.xml` is written into `.library`.
7. The staging folder is zipped into `<library>.mol` in the current directory.
8. The staging folder is removed; a failure to remove it is reported but
   does not fail the run.

## Exit status

| Status | Meaning |
| ------ | ------- |
| 0 | success, or help was printed |
| 1 | no arguments, or the arguments failed validation |
| 2 | copying the library into the staging folder failed |
| 3 | creating the `.library` folder failed |
| 4 | the icon could not be located in the library |
| 5 | copying LVE executables failed |
| 6 | copying extra files from the program's `.library` folder failed |
| 7 | writing the manifest failed |
| 9 | creating the archive failed |

## Library use

The steps are also available from Python:

- `molpack.arguments.parse_arguments` turns an argument list (program name
  excluded) into an `Arguments` object; `Arguments.validate` checks it and
  raises `ArgumentError` on failure.
- `molpack.manifest.write_manifest` writes the manifest XML to a text stream;
  `create_manifest_file` writes it into a directory.
- `molpack.archive.create_zip_archive` zips a staging folder.
- `molpack.packager.Packager` runs the whole job; `Packager.run` returns the
  path of the archive.
- `molpack.cli.do_work` runs the command logic and returns its exit status.

Failures are raised as `molpack.pathutils.PackageError` (of which
`ArgumentError` is a subclass).

## Limitations

`molpack` does not encrypt Modelica sources. With `-encrypt true` it copies
the LVE executables and describes them in the manifest, but it produces no
encrypted `.moc` files: the `.mo` files are simply left out of the archive.
Any encrypted files must already be present in the library directory for the
archive to contain them.