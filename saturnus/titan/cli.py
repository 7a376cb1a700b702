"""Command line of the project build tool: compiles and links a whole project."""

from __future__ import annotations

import argparse
import os
import re
import shutil
import sys
from pathlib import Path

from saturnus.titan import commands
from saturnus.titan.config import (
    ConfigError,
    Dependency,
    GitDependency,
    LinkMode,
    Project,
    load_project,
)
from saturnus.titan.lockdb import LockDb, LockDbError, PackageRecord
from saturnus.titan.log import info, paint, warn

DEFAULT_PATH = "titan.toml"
TARGET_CACHE = "target/deps"
_OBJECTS_DIR = "target/objects"
_COLLECT_FILE = "target/_collect_.lua"

_REPLACE_ROOT = re.compile(r"[/\\]?src[\\/]")
_REPLACE_SLASH = re.compile(r"[/\\]")
_REPLACE_EXT = re.compile(r".st$")


class TitanError(Exception):
    """A build step failed."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"Error: {self.message}"


def object_name_for(path: str | Path) -> str:
    """Path of the compiled object produced for the source file at ``path``."""
    name = _REPLACE_ROOT.sub("", str(path), count=1)
    name = _REPLACE_SLASH.sub("_", name)
    name = _REPLACE_EXT.sub("", name, count=1)
    return f"{_OBJECTS_DIR}/{name}.lua"


def module_path_for(path: str | Path) -> str:
    """Module path of the source file at ``path``, relative to ``src``."""
    mod_path = _REPLACE_ROOT.sub("", str(path), count=1)
    return _REPLACE_EXT.sub("", mod_path, count=1)


def _raise(err: OSError) -> None:
    raise err


def collect_files(path: str | Path) -> list[Path]:
    """Every regular file below ``path``, walked recursively in sorted order."""
    root = Path(path)
    if root.is_file():
        return [root]
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        files.extend(Path(dirpath) / name for name in sorted(filenames))
    return [file for file in files if file.is_file()]


def download_dep(db: LockDb, record: PackageRecord) -> None:
    """Record ``record`` in ``db`` and clone it into the dependency cache."""
    print(f"Fetching {record.url}...")
    key = db.store(record)
    try:
        commands.git_clone(record.url, Path(TARGET_CACHE), key)
    except OSError as err:
        raise TitanError(str(err)) from err


def prepare_dep(name: str, entry: Dependency) -> None:
    """Make sure the dependency ``name`` is downloaded and locked."""
    if not isinstance(entry, GitDependency):
        raise TitanError("Only git dependency scheme supported")
    record = PackageRecord(entry.git, entry.version)
    try:
        db = LockDb.load()
        if not db.contains(record):
            download_dep(db, record)
            db.save()
    except LockDbError as err:
        raise TitanError(str(err)) from err


def _compile_sources() -> None:
    info("Compiling objects...")
    for source in collect_files("src"):
        path_str = str(source)
        print(f"  {paint('Compiling', 'green')} {path_str}...")
        commands.saturnc(path_str, module_path_for(path_str), object_name_for(path_str))
        print(f"{paint('Compiled', 'green')} {path_str}")


def _link_objects(project: Project) -> None:
    objects = collect_files(_OBJECTS_DIR)
    info("Linking objects...")
    with open(_COLLECT_FILE, "w", encoding="utf-8") as output:
        if not project.linking.no_std:
            std = commands.produce_std_code()
            output.write(f"do{std}\nend\n")
        for obj in objects:
            content = obj.read_text(encoding="utf-8")
            output.write(f"do{content}\nend\n")
            print(f"{paint('Linked', 'green')} {obj}")


def batch_compile(project: Project) -> None:
    """Fetch dependencies, compile every source under ``src`` and link the result."""
    commands.mock_target_folders()
    warn("Dependency resolving is being worked on.")
    for name, dep in project.dependencies.items():
        prepare_dep(name, dep)
    try:
        LockDb.load().save()
    except LockDbError as err:
        raise TitanError(str(err)) from err
    _compile_sources()
    _link_objects(project)
    info(f"Building {project.package.name}")
    match project.linking.mode:
        case LinkMode.COLLECT:
            shutil.copyfile(_COLLECT_FILE, f"target/{project.package.name}.lua")
        case LinkMode.BINARY:
            raise TitanError("Binary compilation not ready yet.")
        case LinkMode.PRESERVE_STRUCTURE:
            raise TitanError("Preserve structure not ready yet.")
    os.remove(_COLLECT_FILE)
    info("Done")


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with the build tool's commands."""
    parser = argparse.ArgumentParser(prog="titan")
    subcommands = parser.add_subparsers(dest="command", required=True)
    project_help = (
        "Overrides the path of the `titan.toml` file, can be used if your cwd "
        "is not the root of the file or in batch compilation."
    )
    for name in ("compile", "run"):
        cmd = subcommands.add_parser(name)
        cmd.add_argument("-p", "--project", type=Path, default=None, help=project_help)
    for name in ("new", "init", "add", "test"):
        subcommands.add_parser(name)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the build tool; returns the process exit status."""
    args = build_parser().parse_args(argv)
    try:
        if args.command in ("compile", "run"):
            conf_path = args.project if args.project is not None else Path(DEFAULT_PATH)
            batch_compile(load_project(conf_path))
        else:
            raise TitanError(f"The `{args.command}` command is not available yet.")
    except (TitanError, ConfigError, LockDbError, OSError) as err:
        print(paint(str(err), "red"), file=sys.stderr)
        return 1
    return 0