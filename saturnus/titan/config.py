"""Project manifest (``titan.toml``) model and loader."""

from __future__ import annotations

import enum
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class ConfigError(Exception):
    """The project manifest is malformed."""


class LinkMode(enum.Enum):
    """How compiled objects are linked together."""

    COLLECT = "Collect"
    """Joins the output into a single file, ready to run."""
    BINARY = "Binary"
    """Joins the output into a single file and produces a self-contained binary."""
    PRESERVE_STRUCTURE = "PreserveStructure"
    """Keeps the original structure of the project."""


@dataclass
class ProjectLinking:
    """Linking stage behaviour."""

    no_std: bool = False
    mode: LinkMode = LinkMode.COLLECT


@dataclass
class TitanOverride:
    """Repository mirror URLs, tried in order when fetching packages."""

    repositories: list[str] = field(default_factory=list)


@dataclass
class Package:
    name: str
    version: str = "1.0.0"
    description: str | None = None


@dataclass
class VersionDependency:
    version: str


@dataclass
class GitDependency:
    git: str
    version: str = ""


@dataclass
class PathDependency:
    path: str


Dependency = VersionDependency | GitDependency | PathDependency


@dataclass
class Project:
    package: Package
    dependencies: dict[str, Dependency] = field(default_factory=dict)
    linking: ProjectLinking = field(default_factory=ProjectLinking)
    titan: TitanOverride | None = None


def _require(table: dict[str, Any], key: str, kind: type, where: str) -> Any:
    if key not in table:
        raise ConfigError(f"missing field `{key}` in {where}")
    value = table[key]
    if not isinstance(value, kind):
        raise ConfigError(f"invalid type for `{key}` in {where}")
    return value


def _optional(table: dict[str, Any], key: str, kind: type, where: str, default: Any) -> Any:
    if key not in table:
        return default
    return _require(table, key, kind, where)


def parse_dependency(value: Any) -> Dependency:
    """A dependency given either as a version string or as a table.

    Tables are matched against the version, git and path forms in that order,
    and the first form whose required keys are present wins.
    """
    if isinstance(value, str):
        return VersionDependency(value)
    if isinstance(value, dict):
        if isinstance(value.get("version"), str):
            return VersionDependency(value["version"])
        if isinstance(value.get("git"), str) and (
            "version" not in value or isinstance(value["version"], str)
        ):
            return GitDependency(value["git"], value.get("version", ""))
        if isinstance(value.get("path"), str):
            return PathDependency(value["path"])
    raise ConfigError(
        "data did not match any variant of untagged enum DependencyContainer"
    )


def _parse_linking(value: Any) -> ProjectLinking:
    if not isinstance(value, dict):
        raise ConfigError("invalid type for `linking`")
    no_std = _require(value, "no_std", bool, "linking")
    mode_name = _require(value, "mode", str, "linking")
    try:
        mode = LinkMode(mode_name)
    except ValueError:
        raise ConfigError(f"unknown link mode `{mode_name}`") from None
    return ProjectLinking(no_std, mode)


def _parse_titan(value: Any) -> TitanOverride:
    if not isinstance(value, dict):
        raise ConfigError("invalid type for `titan`")
    repositories = _require(value, "repositories", list, "titan")
    if not all(isinstance(item, str) for item in repositories):
        raise ConfigError("repositories must be strings")
    return TitanOverride(list(repositories))


def parse_project(text: str) -> Project:
    """Parse the text of a project manifest."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as err:
        raise ConfigError(str(err)) from err
    package_table = _require(data, "package", dict, "project")
    package = Package(
        name=_require(package_table, "name", str, "package"),
        version=_optional(package_table, "version", str, "package", "1.0.0"),
        description=_optional(package_table, "description", str, "package", None),
    )
    deps_table = _optional(data, "dependencies", dict, "project", {})
    dependencies = {name: parse_dependency(dep) for name, dep in deps_table.items()}
    linking = _parse_linking(data["linking"]) if "linking" in data else ProjectLinking()
    titan = _parse_titan(data["titan"]) if "titan" in data else None
    return Project(package, dependencies, linking, titan)


def load_project(path: str | Path) -> Project:
    """Read and parse the manifest at ``path``."""
    return parse_project(Path(path).read_text(encoding="utf-8"))