import pytest

from saturnus.titan.config import (
    ConfigError,
    GitDependency,
    LinkMode,
    PathDependency,
    ProjectLinking,
    VersionDependency,
    load_project,
    parse_dependency,
    parse_project,
)


def test_minimal_project_uses_defaults():
    project = parse_project('[package]\nname = "demo"\n')
    assert project.package.name == "demo"
    assert project.package.version == "1.0.0"
    assert project.package.description is None
    assert project.dependencies == {}
    assert project.linking == ProjectLinking(False, LinkMode.COLLECT)
    assert project.titan is None


def test_full_project():
    text = """
[package]
name = "demo"
version = "2.0.0"
description = "A demo"

[dependencies]
a = "0.1"
b = { git = "https://git.example.com/b" }
c = { path = "../c" }

[linking]
no_std = true
mode = "PreserveStructure"

[titan]
repositories = ["https://mirror.example.com"]
"""
    project = parse_project(text)
    assert project.package.version == "2.0.0"
    assert project.package.description == "A demo"
    assert project.dependencies == {
        "a": VersionDependency("0.1"),
        "b": GitDependency("https://git.example.com/b", ""),
        "c": PathDependency("../c"),
    }
    assert project.linking.no_std is True
    assert project.linking.mode is LinkMode.PRESERVE_STRUCTURE
    assert project.titan.repositories == ["https://mirror.example.com"]


def test_table_with_version_matches_version_form_first():
    dep = parse_dependency({"git": "https://git.example.com/x", "version": "1"})
    assert dep == VersionDependency("1")


def test_string_dependency():
    assert parse_dependency("3.2") == VersionDependency("3.2")


@pytest.mark.parametrize("value", [{}, {"other": "x"}, 5, {"git": 1}])
def test_unmatched_dependency(value):
    with pytest.raises(ConfigError):
        parse_dependency(value)


def test_missing_package():
    with pytest.raises(ConfigError):
        parse_project("[dependencies]\n")


def test_bad_link_mode():
    with pytest.raises(ConfigError):
        parse_project('[package]\nname = "x"\n[linking]\nno_std = false\nmode = "Nope"\n')


def test_partial_linking_is_rejected():
    with pytest.raises(ConfigError):
        parse_project('[package]\nname = "x"\n[linking]\nno_std = true\n')


def test_invalid_toml():
    with pytest.raises(ConfigError):
        parse_project("[package\n")


def test_load_project(tmp_path):
    path = tmp_path / "titan.toml"
    path.write_text('[package]\nname = "loaded"\n', encoding="utf-8")
    assert load_project(path).package.name == "loaded"