import subprocess
from unittest import mock

import pytest

from saturnus.titan.commands import (
    git_clone,
    mock_target_folders,
    produce_std_code,
    saturnc,
)


def _done(returncode=0, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess([], returncode, stdout, stderr)


def test_mock_target_folders(tmp_path):
    mock_target_folders(tmp_path)
    mock_target_folders(tmp_path)
    assert (tmp_path / "target" / "deps").is_dir()
    assert (tmp_path / "target" / "objects").is_dir()


@mock.patch("saturnus.titan.commands.subprocess.run")
def test_git_clone_arguments(run, tmp_path):
    run.return_value = _done()
    git_clone("https://git.example.com/repo", tmp_path, "0x1-0x2")
    args, kwargs = run.call_args
    assert args[0] == ["git", "clone", "https://git.example.com/repo", "0x1-0x2"]
    assert kwargs["cwd"] == tmp_path


@mock.patch("saturnus.titan.commands.subprocess.run")
def test_saturnc_arguments(run, capsys):
    run.return_value = _done()
    saturnc("src/main.st", "main", "target/objects/main.lua")
    assert run.call_args[0][0] == [
        "saturnc",
        "compile",
        "--mod-path=main",
        "-i=src/main.st",
        "-o=target/objects/main.lua",
    ]
    assert capsys.readouterr().out == ""


@mock.patch("saturnus.titan.commands.subprocess.run")
def test_saturnc_reports_failure(run, capsys):
    run.return_value = _done(1, stderr=b"boom")
    saturnc("a.st", "a", "a.lua")
    assert "boom" in capsys.readouterr().out


@mock.patch("saturnus.titan.commands.subprocess.run")
def test_produce_std_code(run):
    run.return_value = _done(stdout=b"local x = 1;")
    assert produce_std_code() == "local x = 1;"
    assert run.call_args[0][0] == ["saturnc", "std-output", "--stdout"]


@mock.patch("saturnus.titan.commands.subprocess.run", side_effect=FileNotFoundError)
def test_missing_program(run):
    with pytest.raises(FileNotFoundError):
        produce_std_code()