"""External commands started by the build tool."""

from __future__ import annotations

import subprocess
from pathlib import Path

from saturnus.titan.log import paint


def mock_target_folders(root: str | Path = ".") -> None:
    """Create the dependency and object folders under ``root/target``."""
    base = Path(root) / "target"
    (base / "deps").mkdir(parents=True, exist_ok=True)
    (base / "objects").mkdir(parents=True, exist_ok=True)


def git_clone(target: str, cwd: str | Path, folder_name: str) -> None:
    """Clone ``target`` into ``cwd/folder_name``."""
    subprocess.run(
        ["git", "clone", target, folder_name],
        cwd=cwd,
        capture_output=True,
        check=False,
    )


def _report_failure(result: subprocess.CompletedProcess) -> None:
    if result.returncode != 0:
        print(paint(result.stderr.decode("utf-8", errors="replace"), "red"))


def saturnc(input_path: str, mod_path: str, output: str) -> None:
    """Compile one source file with the compiler command."""
    result = subprocess.run(
        [
            "saturnc",
            "compile",
            f"--mod-path={mod_path}",
            f"-i={input_path}",
            f"-o={output}",
        ],
        capture_output=True,
        check=False,
    )
    _report_failure(result)


def produce_std_code() -> str:
    """The compiled standard library, as printed by the compiler command."""
    result = subprocess.run(
        ["saturnc", "std-output", "--stdout"],
        capture_output=True,
        check=False,
    )
    _report_failure(result)
    return result.stdout.decode("utf-8")