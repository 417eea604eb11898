"""Test helpers: a fake process runner and throwaway git clones."""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

import pytest

from bsvm.core.result import Err, Ok, Result
from bsvm.platform.process import ProcessError

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not available")


def git(cwd: Path, *args: str, date: str | None = None) -> str:
    env = dict(os.environ)
    if date is not None:
        env["GIT_COMMITTER_DATE"] = date
        env["GIT_AUTHOR_DATE"] = date
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
        env=env,
    )
    if result.returncode != 0:
        raise RuntimeError(
            f"git {' '.join(args)} failed (code {result.returncode}): {result.stderr.strip()}"
        )
    return result.stdout.strip()


def init_repo(path: Path) -> Path:
    path.mkdir(parents=True)
    git(path, "init", "-b", "main")
    git(path, "config", "user.email", "test@example.com")
    git(path, "config", "user.name", "Test")
    git(path, "config", "commit.gpgsign", "false")
    git(path, "config", "tag.gpgsign", "false")
    return path


def commit_files(
    repo: Path,
    files: dict[str, str],
    message: str,
    *,
    date: str | None = None,
) -> None:
    for rel, content in files.items():
        target = repo / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    git(repo, "add", "-A")
    git(repo, "commit", "-m", message, date=date)


def remove_files(repo: Path, names: list[str], message: str) -> None:
    git(repo, "rm", "-q", *names)
    git(repo, "commit", "-m", message)


class FakeRunner:
    """ProcessRunner double keyed by the package manager subcommand.

    ``responses`` maps "--version", "install" or "run" to a Result; missing
    keys succeed with empty output. ``on_deploy`` is called with the
    ``--out`` directory when a "run" call succeeds.
    """

    def __init__(
        self,
        responses: dict[str, Result[str, ProcessError]] | None = None,
        on_deploy: Callable[[Path], None] | None = None,
    ) -> None:
        self.responses = responses or {}
        self.on_deploy = on_deploy
        self.calls: list[list[str]] = []
        self.timeouts: list[float | None] = []

    def run(
        self,
        cmd: list[str],
        cwd: Path,
        *,
        timeout: float | None = None,
    ) -> Result[str, ProcessError]:
        self.calls.append(cmd)
        self.timeouts.append(timeout)
        key = cmd[1] if len(cmd) > 1 else cmd[0]
        response = self.responses.get(key, Ok(""))
        if isinstance(response, Ok) and key == "run" and self.on_deploy is not None:
            out = Path(cmd[cmd.index("--out") + 1])
            self.on_deploy(out)
        return response


def process_error(cmd: list[str], returncode: int = 1, stderr: str = "boom") -> Err[ProcessError]:
    return Err(ProcessError(command=tuple(cmd), returncode=returncode, stdout="", stderr=stderr))
