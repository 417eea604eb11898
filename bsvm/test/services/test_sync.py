from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from bsvm.core.config import Config
from bsvm.core.result import Err, Ok
from bsvm.output.console import MockConsole
from bsvm.services.sync import RepoSyncService
from bsvm.test.helpers import commit_files, git, init_repo, requires_git

pytestmark = requires_git


def _init_remote(tmp_path: Path) -> tuple[str, Path]:
    """Create a bare repo and push an initial tagged commit; return (url, seed)."""
    remote = tmp_path / "blankstorm.git"
    git(tmp_path, "init", "--bare", "-b", "main", str(remote))

    seed = init_repo(tmp_path / "seed")
    commit_files(seed, {"index.html": "v1"}, "init")
    git(seed, "tag", "-a", "v1.0.0", "-m", "First")

    url = remote.as_uri()
    git(seed, "remote", "add", "origin", url)
    git(seed, "push", "-u", "origin", "main", "--tags")
    return url, seed


def test_sync_clones_then_fetches(tmp_path: Path, make_config: Callable[..., Config]) -> None:
    url, seed = _init_remote(tmp_path)
    config = make_config(repo_url=url)
    console = MockConsole()
    service = RepoSyncService(config=config, console=console)

    first = service.sync()

    assert isinstance(first, Ok)
    assert first.value.path == config.git_dir
    assert console.find("Cloning")
    assert first.value.list_tags() == Ok(["v1.0.0"])

    commit_files(seed, {"index.html": "v2"}, "second")
    git(seed, "tag", "v2.0.0")
    git(seed, "push", "origin", "main", "--tags")

    second = service.sync()

    assert isinstance(second, Ok)
    assert second.value.list_tags() == Ok(["v1.0.0", "v2.0.0"])
    assert (config.git_dir / "index.html").read_text(encoding="utf-8") == "v2"


def test_sync_skips_pull_when_detached(
    tmp_path: Path, make_config: Callable[..., Config]
) -> None:
    url, seed = _init_remote(tmp_path)
    config = make_config(repo_url=url)
    console = MockConsole(verbose=True)
    service = RepoSyncService(config=config, console=console)
    repo = service.sync().unwrap()
    assert isinstance(repo.checkout("v1.0.0"), Ok)

    commit_files(seed, {"index.html": "v2"}, "second")
    git(seed, "tag", "v2.0.0")
    git(seed, "push", "origin", "main", "--tags")

    result = service.sync()

    assert isinstance(result, Ok)
    assert console.find("detached")
    assert "v2.0.0" in result.value.list_tags().unwrap()
    assert (config.git_dir / "index.html").read_text(encoding="utf-8") == "v1"


def test_clone_failure_carries_hint(tmp_path: Path, make_config: Callable[..., Config]) -> None:
    missing = (tmp_path / "nowhere.git").as_uri()
    config = make_config(repo_url=missing)

    result = RepoSyncService(config=config, console=MockConsole()).sync()

    assert isinstance(result, Err)
    assert result.error.kind == "clone_failed"
    assert result.error.hint is not None
    assert "repo_url" in result.error.hint


def test_fetch_failure(tmp_path: Path, make_config: Callable[..., Config]) -> None:
    url, _ = _init_remote(tmp_path)
    config = make_config(repo_url=url)
    service = RepoSyncService(config=config, console=MockConsole())
    repo = service.sync().unwrap()
    git(repo.path, "remote", "set-url", "origin", (tmp_path / "gone.git").as_uri())

    result = service.sync()

    assert isinstance(result, Err)
    assert result.error.kind == "fetch_failed"
