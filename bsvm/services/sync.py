"""Keep the local clone current (``bsvm update``)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from bsvm.core.result import Err, Ok, Result
from bsvm.git.repository import Repository

if TYPE_CHECKING:
    from bsvm.core.config import Config
    from bsvm.output.console import ConsoleProtocol

__all__ = ["RepoSyncService", "SyncError"]


@dataclass(frozen=True, slots=True)
class SyncError:
    kind: Literal["clone_failed", "fetch_failed"]
    message: str
    hint: str | None = None


class RepoSyncService:
    """Clone the project on first use, then fetch tags on every update.

    Policy:
    - Tags are always fetched (they drive the catalog and installs).
    - The configured branch is fast-forwarded only when the clone is on a
      branch; a clone left detached by an install just fetches.
    - A failed pull is a warning, not an error.
    """

    def __init__(self, *, config: Config, console: ConsoleProtocol) -> None:
        self._config = config
        self._console = console

    def sync(self) -> Result[Repository, SyncError]:
        repo = Repository(self._config.git_dir)

        if not repo.exists():
            self._console.info(f"Cloning {self._config.repo_url} into {repo.path}")
            cloned = Repository.clone(self._config.repo_url, repo.path)
            if isinstance(cloned, Err):
                return Err(
                    SyncError(
                        kind="clone_failed",
                        message=cloned.error.message,
                        hint="Check repo_url with: bsvm config repo_url",
                    )
                )
            return Ok(cloned.value)

        self._console.debug(f"fetching tags in {repo.path}")
        fetched = repo.fetch(tags=True)
        if isinstance(fetched, Err):
            return Err(SyncError(kind="fetch_failed", message=fetched.error.message))

        branch = repo.current_branch()
        if branch is None:
            self._console.debug("clone is detached, skipping pull")
        elif branch != self._config.branch:
            self._console.debug(f"clone is on {branch}, not {self._config.branch}; skipping pull")
        else:
            pulled = repo.pull(branch)
            if isinstance(pulled, Err):
                self._console.warning(f"pull failed: {pulled.error.message}")

        return Ok(repo)
