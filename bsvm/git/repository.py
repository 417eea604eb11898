"""Git repository abstraction.

This module provides the Repository class for the operations bsvm needs on
its local clone: cloning and fetching, listing tags, reading tag objects and
checking a tag out. All operations return Result types.

Usage:
    repo = Repository(Path("~/.bsvm/repo").expanduser())

    match repo.read_tag("v1.2.0"):
        case Ok(tag) if tag.is_annotated:
            print(tag.message, tag.tagger_time)
        case Ok(_):
            print("lightweight tag")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path
from typing import Literal

from bsvm.core.result import Err, Ok, Result
from bsvm.platform.process import ProcessError
from bsvm.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

_PGP_MARKER = "-----BEGIN PGP SIGNATURE-----"
_SSH_MARKER = "-----BEGIN SSH SIGNATURE-----"

__all__ = [
    "GitError",
    "Repository",
    "TagObject",
    "parse_tag_object",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class TagObject:
    """What a tag points at.

    Annotated tags carry their own message and tagger timestamp;
    lightweight tags are only a name for a commit.

    Attributes:
        tag: Tag name
        kind: "annotated" or "lightweight"
        message: Annotation message (annotated tags only)
        tagger_time: Tagger timestamp (annotated tags only)
    """

    tag: str
    kind: Literal["annotated", "lightweight"]
    message: str | None = None
    tagger_time: datetime | None = None

    @property
    def is_annotated(self) -> bool:
        return self.kind == "annotated"


def _parse_tagger_time(line: str) -> datetime | None:
    """Parse ``tagger Name <email> 1700000000 +0100``."""
    parts = line.rsplit(" ", 2)
    if len(parts) != 3:
        return None
    _, seconds, offset = parts
    try:
        ts = int(seconds)
        sign = -1 if offset.startswith("-") else 1
        hours = int(offset[1:3])
        minutes = int(offset[3:5])
    except (ValueError, IndexError):
        return None
    tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return datetime.fromtimestamp(ts, tz=UTC).astimezone(tz)


def parse_tag_object(tag: str, raw: str) -> TagObject:
    """Parse ``git cat-file -p`` output of an annotated tag object."""
    header, _, body = raw.partition("\n\n")

    tagger_time: datetime | None = None
    for line in header.splitlines():
        if line.startswith("tagger "):
            tagger_time = _parse_tagger_time(line)
            break

    for marker in (_PGP_MARKER, _SSH_MARKER):
        if marker in body:
            body = body.split(marker, 1)[0]

    message = body.strip() or None
    return TagObject(tag=tag, kind="annotated", message=message, tagger_time=tagger_time)


class Repository:
    """Git repository abstraction for the shared local clone.

    The clone has exactly one working tree, so ``checkout`` mutates state
    that every install reads. Callers must not check out concurrently.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check if this is a valid git repository."""
        return (self.path / ".git").exists()

    @staticmethod
    def clone(url: str, path: Path) -> Result[Repository, GitError]:
        """Clone ``url`` into ``path`` (parent directories are created)."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(GitError(command="clone", message=str(e)))

        result = run_process(
            ["git", "clone", url, str(path)],
            cwd=path.parent,
            timeout=_GIT_NETWORK_TIMEOUT_SECONDS,
        )
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command="clone",
                        message=e.stderr.strip() or "clone failed",
                        returncode=e.returncode,
                    )
                )
            case Ok(_):
                return Ok(Repository(path))

    def fetch(self, *, tags: bool = True) -> Result[str, GitError]:
        """Fetch from origin, including tags by default.

        Tags are force-updated so a moved upstream tag replaces the local one.
        """
        args = ["fetch", "origin"]
        if tags:
            args += ["--tags", "--force"]
        return self._checked(args, "fetch failed")

    def pull(self, ref: str) -> Result[str, GitError]:
        """Fast-forward the current branch to ``origin/<ref>``."""
        return self._checked(["pull", "--ff-only", "origin", ref], "pull failed")

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def checkout(self, tag: str) -> Result[None, GitError]:
        """Force-checkout ``tag`` as a detached HEAD."""
        result = self._checked(
            ["checkout", "--force", "--quiet", "--detach", f"refs/tags/{tag}"],
            f"cannot check out {tag}",
        )
        return result.map(lambda _: None)

    def clean(self, *, keep: tuple[str, ...] = ()) -> Result[None, GitError]:
        """Delete untracked and ignored files, except paths matching ``keep``."""
        args = ["clean", "--force", "-d", "-x", "--quiet"]
        for pattern in keep:
            args += ["-e", pattern]
        return self._checked(args, "clean failed").map(lambda _: None)

    def list_tags(self) -> Result[list[str], GitError]:
        """List tag names in git's listing order."""
        result = self._checked(["tag", "--list"], "tag listing failed")
        return result.map(lambda out: [ln.strip() for ln in out.splitlines() if ln.strip()])

    def resolve_ref(self, tag: str) -> Result[str, GitError]:
        """Object id the tag ref points at (a tag object or a commit)."""
        result = self._checked(
            ["rev-parse", "--verify", "--quiet", f"refs/tags/{tag}"],
            f"unknown tag {tag}",
        )
        return result.map(str.strip)

    def read_object(self, object_id: str, *, tag: str) -> Result[TagObject, GitError]:
        """Read the object a tag ref resolved to."""
        kind_result = self._checked(["cat-file", "-t", object_id], "cannot read object")
        if isinstance(kind_result, Err):
            return kind_result

        if kind_result.value.strip() != "tag":
            return Ok(TagObject(tag=tag, kind="lightweight"))

        body_result = self._checked(["cat-file", "-p", object_id], "cannot read tag object")
        return body_result.map(lambda raw: parse_tag_object(tag, raw))

    def read_tag(self, tag: str) -> Result[TagObject, GitError]:
        """Resolve ``tag`` and read its object."""
        ref = self.resolve_ref(tag)
        if isinstance(ref, Err):
            return ref
        return self.read_object(ref.value, tag=tag)

    def _checked(self, args: list[str], fallback: str) -> Result[str, GitError]:
        result = self._run(args)
        match result:
            case Err(e):
                return Err(
                    GitError(
                        command=" ".join(args[:2]),
                        message=e.stderr.strip() or e.stdout.strip() or fallback,
                        returncode=e.returncode,
                    )
                )
            case Ok(stdout):
                return Ok(stdout)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "clone"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
