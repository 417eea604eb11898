"""Install versions from the local clone into per-tag directories.

Each version goes through the same pipeline:

    checkout tag
      -> no package.json: copy the working tree
      -> package.json: locate the package manager on PATH, install dependencies,
         read scripts, then run the deploy script into the install path
         (falls back to copying when the script is not declared)

Versions are processed one at a time because the clone has a single
working tree. A failed version is recorded and the batch moves on.
"""

from __future__ import annotations

import json
import shutil
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from bsvm.core.result import Err, Ok, Result
from bsvm.core.structured import StrDict, as_str_dict, get_table
from bsvm.platform.files import copy_tree
from bsvm.services.batch import BatchReport, VersionOutcome, unique_by_tag
from bsvm.services.install_errors import (
    CheckoutFailed,
    CommandMissing,
    CopyDisabled,
    CopyFailed,
    DependencyInstallFailed,
    DeployFailed,
    DescriptorInvalid,
    InstallError,
    InstallRootUnavailable,
    PackageManagerMissing,
    SetupError,
)

if TYPE_CHECKING:
    from bsvm.core.config import Config
    from bsvm.core.version import Version
    from bsvm.git.repository import Repository
    from bsvm.output.console import ConsoleProtocol
    from bsvm.platform.process import ProcessRunner

__all__ = [
    "CLEAN_KEEP",
    "COPY_EXCLUDES",
    "DEFAULT_COMMAND",
    "PACKAGE_DESCRIPTOR",
    "InstallOptions",
    "InstallOutcome",
    "InstallReport",
    "Installer",
]

PACKAGE_DESCRIPTOR = "package.json"
DEFAULT_COMMAND = "deploy"
COPY_EXCLUDES: tuple[str, ...] = (".git", "node_modules", "package.json", "package-lock.json")
# Left in place by the post-checkout clean.
CLEAN_KEEP: tuple[str, ...] = ("node_modules",)

Strategy = Literal["copy", "deploy", "fallback-copy", "dry-run"]


@dataclass(frozen=True, slots=True)
class InstallOptions:
    """Options for one install batch.

    Attributes:
        command: Package script that builds into the install path.
        no_copy: Never fall back to copying the working tree.
        verbose: Pass ``--verbose`` to the deploy script.
        dry_run: Report targets without touching the clone or disk.
        timeout: Per-subprocess limit in seconds (None for no limit).
    """

    command: str = DEFAULT_COMMAND
    no_copy: bool = False
    verbose: bool = False
    dry_run: bool = False
    timeout: float | None = None


@dataclass(frozen=True, slots=True)
class InstallOutcome:
    tag: str
    strategy: Strategy
    path: Path


type InstallReport = BatchReport[InstallOutcome, InstallError]


def _read_scripts(path: Path) -> Result[StrDict, str]:
    """Read the ``scripts`` table of a package descriptor."""
    try:
        data_obj: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(f"cannot read {path.name}: {e}")
    except json.JSONDecodeError as e:
        return Err(f"invalid JSON in {path.name}: {e}")

    data = as_str_dict(data_obj)
    if data is None:
        return Err(f"{path.name} root must be an object")

    if "scripts" not in data:
        return Ok({})
    scripts = get_table(data, "scripts")
    if scripts is None:
        return Err(f"{path.name} 'scripts' must be an object")
    return Ok(scripts)


class Installer:
    """Runs the install pipeline against the shared local clone."""

    def __init__(
        self,
        *,
        config: Config,
        repo: Repository,
        runner: ProcessRunner,
        console: ConsoleProtocol,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self._config = config
        self._repo = repo
        self._runner = runner
        self._console = console
        self._which = which

    def install_path(self, tag: str) -> Path:
        return self._config.install_dir / tag

    def install_all(
        self,
        versions: Iterable[Version],
        options: InstallOptions,
    ) -> Result[InstallReport, SetupError]:
        """Install each version in turn, collecting per-version outcomes.

        Only an unusable install root fails the whole batch.
        """
        if not options.dry_run:
            try:
                self._config.install_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                return Err(InstallRootUnavailable(path=self._config.install_dir, detail=str(e)))

        outcomes: list[VersionOutcome[InstallOutcome, InstallError]] = []
        for version in unique_by_tag(versions):
            self._console.debug(f"installing {version.tag}")
            outcomes.append(VersionOutcome(version, self.install(version, options)))
        return Ok(BatchReport(tuple(outcomes)))

    def install(
        self,
        version: Version,
        options: InstallOptions,
    ) -> Result[InstallOutcome, InstallError]:
        tag = version.tag
        dest = self.install_path(tag)

        if options.dry_run:
            return Ok(InstallOutcome(tag=tag, strategy="dry-run", path=dest))

        checkout = self._repo.checkout(tag)
        if isinstance(checkout, Err):
            return Err(CheckoutFailed(tag=tag, detail=checkout.error.message))

        # Only this tag's tree (plus CLEAN_KEEP) may reach the install path.
        cleaned = self._repo.clean(keep=CLEAN_KEEP)
        if isinstance(cleaned, Err):
            return Err(CheckoutFailed(tag=tag, detail=cleaned.error.message))

        descriptor = self._repo.path / PACKAGE_DESCRIPTOR
        if not descriptor.is_file():
            self._console.debug(f"{tag}: no {PACKAGE_DESCRIPTOR}, copying files")
            return self._copy(tag, dest, options, strategy="copy")

        return self._build(tag, descriptor, dest, options)

    def _copy(
        self,
        tag: str,
        dest: Path,
        options: InstallOptions,
        *,
        strategy: Strategy,
    ) -> Result[InstallOutcome, InstallError]:
        if options.no_copy:
            return Err(CopyDisabled(tag=tag))

        try:
            copy_tree(self._repo.path, dest, exclude=COPY_EXCLUDES)
        except OSError as e:
            return Err(CopyFailed(tag=tag, detail=str(e)))
        return Ok(InstallOutcome(tag=tag, strategy=strategy, path=dest))

    def _build(
        self,
        tag: str,
        descriptor: Path,
        dest: Path,
        options: InstallOptions,
    ) -> Result[InstallOutcome, InstallError]:
        name = self._config.package_manager
        pm = self._which(name)
        if pm is None:
            return Err(
                PackageManagerMissing(tag=tag, package_manager=name, detail="not found on PATH")
            )
        cwd = self._repo.path

        # Version output is informational; a failing --version is not fatal.
        match self._runner.run([pm, "--version"], cwd, timeout=options.timeout):
            case Ok(out):
                self._console.debug(f"{tag}: using {pm} {out.strip()}")
            case Err(e):
                self._console.debug(f"{tag}: {pm} --version failed: {e}")

        deps = self._runner.run([pm, "install"], cwd, timeout=options.timeout)
        if isinstance(deps, Err):
            return Err(
                DependencyInstallFailed(
                    tag=tag,
                    returncode=deps.error.returncode,
                    detail=deps.error.detail,
                )
            )

        scripts = _read_scripts(descriptor)
        if isinstance(scripts, Err):
            return Err(DescriptorInvalid(tag=tag, path=descriptor, detail=scripts.error))

        if options.command not in scripts.value:
            if options.no_copy:
                return Err(CommandMissing(tag=tag, command=options.command))
            self._console.debug(f"{tag}: no '{options.command}' script, copying files")
            return self._copy(tag, dest, options, strategy="fallback-copy")

        cmd = [pm, "run", options.command, "--", "--out", str(dest)]
        if options.verbose:
            cmd.append("--verbose")

        deployed = self._runner.run(cmd, cwd, timeout=options.timeout)
        if isinstance(deployed, Err):
            return Err(
                DeployFailed(
                    tag=tag,
                    command=options.command,
                    returncode=deployed.error.returncode,
                    detail=deployed.error.detail,
                    timed_out=deployed.error.timed_out,
                )
            )
        return Ok(InstallOutcome(tag=tag, strategy="deploy", path=dest))
