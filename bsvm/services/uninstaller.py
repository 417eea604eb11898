"""Remove installed versions."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from bsvm.core.result import Err, Ok, Result
from bsvm.platform.files import remove_tree
from bsvm.services.batch import BatchReport, VersionOutcome, unique_by_tag
from bsvm.services.install_errors import NotInstalled, RemoveFailed, UninstallError

if TYPE_CHECKING:
    from bsvm.core.config import Config
    from bsvm.core.version import Version
    from bsvm.output.console import ConsoleProtocol

__all__ = ["UninstallReport", "Uninstaller"]

type UninstallReport = BatchReport[Path, UninstallError]


class Uninstaller:
    def __init__(self, *, config: Config, console: ConsoleProtocol) -> None:
        self._config = config
        self._console = console

    def uninstall(self, version: Version, *, dry_run: bool = False) -> Result[Path, UninstallError]:
        path = self._config.install_dir / version.tag
        if not path.exists():
            return Err(NotInstalled(tag=version.tag, path=path))
        if dry_run:
            return Ok(path)

        try:
            remove_tree(path)
        except OSError as e:
            return Err(RemoveFailed(tag=version.tag, path=path, detail=str(e)))
        return Ok(path)

    def uninstall_all(
        self,
        versions: Iterable[Version],
        *,
        dry_run: bool = False,
    ) -> UninstallReport:
        outcomes: list[VersionOutcome[Path, UninstallError]] = []
        for version in unique_by_tag(versions):
            self._console.debug(f"uninstalling {version.tag}")
            outcomes.append(VersionOutcome(version, self.uninstall(version, dry_run=dry_run)))
        return BatchReport(tuple(outcomes))
