from __future__ import annotations

import typer

from bsvm.cli.commands._helpers import exit_with_code, refresh_cache_if_needed
from bsvm.cli.context import build_context
from bsvm.core.errors import ErrorCode
from bsvm.core.result import Err
from bsvm.output.console import Style
from bsvm.services.sync import RepoSyncService


def update(ctx: typer.Context) -> None:
    """Update the local repository (downloads all versions)."""
    cli = build_context(ctx)

    result = RepoSyncService(config=cli.config, console=cli.console).sync()
    if isinstance(result, Err):
        cli.console.error(result.error.message)
        if result.error.hint:
            cli.console.print(f"hint: {result.error.hint}", Style.DIM)
        exit_with_code(int(ErrorCode.NETWORK_ERROR))

    refresh_cache_if_needed(cli)
    cli.console.success(f"Local repository up to date ({cli.config.git_dir})")
