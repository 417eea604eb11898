from __future__ import annotations

import typer

from bsvm.cli.commands._helpers import catalog
from bsvm.cli.context import build_context


def list_versions(
    ctx: typer.Context,
    all_: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="List every known version and whether it is installed or downloaded.",
    ),
) -> None:
    """List installed versions (newest first)."""
    cli = build_context(ctx)
    install_dir = cli.config.install_dir

    for version in reversed(catalog(cli)):
        installed = (install_dir / version.tag).exists()
        line = f"{version.display_name} <{version.tag}>"
        if all_:
            if installed:
                line += " (installed)"
            elif version.is_local:
                line += " (downloaded)"
            cli.console.print(line)
        elif installed:
            cli.console.print(line)
