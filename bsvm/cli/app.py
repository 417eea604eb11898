from __future__ import annotations

import typer

from bsvm import __version__
from bsvm.cli.commands.config_cmd import config
from bsvm.cli.commands.install import install
from bsvm.cli.commands.list_cmd import list_versions
from bsvm.cli.commands.uninstall import uninstall
from bsvm.cli.commands.update import update
from bsvm.cli.context import GlobalOptions


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Manage installed Blankstorm versions.",
)


# Commands
app.command("list")(list_versions)
app.command()(install)
app.command()(uninstall)
app.command()(update)
app.command()(config)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"BSVM v{__version__}")
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Output verbose/debug info."),
    cache_no_update: bool = typer.Option(
        False,
        "--cache-no-update",
        help="Do not refresh the release cache.",
    ),
    reload_cache: bool = typer.Option(
        False,
        "--reload-cache",
        help="Refresh the release cache even if it is recent.",
    ),
) -> None:
    ctx.obj = GlobalOptions(
        verbose=verbose,
        cache_no_update=cache_no_update,
        reload_cache=reload_cache,
    )


def main() -> None:
    app()
