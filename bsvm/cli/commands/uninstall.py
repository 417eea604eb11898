from __future__ import annotations

import typer

from bsvm.cli.commands._helpers import catalog, exit_with_code, select_versions
from bsvm.cli.context import build_context
from bsvm.core.errors import ErrorCode
from bsvm.core.result import Err, Ok
from bsvm.output.console import Style
from bsvm.output.errors import install_error_exit_code, print_uninstall_error
from bsvm.services.uninstaller import Uninstaller


def uninstall(
    ctx: typer.Context,
    versions: list[str] | None = typer.Argument(None, help="Tags or names (substring match)."),
    all_: bool = typer.Option(False, "--all", "-a", help="Uninstall every installed version."),
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Print actions without modifying."),
) -> None:
    """Uninstall the specified version(s)."""
    cli = build_context(ctx)
    known = catalog(cli)

    if all_:
        # Only what is on disk; everything else would just report "not installed".
        known = [v for v in known if (cli.config.install_dir / v.tag).exists()]

    resolution = select_versions(cli, versions or [], all_=all_, versions=known)
    selected = list(resolution.versions)
    report = Uninstaller(config=cli.config, console=cli.console).uninstall_all(
        selected, dry_run=dry_run
    )

    # Any query that matched nothing fails the command, even if others installed.
    ok = (selected or all_) and not resolution.unmatched
    code = int(ErrorCode.OK) if ok else int(ErrorCode.USER_ERROR)
    for outcome in report.outcomes:
        match outcome.result:
            case Ok(path) if dry_run:
                cli.console.print(f"would remove {path}", Style.DIM)
            case Ok(_):
                version = outcome.version
                cli.console.success(f"Uninstalled {version.display_name} <{version.tag}>")
            case Err(error):
                print_uninstall_error(error, cli.console)
                if code == int(ErrorCode.OK):
                    code = install_error_exit_code(error)

    if code != int(ErrorCode.OK):
        exit_with_code(code)
