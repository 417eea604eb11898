from __future__ import annotations

import typer

from bsvm.cli.commands._helpers import catalog, exit_with_code, select_versions
from bsvm.cli.context import build_context
from bsvm.core.errors import ErrorCode
from bsvm.core.result import Err, Ok
from bsvm.output.console import Style
from bsvm.output.errors import install_error_exit_code, print_install_error, print_setup_error
from bsvm.platform.process import SubprocessRunner
from bsvm.services.installer import DEFAULT_COMMAND, InstallOptions, Installer
from bsvm.services.sync import RepoSyncService


def install(
    ctx: typer.Context,
    versions: list[str] | None = typer.Argument(None, help="Tags or names (substring match)."),
    all_: bool = typer.Option(False, "--all", "-a", help="Install every known version."),
    mode: str = typer.Option(
        DEFAULT_COMMAND,
        "--mode",
        "-m",
        help="Package script used to build into the install directory.",
    ),
    no_copy: bool = typer.Option(
        False,
        "--no-copy",
        help="Do not copy files when the --mode script does not exist.",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Print actions without modifying."),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Seconds allowed for each package manager command.",
    ),
) -> None:
    """Install the specified version(s)."""
    cli = build_context(ctx)

    repo = cli.repo
    if not repo.exists() and not dry_run:
        synced = RepoSyncService(config=cli.config, console=cli.console).sync()
        if isinstance(synced, Err):
            cli.console.error(synced.error.message)
            exit_with_code(int(ErrorCode.NETWORK_ERROR))

    resolution = select_versions(cli, versions or [], all_=all_, versions=catalog(cli))
    selected = list(resolution.versions)
    installer = Installer(
        config=cli.config,
        repo=repo,
        runner=SubprocessRunner(),
        console=cli.console,
    )
    options = InstallOptions(
        command=mode,
        no_copy=no_copy,
        verbose=cli.options.verbose,
        dry_run=dry_run,
        timeout=timeout,
    )

    match installer.install_all(selected, options):
        case Err(error):
            print_setup_error(error, cli.console)
            exit_with_code(install_error_exit_code(error))
        case Ok(report):
            pass

    # Any query that matched nothing fails the command, even if others installed.
    ok = (selected or all_) and not resolution.unmatched
    code = int(ErrorCode.OK) if ok else int(ErrorCode.USER_ERROR)
    for outcome in report.outcomes:
        match outcome.result:
            case Ok(done) if done.strategy == "dry-run":
                cli.console.print(f"would install {outcome.version.tag} to {done.path}", Style.DIM)
            case Ok(done):
                cli.console.success(f"Installed {outcome.version.display_name} <{done.tag}>")
                cli.console.debug(f"{done.strategy} -> {done.path}")
            case Err(error):
                print_install_error(error, cli.console)
                if code == int(ErrorCode.OK):
                    code = install_error_exit_code(error)

    if code != int(ErrorCode.OK):
        exit_with_code(code)
