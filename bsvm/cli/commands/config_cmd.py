from __future__ import annotations

import typer

from bsvm.cli.commands._helpers import exit_with_code
from bsvm.cli.context import build_context
from bsvm.core.config import KNOWN_KEYS
from bsvm.core.errors import ErrorCode
from bsvm.core.result import Err, Ok


def config(
    ctx: typer.Context,
    key: str | None = typer.Argument(None, help="Config key (omit to list all)."),
    value: str | None = typer.Argument(None, help="New value (omit to print)."),
    global_: bool = typer.Option(
        False,
        "--global",
        "-g",
        help="Apply the change globally (not supported yet).",
    ),
) -> None:
    """Print or set config values."""
    cli = build_context(ctx)
    if global_:
        cli.console.warning("global config is not supported yet.")

    if key is None:
        match cli.store.items():
            case Ok(items):
                for k, v in items:
                    cli.console.print(f"{k} = {v}")
            case Err(error):
                cli.console.error(error.message)
                exit_with_code(int(ErrorCode.ENV_ERROR))
        return

    if key not in KNOWN_KEYS:
        cli.console.warning(f"unknown config key: {key} (known: {', '.join(KNOWN_KEYS)})")

    if value is None:
        match cli.store.get(key):
            case Ok(None):
                exit_with_code(int(ErrorCode.USER_ERROR))
            case Ok(current):
                cli.console.print(str(current))
            case Err(error):
                cli.console.error(error.message)
                exit_with_code(int(ErrorCode.ENV_ERROR))
        return

    if not cli.store.path.exists():
        cli.console.debug(f"No config file found at {cli.store.path}, creating.")
    match cli.store.set(key, value):
        case Ok(_):
            cli.console.success(f"{key} = {value}")
        case Err(error):
            cli.console.error(error.message)
            exit_with_code(int(ErrorCode.IO_ERROR))
