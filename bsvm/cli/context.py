from __future__ import annotations

from dataclasses import dataclass

import typer

from bsvm.core.config import Config, ConfigStore, default_config_path, load_config
from bsvm.core.errors import ErrorCode
from bsvm.core.result import Err
from bsvm.git.repository import Repository
from bsvm.output.console import ConsoleProtocol, RichConsole
from bsvm.services.releases import ReleaseCache


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options given before the command name."""

    verbose: bool = False
    cache_no_update: bool = False
    reload_cache: bool = False


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    store: ConfigStore
    console: ConsoleProtocol
    options: GlobalOptions

    @property
    def repo(self) -> Repository:
        return Repository(self.config.git_dir)

    @property
    def cache(self) -> ReleaseCache:
        return ReleaseCache(self.config.cache_path)


def global_options(ctx: typer.Context) -> GlobalOptions:
    obj = ctx.find_root().obj
    if isinstance(obj, GlobalOptions):
        return obj
    return GlobalOptions()


def build_context(ctx: typer.Context) -> CLIContext:
    options = global_options(ctx)
    console = RichConsole(verbose=options.verbose)
    store = ConfigStore(default_config_path())

    config_result = load_config(store)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        config=config_result.value,
        store=store,
        console=console,
        options=options,
    )
