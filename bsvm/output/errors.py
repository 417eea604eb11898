"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
In verbose mode the underlying git/process output is printed under the
one-line summary.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bsvm.core.errors import ErrorCode
from bsvm.output.console import Style
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
    NotInstalled,
    PackageManagerMissing,
    RemoveFailed,
    SetupError,
    UninstallError,
)

if TYPE_CHECKING:
    from bsvm.output.console import ConsoleProtocol

__all__ = [
    "install_error_exit_code",
    "print_install_error",
    "print_setup_error",
    "print_uninstall_error",
]


def _detail(console: ConsoleProtocol, detail: str) -> None:
    if console.verbose and detail:
        console.print(detail, Style.DIM)


def print_install_error(error: InstallError, console: ConsoleProtocol) -> None:
    """Print an install failure for one version."""
    match error:
        case CheckoutFailed(tag=tag, detail=detail):
            console.error(f"{tag}: checkout failed")
            _detail(console, detail)
        case CopyDisabled(tag=tag):
            console.error(f"{tag}: no deploy command and copying is disabled (--no-copy)")
        case PackageManagerMissing(tag=tag, package_manager=pm, detail=detail):
            console.error(f"{tag}: package manager '{pm}' not found")
            console.print(f"hint: install {pm} or set: bsvm config package_manager", Style.DIM)
            _detail(console, detail)
        case DependencyInstallFailed(tag=tag, returncode=rc, detail=detail):
            console.error(f"{tag}: dependency install failed (exit {rc})")
            _detail(console, detail)
        case DescriptorInvalid(tag=tag, path=path, detail=detail):
            console.error(f"{tag}: invalid package descriptor {path.name}")
            _detail(console, detail)
        case CommandMissing(tag=tag, command=command):
            console.error(
                f"{tag}: command '{command}' not found and copying is disabled (--no-copy)"
            )
        case DeployFailed(tag=tag, command=command, returncode=rc, detail=detail, timed_out=t):
            if t:
                console.error(f"{tag}: '{command}' timed out")
            else:
                console.error(f"{tag}: '{command}' failed (exit {rc})")
            _detail(console, detail)
        case CopyFailed(tag=tag, detail=detail):
            console.error(f"{tag}: copying files failed")
            _detail(console, detail)


def print_uninstall_error(error: UninstallError, console: ConsoleProtocol) -> None:
    match error:
        case NotInstalled(tag=tag):
            console.error(f"{tag}: not installed")
        case RemoveFailed(tag=tag, path=path, detail=detail):
            console.error(f"{tag}: could not remove {path}")
            _detail(console, detail)


def print_setup_error(error: SetupError, console: ConsoleProtocol) -> None:
    match error:
        case InstallRootUnavailable(path=path, detail=detail):
            console.error(f"cannot create install directory {path}")
            _detail(console, detail)


def install_error_exit_code(error: InstallError | UninstallError | SetupError) -> int:
    """Get exit code for a failure."""
    match error:
        case NotInstalled():
            return int(ErrorCode.USER_ERROR)
        case PackageManagerMissing():
            return int(ErrorCode.ENV_ERROR)
        case InstallRootUnavailable() | CopyFailed() | RemoveFailed():
            return int(ErrorCode.IO_ERROR)
        case _:
            return int(ErrorCode.INSTALL_ERROR)
