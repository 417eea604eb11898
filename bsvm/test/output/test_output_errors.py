from __future__ import annotations

from pathlib import Path

from bsvm.core.errors import ErrorCode
from bsvm.output.console import MockConsole, Style
from bsvm.output.errors import (
    install_error_exit_code,
    print_install_error,
    print_setup_error,
    print_uninstall_error,
)
from bsvm.services.install_errors import (
    CheckoutFailed,
    CommandMissing,
    CopyFailed,
    DeployFailed,
    InstallRootUnavailable,
    NotInstalled,
    PackageManagerMissing,
    RemoveFailed,
)


def test_detail_hidden_unless_verbose() -> None:
    error = CheckoutFailed(tag="v1.0.0", detail="fatal: bad ref")

    quiet = MockConsole()
    print_install_error(error, quiet)
    assert quiet.messages == ["error: v1.0.0: checkout failed"]

    loud = MockConsole(verbose=True)
    print_install_error(error, loud)
    assert loud.outputs[-1].message == "fatal: bad ref"
    assert loud.outputs[-1].style == Style.DIM


def test_package_manager_missing_has_hint() -> None:
    console = MockConsole()
    print_install_error(
        PackageManagerMissing(tag="v1.0.0", package_manager="pnpm", detail=""), console
    )
    assert console.find("'pnpm' not found")
    assert console.find("bsvm config package_manager")


def test_deploy_timeout_message() -> None:
    console = MockConsole()
    print_install_error(
        DeployFailed(tag="v2.0.0", command="deploy", returncode=-1, detail="", timed_out=True),
        console,
    )
    assert console.messages == ["error: v2.0.0: 'deploy' timed out"]


def test_command_missing_mentions_no_copy() -> None:
    console = MockConsole()
    print_install_error(CommandMissing(tag="v3.0.0", command="deploy"), console)
    assert console.find("--no-copy")


def test_uninstall_and_setup_messages() -> None:
    console = MockConsole()
    print_uninstall_error(NotInstalled(tag="v1.0.0", path=Path("/x/v1.0.0")), console)
    print_setup_error(InstallRootUnavailable(path=Path("/x"), detail="read-only"), console)
    assert console.messages == [
        "error: v1.0.0: not installed",
        "error: cannot create install directory /x",
    ]


def test_exit_codes() -> None:
    path = Path("/x")
    assert install_error_exit_code(NotInstalled(tag="a", path=path)) == ErrorCode.USER_ERROR
    assert (
        install_error_exit_code(PackageManagerMissing(tag="a", package_manager="npm", detail=""))
        == ErrorCode.ENV_ERROR
    )
    assert install_error_exit_code(CopyFailed(tag="a", detail="")) == ErrorCode.IO_ERROR
    removed = RemoveFailed(tag="a", path=path, detail="")
    assert install_error_exit_code(removed) == ErrorCode.IO_ERROR
    assert install_error_exit_code(CommandMissing(tag="a", command="x")) == ErrorCode.INSTALL_ERROR
