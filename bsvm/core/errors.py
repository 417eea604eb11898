"""Process exit codes for bsvm commands."""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (unknown version, bad arguments)
    - 2: Environment error (missing git or package manager, bad config)
    - 3: Install error (checkout, dependency install or deploy failed)
    - 4: Network error (release list or clone unreachable)
    - 5: I/O error (install directory not writable)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    INSTALL_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
