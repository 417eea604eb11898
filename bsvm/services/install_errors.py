from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class CheckoutFailed:
    tag: str
    detail: str


@dataclass(frozen=True, slots=True)
class CopyDisabled:
    tag: str


@dataclass(frozen=True, slots=True)
class PackageManagerMissing:
    tag: str
    package_manager: str
    detail: str


@dataclass(frozen=True, slots=True)
class DependencyInstallFailed:
    tag: str
    returncode: int
    detail: str


@dataclass(frozen=True, slots=True)
class DescriptorInvalid:
    tag: str
    path: Path
    detail: str


@dataclass(frozen=True, slots=True)
class CommandMissing:
    tag: str
    command: str


@dataclass(frozen=True, slots=True)
class DeployFailed:
    tag: str
    command: str
    returncode: int
    detail: str
    timed_out: bool = False


@dataclass(frozen=True, slots=True)
class CopyFailed:
    tag: str
    detail: str


@dataclass(frozen=True, slots=True)
class NotInstalled:
    tag: str
    path: Path


@dataclass(frozen=True, slots=True)
class RemoveFailed:
    tag: str
    path: Path
    detail: str


@dataclass(frozen=True, slots=True)
class InstallRootUnavailable:
    path: Path
    detail: str


InstallError = (
    CheckoutFailed
    | CopyDisabled
    | PackageManagerMissing
    | DependencyInstallFailed
    | DescriptorInvalid
    | CommandMissing
    | DeployFailed
    | CopyFailed
)

UninstallError = NotInstalled | RemoveFailed

SetupError = InstallRootUnavailable
