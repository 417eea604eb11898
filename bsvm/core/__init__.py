"""Core domain types and logic."""

from .config import Config, ConfigError, ConfigStore, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok
from .version import Version, merge_version

__all__ = [
    # config
    "Config",
    "ConfigError",
    "ConfigStore",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # version
    "Version",
    "merge_version",
]
