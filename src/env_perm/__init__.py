"""
env_perm - Permanently set environment variables

Writes ``export`` lines to the user's shell profile on Unix-like systems
and values under HKEY_CURRENT_USER\\Environment on Windows.
"""

__version__ = "0.4.0"

from env_perm.api import append, check_or_set, get, locate, set
from env_perm.errors import (
    EnvPermError,
    ProfileNotFoundError,
    StoreEncodingError,
    StoreIOError,
)
from env_perm.writer import EntryWriter

__all__ = [
    "EntryWriter",
    "EnvPermError",
    "ProfileNotFoundError",
    "StoreEncodingError",
    "StoreIOError",
    "__version__",
    "append",
    "check_or_set",
    "get",
    "locate",
    "set",
]
