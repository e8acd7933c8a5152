"""
Error types raised by env_perm.

Each error also derives from the closest builtin so callers that only
know about ``OSError`` or ``FileNotFoundError`` still catch them.
"""


class EnvPermError(Exception):
    """Base class for all env_perm failures."""


class ProfileNotFoundError(EnvPermError, FileNotFoundError):
    """No home directory (and therefore no profile) could be determined."""


class StoreIOError(EnvPermError, OSError):
    """Reading, creating or writing a profile file or registry key failed."""


class StoreEncodingError(EnvPermError, ValueError):
    """A profile file does not contain valid UTF-8 text."""
