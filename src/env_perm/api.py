"""
Module-level shortcuts.

Each call builds a fresh EntryWriter from the current settings, so
changes to the environment or config file are picked up immediately.

    import env_perm

    # export DUMMY=1, unless DUMMY is already set
    env_perm.check_or_set("DUMMY", 1)
    # export PATH="$HOME/some/cool/bin:$PATH"
    env_perm.append("PATH", "$HOME/some/cool/bin")
    # export DUMMY="/something", even if DUMMY is already set
    env_perm.set("DUMMY", '"/something"')
"""

from env_perm.store import Store
from env_perm.writer import EntryWriter


def set(name: str, value: object) -> None:
    """Set a variable without checking whether it already exists."""
    EntryWriter().set(name, value)


def check_or_set(name: str, value: object) -> bool:
    """Set a variable unless it is already persisted."""
    return EntryWriter().check_or_set(name, value)


def append(name: str, value: object, front: bool = True) -> bool:
    """Add a value to a list variable such as PATH, once."""
    return EntryWriter().append(name, value, front=front)


def get(name: str) -> str | None:
    """Return the persisted value of a variable."""
    return EntryWriter().get(name)


def locate() -> Store:
    """Resolve the store variables are written to."""
    return EntryWriter().locate()
