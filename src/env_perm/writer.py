"""
Entry Writer

Decides whether a variable needs to be written and writes it through
whichever Store the locator resolves. The store is resolved again for
every operation; nothing is kept between calls.
"""

import os
import re
from typing import Callable

from env_perm.config import Settings, get_settings
from env_perm.logging import get_logger
from env_perm.store import Store, locate_store

logger = get_logger(__name__)

_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_name(name: str) -> str:
    """Reject names a shell could not export."""
    if not _NAME_RE.match(name):
        raise ValueError(f"Invalid environment variable name: {name!r}")
    return name


class EntryWriter:
    """
    Persists environment variables for future shells.

    Usage:
        writer = EntryWriter()
        writer.check_or_set("DUMMY", 1)
        writer.append("PATH", "$HOME/some/cool/bin")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        locator: Callable[[Settings], Store] = locate_store,
    ):
        self.settings = settings or get_settings()
        self._locator = locator

    def locate(self) -> Store:
        """Resolve the store the next write would go to."""
        return self._locator(self.settings)

    def set(self, name: str, value: object) -> None:
        """
        Set a variable without checking whether it already exists.

        On a profile file this adds another assignment, the later one wins
        in the shell. On the registry the value is overwritten. Prefer
        check_or_set() unless overriding is intended.
        """
        validate_name(name)
        store = self.locate()
        store.write_assignment(name, str(value))
        logger.info(f"Set {name} in {store.location}")

    def check_or_set(self, name: str, value: object) -> bool:
        """
        Set a variable only if the store does not assign it yet.

        Returns True if something was written.
        """
        validate_name(name)
        if self.settings.consult_process_env and name in os.environ:
            logger.debug(f"{name} is set in the process environment, skipping")
            return False

        store = self.locate()
        if store.contains_assignment(name):
            logger.debug(f"{name} already set in {store.location}, skipping")
            return False

        store.write_assignment(name, str(value))
        logger.info(f"Set {name} in {store.location}")
        return True

    def append(self, name: str, value: object, front: bool = True) -> bool:
        """
        Add a value to a list variable such as PATH.

        With ``front`` the value is searched before the existing entries,
        otherwise after them. Nothing is written if an assignment of
        ``name`` already includes ``value``. Returns True if something
        was written.
        """
        validate_name(name)
        value = str(value)
        store = self.locate()

        if store.contains_path_entry(name, value, self.settings.path_match):
            logger.debug(f"{value} already in {name} in {store.location}, skipping")
            return False

        store.write_path_entry(name, value, front=front)
        logger.info(f"Added {value} to {name} in {store.location}")
        return True

    def get(self, name: str) -> str | None:
        """Return the persisted value of ``name``, or None if it is not stored."""
        validate_name(name)
        return self.locate().get_value(name)
