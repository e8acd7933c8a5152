"""
Persistent Stores

Where permanent environment assignments live:

- ProfileStore: a shell profile file in the user's home directory
  (``export NAME=VALUE`` lines appended at the end).
- RegistryStore: string values under ``HKEY_CURRENT_USER\\Environment``.

locate_store() picks one of them for the current platform.
"""

from __future__ import annotations

import os
import platform
import re
import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

from env_perm.config import Settings, get_settings
from env_perm.errors import ProfileNotFoundError, StoreEncodingError, StoreIOError
from env_perm.logging import get_logger

logger = get_logger(__name__)

_EXPORT_RE = re.compile(r"^\s*export\s+([A-Za-z_][A-Za-z0-9_]*)=(.*)$")


class StoreKind(StrEnum):
    FILE = "file"
    REGISTRY = "registry"


@dataclass(frozen=True)
class Assignment:
    """One persisted ``name = value`` entry."""

    name: str
    value: str


def split_path_list(value: str, separator: str) -> list[str]:
    """Split a list-valued variable into its non-empty elements."""
    return [part for part in value.split(separator) if part]


def contains_path_entry(current: str, entry: str, separator: str, match: str) -> bool:
    """
    Check whether a list-valued assignment already includes ``entry``.

    ``token`` compares whole delimited elements; ``substring`` is a plain
    containment test, which also matches inside longer elements.
    """
    if match == "substring":
        return entry in current

    # A multi-element entry such as "/a:/b" must appear as a contiguous run
    tokens = split_path_list(current, separator)
    wanted = split_path_list(entry, separator)
    if not wanted:
        return False
    width = len(wanted)
    return any(tokens[i:i + width] == wanted for i in range(len(tokens) - width + 1))


class Store(ABC):
    """
    Base class for persistent variable stores.

    Subclasses implement:
    - locate(): resolve the store for the current user
    - read_all(): every assignment currently persisted
    - write_assignment(): persist ``name = value``
    - write_path_entry(): splice a value into a list variable
    """

    kind: StoreKind
    separator: str

    def __init__(self, location: str):
        self.location = location

    @classmethod
    @abstractmethod
    def locate(cls, settings: Settings) -> "Store":
        """Resolve the store for the current user."""

    @abstractmethod
    def read_all(self) -> list[Assignment]:
        """Return all persisted assignments in store order."""

    @abstractmethod
    def write_assignment(self, name: str, value: str) -> None:
        """Persist ``name = value``."""

    @abstractmethod
    def write_path_entry(self, name: str, value: str, front: bool = True) -> None:
        """Add ``value`` to the list variable ``name``."""

    def contains_assignment(self, name: str) -> bool:
        """Return True if the store already assigns ``name``."""
        return any(a.name == name for a in self.read_all())

    def get_value(self, name: str) -> str | None:
        """Return the effective (last) persisted value of ``name``."""
        value = None
        for assignment in self.read_all():
            if assignment.name == name:
                value = assignment.value
        return value

    def contains_path_entry(self, name: str, value: str, match: str = "token") -> bool:
        """Return True if some assignment of ``name`` already includes ``value``."""
        return any(
            contains_path_entry(a.value, value, self.separator, match)
            for a in self.read_all()
            if a.name == name
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.location!r})"


def resolve_home(settings: Settings) -> Path:
    """Return the user's home directory or raise ProfileNotFoundError."""
    home = settings.home or os.environ.get("HOME")
    if not home:
        raise ProfileNotFoundError("No home directory: HOME is not set")

    path = Path(home).expanduser()
    if not path.is_dir():
        raise ProfileNotFoundError(f"Home directory does not exist: {path}")
    return path


class ProfileStore(Store):
    """A shell profile file such as ``~/.bash_profile``."""

    kind = StoreKind.FILE
    separator = ":"

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(str(self.path))

    @classmethod
    def locate(cls, settings: Settings) -> "ProfileStore":
        """
        Find the profile login shells will read.

        Returns the first existing candidate; if there is none the default
        profile is created empty.
        """
        home = resolve_home(settings)

        for candidate in settings.profile_candidates:
            path = home / candidate
            if path.is_file():
                logger.debug(f"Using existing profile {path}")
                return cls(path)

        path = home / settings.default_profile
        try:
            path.touch(exist_ok=True)
        except OSError as e:
            raise StoreIOError(f"Could not create profile {path}: {e}") from e

        logger.info(f"Created profile {path}")
        return cls(path)

    def read_text(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except UnicodeDecodeError as e:
            raise StoreEncodingError(f"{self.path} is not valid UTF-8 text") from e
        except OSError as e:
            raise StoreIOError(f"Could not read {self.path}: {e}") from e

    def read_all(self) -> list[Assignment]:
        assignments = []
        for line in self.read_text().splitlines():
            match = _EXPORT_RE.match(line)
            if match:
                assignments.append(Assignment(match.group(1), parse_value(match.group(2))))
        return assignments

    def write_assignment(self, name: str, value: str) -> None:
        self.append_line(f"export {name}={value}")

    def write_path_entry(self, name: str, value: str, front: bool = True) -> None:
        if front:
            self.append_line(f'export {name}="{value}:${name}"')
        else:
            self.append_line(f'export {name}="${name}:{value}"')

    def append_line(self, line: str) -> None:
        """Append ``line`` at the end of the profile, on a line of its own."""
        existing = self.read_text()
        prefix = "\n" if existing and not existing.endswith("\n") else ""

        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(f"{prefix}{line}\n")
                f.flush()
        except OSError as e:
            raise StoreIOError(f"Could not write {self.path}: {e}") from e

        logger.debug(f"Appended to {self.path}: {line}")


def parse_value(raw: str) -> str:
    """
    Return the word assigned by an ``export NAME=...`` line.

    Shell quoting is removed and anything after the first word, such as a
    trailing ``# comment``, is dropped. Unbalanced quotes leave the raw
    text unchanged.
    """
    try:
        words = shlex.split(raw, comments=True)
    except ValueError:
        return raw.strip()
    return words[0] if words else ""


class RegistryStore(Store):
    """
    The per-user environment key of the Windows registry.

    ``registry`` is a winreg-compatible module; it defaults to the real
    ``winreg`` so the store can be exercised with a stand-in on other
    platforms.
    """

    kind = StoreKind.REGISTRY
    separator = ";"

    def __init__(self, key: str = "Environment", registry: Any | None = None):
        self.key = key
        self._registry = registry
        super().__init__(f"HKEY_CURRENT_USER\\{key}")

    @classmethod
    def locate(cls, settings: Settings, registry: Any | None = None) -> "RegistryStore":
        """The key always exists for a logged in user, so nothing is searched."""
        return cls(settings.registry_key, registry=registry)

    @property
    def registry(self) -> Any:
        if self._registry is None:
            import winreg
            self._registry = winreg
        return self._registry

    def _open(self, access: int) -> Any:
        reg = self.registry
        try:
            return reg.OpenKey(reg.HKEY_CURRENT_USER, self.key, 0, access)
        except OSError as e:
            raise StoreIOError(f"Could not open {self.location}: {e}") from e

    def read_all(self) -> list[Assignment]:
        assignments = []
        reg = self.registry
        with self._open(reg.KEY_READ) as key:
            try:
                value_count = reg.QueryInfoKey(key)[1]
                for index in range(value_count):
                    name, value, _ = reg.EnumValue(key, index)
                    assignments.append(Assignment(name, str(value)))
            except OSError as e:
                raise StoreIOError(f"Could not enumerate {self.location}: {e}") from e
        return assignments

    def get_value(self, name: str) -> str | None:
        with self._open(self.registry.KEY_READ) as key:
            try:
                value, _ = self.registry.QueryValueEx(key, name)
            except FileNotFoundError:
                return None
            except OSError as e:
                raise StoreIOError(f"Could not read {self.location}\\{name}: {e}") from e
        return str(value)

    def contains_assignment(self, name: str) -> bool:
        return self.get_value(name) is not None

    def contains_path_entry(self, name: str, value: str, match: str = "token") -> bool:
        current = self.get_value(name)
        if current is None:
            return False
        return contains_path_entry(current, value, self.separator, match)

    def write_assignment(self, name: str, value: str) -> None:
        reg = self.registry
        # Values referencing other variables must be expanded by Windows
        value_type = reg.REG_EXPAND_SZ if "%" in value else reg.REG_SZ

        with self._open(reg.KEY_SET_VALUE) as key:
            try:
                reg.SetValueEx(key, name, 0, value_type, value)
            except OSError as e:
                raise StoreIOError(f"Could not write {self.location}\\{name}: {e}") from e

        logger.debug(f"Wrote {self.location}\\{name}")

    def write_path_entry(self, name: str, value: str, front: bool = True) -> None:
        entries = split_path_list(self.get_value(name) or "", self.separator)
        if front:
            entries.insert(0, value)
        else:
            entries.append(value)
        self.write_assignment(name, self.separator.join(entries))


def locate_store(settings: Settings | None = None) -> Store:
    """
    Pick and resolve the store for this platform.

    The ``store`` setting can force ``file`` or ``registry``; ``auto``
    uses the registry on Windows and profile files everywhere else.
    """
    settings = settings or get_settings()

    kind = settings.store
    if kind == "auto":
        kind = StoreKind.REGISTRY if platform.system() == "Windows" else StoreKind.FILE

    if kind == StoreKind.REGISTRY:
        return RegistryStore.locate(settings)
    return ProfileStore.locate(settings)
