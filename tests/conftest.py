"""
Shared test fixtures for env_perm.

Provides an isolated home directory and a winreg stand-in so both
stores can be exercised on any platform.
"""

import os

import pytest
from pathlib import Path

from env_perm.config import Settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path: Path):
    """Keep the developer's own settings and config file out of tests."""
    for key in list(os.environ):
        if key.startswith("ENV_PERM_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("ENV_PERM_CONFIG", str(tmp_path / "no-config.yaml"))


@pytest.fixture
def tmp_home(monkeypatch, tmp_path: Path) -> Path:
    """Provide an empty home directory and point HOME at it."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("ENV_PERM_STORE", "file")
    return home


@pytest.fixture
def file_settings(tmp_home: Path) -> Settings:
    """Settings that always use profile files in the temporary home."""
    return Settings(home=str(tmp_home), store="file")


class FakeKey:
    """An open registry key handle."""

    def __init__(self, values: dict, access: int):
        self.values = values
        self.access = access
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False


class FakeRegistry:
    """In-memory stand-in exposing the winreg calls RegistryStore uses."""

    HKEY_CURRENT_USER = "HKEY_CURRENT_USER"
    KEY_READ = 0x20019
    KEY_SET_VALUE = 0x0002
    REG_SZ = 1
    REG_EXPAND_SZ = 2

    def __init__(self):
        self.keys: dict[str, dict] = {"Environment": {}}
        self.writes = 0
        self.opened: list[FakeKey] = []
        self.enum_error: OSError | None = None

    def OpenKey(self, root, sub_key, reserved=0, access=KEY_READ):
        if sub_key not in self.keys:
            raise FileNotFoundError(2, "The system cannot find the file specified")
        key = FakeKey(self.keys[sub_key], access)
        self.opened.append(key)
        return key

    def QueryInfoKey(self, key):
        return 0, len(key.values), 0

    def EnumValue(self, key, index):
        if self.enum_error is not None:
            raise self.enum_error
        items = list(key.values.items())
        if index >= len(items):
            raise OSError(259, "No more data is available")
        name, (value, value_type) = items[index]
        return name, value, value_type

    def QueryValueEx(self, key, name):
        if name not in key.values:
            raise FileNotFoundError(2, "The system cannot find the file specified")
        return key.values[name]

    def SetValueEx(self, key, name, reserved, value_type, value):
        if key.access != self.KEY_SET_VALUE:
            raise PermissionError(5, "Access is denied")
        key.values[name] = (value, value_type)
        self.writes += 1

    @property
    def environment(self) -> dict:
        return self.keys["Environment"]


@pytest.fixture
def fake_registry() -> FakeRegistry:
    """Provide an empty HKEY_CURRENT_USER\\Environment."""
    return FakeRegistry()
