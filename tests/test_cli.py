"""
Tests for the env-perm command-line interface.
"""

import pytest
from typer.testing import CliRunner

from env_perm import __version__
from env_perm.cli import app

runner = CliRunner()


@pytest.fixture
def profile(tmp_home):
    return tmp_home / ".bash_profile"


class TestSetCommand:
    def test_writes_export(self, profile):
        result = runner.invoke(app, ["set", "DUMMY", "1"])

        assert result.exit_code == 0
        assert "DUMMY set" in result.output
        assert profile.read_text() == "export DUMMY=1\n"

    def test_invalid_name(self, profile):
        result = runner.invoke(app, ["set", "MY-VAR", "1"])

        assert result.exit_code == 1
        assert "Invalid environment variable name" in result.output


class TestCheckCommand:
    def test_second_run_is_noop(self, profile):
        first = runner.invoke(app, ["check", "DUMMY", "1"])
        second = runner.invoke(app, ["check", "DUMMY", "2"])

        assert first.exit_code == 0
        assert second.exit_code == 0
        assert "already set" in second.output
        assert profile.read_text() == "export DUMMY=1\n"


class TestAppendCommand:
    def test_front_by_default(self, profile):
        result = runner.invoke(app, ["append", "PATH", "/x/y"])

        assert result.exit_code == 0
        assert profile.read_text() == 'export PATH="/x/y:$PATH"\n'

    def test_last_option(self, profile):
        result = runner.invoke(app, ["append", "PATH", "/x/y", "--last"])

        assert result.exit_code == 0
        assert profile.read_text() == 'export PATH="$PATH:/x/y"\n'

    def test_already_present(self, profile):
        runner.invoke(app, ["append", "PATH", "/x/y"])
        result = runner.invoke(app, ["append", "PATH", "/x/y"])

        assert result.exit_code == 0
        assert "nothing to do" in result.output
        assert profile.read_text().count("/x/y") == 1


class TestGetCommand:
    def test_prints_value(self, profile):
        profile.write_text("export DUMMY=5\n")

        result = runner.invoke(app, ["get", "DUMMY"])

        assert result.exit_code == 0
        assert result.output.strip() == "5"

    def test_missing_value(self, profile):
        result = runner.invoke(app, ["get", "DUMMY"])

        assert result.exit_code == 1
        assert "not set" in result.output


class TestWhereCommand:
    def test_lists_assignments(self, profile):
        profile.write_text("export DUMMY=5\nexport OTHER=6\n")

        result = runner.invoke(app, ["where"])

        assert result.exit_code == 0
        assert "DUMMY" in result.output
        assert "OTHER" in result.output

    def test_filter_by_name(self, profile):
        profile.write_text("export DUMMY=5\nexport OTHER=6\n")

        result = runner.invoke(app, ["where", "--name", "DUMMY"])

        assert "DUMMY" in result.output
        assert "OTHER" not in result.output

    def test_missing_home(self, monkeypatch):
        monkeypatch.delenv("HOME", raising=False)
        monkeypatch.setenv("ENV_PERM_STORE", "file")

        result = runner.invoke(app, ["where"])

        assert result.exit_code == 1
        assert "home directory" in result.output.lower()


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
