"""Unit tests for hetzner_cli/main.py - CLI entry point."""

import pytest
from click.testing import CliRunner

from hetzner_cli.main import cli


@pytest.fixture
def cli_runner():
    """Create CLI runner for testing Click commands."""
    return CliRunner()


class TestCliGroup:
    """Tests for the root command group."""

    def test_help_lists_groups(self, cli_runner):
        result = cli_runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "auth" in result.output
        assert "cloud" in result.output

    def test_context_help_lists_aliases(self, cli_runner):
        result = cli_runner.invoke(cli, ["cloud", "context", "--help"])

        assert result.exit_code == 0
        for name in ("create", "use", "delete", "rm", "list", "ls", "active"):
            assert name in result.output

    def test_invalid_log_level(self, cli_runner, services):
        result = cli_runner.invoke(cli, ["--log-level", "LOUD", "auth", "status"], obj={"services": services})

        assert result.exit_code == 1
        assert "✗ Invalid hetzner-cli settings" in result.stderr

    def test_log_level_is_case_insensitive(self, cli_runner, services):
        result = cli_runner.invoke(cli, ["--log-level", "debug", "auth", "status"], obj={"services": services})

        assert result.exit_code == 0
        assert "cli_started" in result.stderr

    def test_config_dir_from_environment(self, cli_runner, tmp_path, monkeypatch):
        """Test services are built from HETZNER_CLI_CONFIG_DIR when not injected."""
        config_dir = tmp_path / "custom"
        monkeypatch.setenv("HETZNER_CLI_CONFIG_DIR", str(config_dir))

        obj = {}
        result = cli_runner.invoke(cli, ["cloud", "context", "list"], obj=obj)

        assert result.exit_code == 0
        assert obj["settings"].config_dir == config_dir
        assert obj["services"].file_store.config_dir == config_dir
