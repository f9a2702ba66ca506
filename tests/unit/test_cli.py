"""Unit tests for the docs-server command line."""

import json

from click.testing import CliRunner

from docs_server import __version__
from docs_server.cli.main import cli


class TestCli:
    """Test CLI commands."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_version(self):
        result = self.runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert f"Docs Server v{__version__}" in result.output

    def test_init_creates_files(self, tmp_path):
        result = self.runner.invoke(cli, ["--base-path", str(tmp_path), "init"])

        assert result.exit_code == 0
        assert "Created" in result.output
        assert json.loads((tmp_path / "repodata.json").read_text()) == {}
        config = json.loads((tmp_path / "config.json").read_text())
        assert config["github"]["apiKey"] == ""

    def test_init_with_api_key(self, tmp_path):
        result = self.runner.invoke(
            cli, ["--base-path", str(tmp_path), "init", "--api-key", "ghp_test"]
        )

        assert result.exit_code == 0
        config = json.loads((tmp_path / "config.json").read_text())
        assert config["github"]["apiKey"] == "ghp_test"

    def test_init_keeps_existing_files(self, tmp_path):
        (tmp_path / "config.json").write_text('{"github": {"apiKey": "old"}}')
        (tmp_path / "repodata.json").write_text("{}")

        result = self.runner.invoke(
            cli, ["--base-path", str(tmp_path), "init", "--api-key", "new"]
        )

        assert result.exit_code == 0
        assert "already exist" in result.output
        assert json.loads((tmp_path / "config.json").read_text())["github"]["apiKey"] == "old"

    def test_init_write_failure(self, tmp_path):
        """An unwritable base path is reported and exits non-zero."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        result = self.runner.invoke(cli, ["--base-path", str(blocker / "sub"), "init"])

        assert result.exit_code == 1
        assert "Failed to write configuration" in result.output

    def test_info(self, tmp_path):
        (tmp_path / "docsdata" / "drei").mkdir(parents=True)

        result = self.runner.invoke(cli, ["--base-path", str(tmp_path), "info"])

        assert result.exit_code == 0
        assert "Libraries" in result.output
        assert "not configured" in result.output
        assert "60/hour" in result.output
