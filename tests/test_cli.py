"""CLI tests driven through click's CliRunner."""

import json
import zipfile
from textwrap import dedent

import pytest
from click.testing import CliRunner

from buildship import __version__
from buildship.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project(tmp_path, build_dir, monkeypatch):
    """Working directory holding dist/ (from build_dir) and no config yet."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_config(project, text: str):
    (project / "buildship.yml").write_text(dedent(text))


DEPLOY_CONFIG = """
deploy:
  enabled: true
  host: example.com
  username: deploy
  password: secret
  remote_archive_path: /tmp/build.zip
  remote_extract_dir: /var/www/app
"""


class TestVersion:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestPack:
    def test_pack_defaults(self, runner, project):
        result = runner.invoke(cli, ["pack"])

        assert result.exit_code == 0, result.output
        archive = project / "dist" / "build.zip"
        assert zipfile.is_zipfile(archive)

    def test_pack_json(self, runner, project):
        result = runner.invoke(cli, ["pack", "--archive-name", "site.zip", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["archive"].endswith("site.zip")
        assert data["entries"] == 4

    def test_pack_ignores_deploy_section(self, runner, project):
        write_config(project, DEPLOY_CONFIG)
        result = runner.invoke(cli, ["pack"])
        assert result.exit_code == 0, result.output

    def test_pack_missing_source(self, runner, project):
        result = runner.invoke(cli, ["pack", "--source-dir", "missing", "--json"])

        assert result.exit_code == 1
        assert json.loads(result.output)["type"] == "ArchiveError"


class TestValidate:
    def test_valid_config(self, runner, project):
        write_config(project, DEPLOY_CONFIG + "  known_hosts: ~/.ssh/known_hosts\n")
        result = runner.invoke(cli, ["validate", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"valid": True, "errors": [], "warnings": []}

    def test_invalid_config(self, runner, project):
        write_config(
            project,
            """
            package:
              enabled: false
            deploy:
              enabled: true
              host: example.com
            """,
        )
        result = runner.invoke(cli, ["validate", "--json"])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["valid"] is False
        assert any("deploy requires package" in e for e in data["errors"])

    def test_table_output(self, runner, project):
        write_config(project, DEPLOY_CONFIG)
        result = runner.invoke(cli, ["validate"])

        assert result.exit_code == 0, result.output
        assert "Configuration is valid" in result.output
        assert "known_hosts" in result.output

    def test_unknown_key_reported(self, runner, project):
        write_config(project, "package:\n  zip_name: x.zip\n")
        result = runner.invoke(cli, ["validate", "--json"])

        assert result.exit_code == 1
        assert json.loads(result.output)["type"] == "ConfigurationError"


class TestRun:
    def test_no_deploy_only_packages(self, runner, project):
        write_config(project, DEPLOY_CONFIG)
        result = runner.invoke(cli, ["run", "--no-deploy", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["state"] == "done"
        assert data["deployed"] is False
        assert (project / "dist" / "build.zip").exists()

    def test_invalid_config_fails_before_packaging(self, runner, project):
        write_config(project, "deploy:\n  enabled: true\n")
        result = runner.invoke(cli, ["run"])

        assert result.exit_code == 1
        assert not (project / "dist" / "build.zip").exists()

    def test_log_file_written(self, runner, project):
        result = runner.invoke(cli, ["run", "--log-dir", str(project / "logs")])

        assert result.exit_code == 0, result.output
        logs = list((project / "logs").rglob("*_run.log"))
        assert len(logs) == 1
        assert "Status: SUCCESS" in logs[0].read_text()
