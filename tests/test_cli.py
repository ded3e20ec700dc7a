"""
Tests for CLI commands — plan, artifacts, show, and global options.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from featurelauncher.core.models import ArtifactId
from featurelauncher.main import cli

FEATURE = {
    "id": "org.example:app:slingosgifeature:1.0",
    "title": "CLI app",
    "variables": {"port": "8080"},
    "bundles": [
        "org.example:core:1.0",
        {"id": "org.example:web:1.0", "start-order": 20},
    ],
    "framework-properties": {"http.port": "${port}", "shared": "feature"},
    "configurations": {"org.example.Service": {"enabled": True}},
    "repoinit:TEXT|false": "create path /content",
}


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch) -> Path:
    """A feature file plus a local repository holding its bundles."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FL_HOME", raising=False)

    repo = tmp_path / "repo"
    for coordinate in ("org.example:core:1.0", "org.example:web:1.0", "org.example:pkg:zip:1.0"):
        target = repo / ArtifactId.parse(coordinate).to_mvn_path()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(coordinate)

    (tmp_path / "app.json").write_text(json.dumps(FEATURE))
    return tmp_path


def _base_args(ws: Path, feature: str = "app.json") -> list[str]:
    return ["-f", str(ws / feature), "-p", str(ws / "home"), "-u", str(ws / "repo")]


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Feature Launcher" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_bad_pair_rejected(self, workspace):
        result = CliRunner().invoke(cli, [*_base_args(workspace), "-V", "novalue", "plan"])
        assert result.exit_code != 0
        assert "key=value" in result.output

    def test_bad_config_file(self, workspace):
        (workspace / "launcher.yml").write_text("nonsense: 1\n")
        result = CliRunner().invoke(cli, [*_base_args(workspace), "plan"])
        assert result.exit_code == 1
        assert "nonsense" in result.output


class TestPlanCommand:
    def test_plan_text(self, workspace):
        result = CliRunner().invoke(cli, [*_base_args(workspace), "plan"])
        assert result.exit_code == 0, result.output
        assert "org.example:app:slingosgifeature:1.0" in result.output
        assert "[20]" in result.output
        assert "repoinit1" in result.output
        assert "http.port=8080" in result.output

    def test_plan_json(self, workspace):
        args = [*_base_args(workspace), "-V", "port=9090", "-D", "shared=cli", "plan", "--json"]
        result = CliRunner().invoke(cli, args)
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        plan = data["plan"]
        assert list(plan["bundles"]) == ["1", "20"]
        assert plan["framework_properties"] == {"shared": "cli", "http.port": "9090"}
        assert [c["name"] for c in plan["configurations"]] == ["repoinit1", "org.example.Service"]

    def test_plan_caches_application(self, workspace):
        CliRunner().invoke(cli, [*_base_args(workspace), "plan"])
        cache = workspace / "home" / "resources" / "provisioning" / "application.json"
        assert cache.is_file()

        # Second run without -f uses the cache
        args = ["-p", str(workspace / "home"), "-u", str(workspace / "repo"), "plan", "--json"]
        result = CliRunner().invoke(cli, args)
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["feature"] == FEATURE["id"]

    def test_pure_mode_rejects_artifacts(self, workspace):
        data = dict(FEATURE)
        data["content:ARTIFACTS|false"] = ["org.example:pkg:zip:1.0"]
        (workspace / "with-content.json").write_text(json.dumps(data))

        pure = CliRunner().invoke(cli, [*_base_args(workspace, "with-content.json"), "plan"])
        assert pure.exit_code == 1
        assert "not supported" in pure.output

        install = CliRunner().invoke(
            cli,
            [*_base_args(workspace, "with-content.json"), "--startup-mode", "install", "plan", "--json"],
        )
        assert install.exit_code == 0, install.output
        assert len(json.loads(install.output)["plan"]["installable_artifacts"]) == 1

    def test_missing_bundle(self, workspace):
        data = dict(FEATURE)
        data["bundles"] = ["org.example:absent:1.0"]
        (workspace / "absent.json").write_text(json.dumps(data))
        result = CliRunner().invoke(cli, [*_base_args(workspace, "absent.json"), "plan", "--json"])
        assert result.exit_code == 1
        assert "org.example:absent:1.0" in json.loads(result.output)["error"]


class TestArtifactsCommand:
    def test_lists_artifacts(self, workspace):
        result = CliRunner().invoke(cli, [*_base_args(workspace), "artifacts", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert set(data["artifacts"]) == {"org.example:core:1.0", "org.example:web:1.0"}


class TestShowCommand:
    def test_show_resolved_feature(self, workspace):
        result = CliRunner().invoke(cli, [*_base_args(workspace), "-V", "port=1", "show"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["framework-properties"]["http.port"] == "1"
