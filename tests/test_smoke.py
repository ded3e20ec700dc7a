"""
Smoke tests — the package imports and the CLI is wired up.
"""

from click.testing import CliRunner

from featurelauncher import __version__
from featurelauncher.main import cli


class TestBootstrap:
    """Verify the package bootstrap is healthy."""

    def test_version_is_set(self):
        assert __version__
        assert isinstance(__version__, str)

    def test_commands_registered(self):
        """plan, artifacts and show should all answer --help."""
        runner = CliRunner()
        for command in ("plan", "artifacts", "show"):
            result = runner.invoke(cli, [command, "--help"])
            assert result.exit_code == 0, command

    def test_public_reexports(self):
        import featurelauncher.adapters as adapters
        import featurelauncher.core.models as models

        assert set(adapters.__all__) >= {"ArtifactManager", "MockArtifactProvider"}
        assert set(models.__all__) >= {"Feature", "InstallationPlan", "ArtifactId"}
