# MirrorSync CLI Tests
# Tests for the click command line interface

from pathlib import Path

import pytest
from click.testing import CliRunner

from mirrorsync import __version__
from mirrorsync.cli import cli
from mirrorsync.handlers.registry import build_registry


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def source_tree(temp_dir: Path) -> Path:
    src = temp_dir / "src"
    (src / "sub").mkdir(parents=True)
    (src / "a.txt").write_text("a")
    (src / "sub" / "b.txt").write_text("b")
    return src


class TestCliBasics:
    """Tests for top-level options."""

    def test_help(self, runner: CliRunner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "sync" in result.output
        assert "handlers" in result.output

    def test_version(self, runner: CliRunner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestSyncCommand:
    """Tests for the sync command."""

    def test_sync_local_directory(self, runner: CliRunner, temp_home: Path, source_tree: Path, temp_dir: Path):
        """Test mirroring a local directory."""
        dest = temp_dir / "dest"
        result = runner.invoke(cli, ["sync", str(source_tree), str(dest)])

        assert result.exit_code == 0, result.output
        assert "completed successfully" in result.output
        root = dest / str(source_tree).lstrip("/")
        assert (root / "a.txt").read_text() == "a"
        assert (root / "sub" / "b.txt").read_text() == "b"

    def test_sync_twice(self, runner: CliRunner, temp_home: Path, source_tree: Path, temp_dir: Path):
        """Test that a second run reports nothing written."""
        dest = temp_dir / "dest"
        runner.invoke(cli, ["sync", str(source_tree), str(dest)])
        result = runner.invoke(cli, ["sync", "--verbose", str(source_tree), str(dest)])

        assert result.exit_code == 0, result.output
        assert "Written:     0" in result.output

    def test_sync_uses_configured_destination(
        self, runner: CliRunner, config_file: Path, source_tree: Path, temp_home: Path
    ):
        """Test that DESTINATION defaults to the configured one."""
        result = runner.invoke(cli, ["sync", str(source_tree)])

        assert result.exit_code == 0, result.output
        assert (temp_home / "mirror" / str(source_tree).lstrip("/") / "a.txt").exists()

    def test_sync_invalid_locator(self, runner: CliRunner, temp_home: Path, temp_dir: Path):
        """Test that a malformed source exits with usage status."""
        result = runner.invoke(cli, ["sync", "http://[::1", str(temp_dir / "dest")])

        assert result.exit_code == 2
        assert "Invalid locator" in result.output

    def test_sync_unroutable(self, runner: CliRunner, temp_home: Path, temp_dir: Path):
        """Test that an unroutable source is reported and fails the run."""
        result = runner.invoke(cli, ["sync", "ftp://host/x", str(temp_dir / "dest")])

        assert result.exit_code == 1
        assert "Cannot sync" in result.output

    def test_sync_invalid_config(self, runner: CliRunner, temp_home: Path, temp_dir: Path):
        """Test that a broken configuration file aborts."""
        config = temp_dir / "bad.yaml"
        config.write_text("tumblr: [unclosed\n", encoding="utf-8")

        result = runner.invoke(cli, ["sync", "--config", str(config), "/tmp", str(temp_dir / "dest")])

        assert result.exit_code == 1
        assert "Invalid YAML" in result.output


class TestHandlersCommand:
    """Tests for the handlers command."""

    def test_lists_routes(self, runner: CliRunner, config_file: Path):
        result = runner.invoke(cli, ["handlers"])

        assert result.exit_code == 0, result.output
        assert "local" in result.output
        assert "tumblr" in result.output


class TestConfigCommands:
    """Tests for the config command group."""

    def test_init_and_validate(self, runner: CliRunner, temp_home: Path):
        result = runner.invoke(cli, ["config", "init"])
        assert result.exit_code == 0
        assert (temp_home / ".config" / "mirrorsync" / "config.yaml").exists()

        result = runner.invoke(cli, ["config", "init"])
        assert "already exists" in result.output

        result = runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_path(self, runner: CliRunner, temp_home: Path):
        result = runner.invoke(cli, ["config", "path"])
        assert result.exit_code == 0
        assert "config.yaml" in result.output

    def test_show(self, runner: CliRunner, config_file: Path):
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0
        assert "engineering" in result.output

    def test_show_missing(self, runner: CliRunner, temp_home: Path):
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_validate_invalid(self, runner: CliRunner, temp_home: Path, monkeypatch: pytest.MonkeyPatch):
        config = temp_home / "custom.yaml"
        config.write_text("tumblr:\n  page_size: 0\n", encoding="utf-8")
        monkeypatch.setenv("MIRRORSYNC_CONFIG", str(config))

        result = runner.invoke(cli, ["config", "validate"])

        assert result.exit_code == 1
        assert "page_size" in result.output


class TestSyncCleanup:
    """Tests for releasing handlers after a run."""

    def test_registry_closed(
        self, runner: CliRunner, temp_home: Path, source_tree: Path, temp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ):
        closed = []

        def recording_registry(config):
            registry = build_registry(config)
            monkeypatch.setattr(registry, "close", lambda: closed.append(True))
            return registry

        monkeypatch.setattr("mirrorsync.cli.build_registry", recording_registry)

        result = runner.invoke(cli, ["sync", str(source_tree), str(temp_dir / "dest")])

        assert result.exit_code == 0, result.output
        assert closed == [True]

    def test_registry_closed_on_invalid_source(
        self, runner: CliRunner, temp_home: Path, temp_dir: Path, monkeypatch: pytest.MonkeyPatch
    ):
        closed = []

        def recording_registry(config):
            registry = build_registry(config)
            monkeypatch.setattr(registry, "close", lambda: closed.append(True))
            return registry

        monkeypatch.setattr("mirrorsync.cli.build_registry", recording_registry)

        result = runner.invoke(cli, ["sync", "http://[::1", str(temp_dir / "dest")])

        assert result.exit_code == 2
        assert closed == [True]
