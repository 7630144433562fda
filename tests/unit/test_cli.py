"""Unit tests for the command-line interface."""

from typer.testing import CliRunner

from nsbackfill import __version__
from nsbackfill.cli import app
from nsbackfill.core.config import get_config
from nsbackfill.services.discovery.service import parse_namespace

runner = CliRunner()


def plugin_build_file(flutter_project):
    return flutter_project.parent.parent / "pub_cache" / "legacy_plugin" / "android" / "build.gradle"


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_scan(flutter_project):
    result = runner.invoke(app, ["scan", str(flutter_project)])
    assert result.exit_code == 0
    assert ":legacy_plugin" in result.output
    assert "com.example.legacy" in result.output


def test_backfill_dry_run_leaves_build_file(flutter_project):
    build_file = plugin_build_file(flutter_project)
    before = build_file.read_text(encoding="utf-8")

    result = runner.invoke(app, ["backfill", str(flutter_project)])

    assert result.exit_code == 0
    assert "backfilled" in result.output
    assert build_file.read_text(encoding="utf-8") == before


def test_backfill_write(flutter_project):
    result = runner.invoke(app, ["backfill", str(flutter_project), "--write"])

    assert result.exit_code == 0
    text = plugin_build_file(flutter_project).read_text(encoding="utf-8")
    assert parse_namespace(text) == "com.example.legacy"


def test_backfill_fails_without_settings(temp_dir):
    result = runner.invoke(app, ["backfill", str(temp_dir)])
    assert result.exit_code == 1
    assert "settings.gradle" in result.output


def test_backfill_fails_on_unreadable_manifest(flutter_project):
    manifest = (
        flutter_project.parent.parent / "pub_cache" / "legacy_plugin" / "android"
        / "src" / "main" / "AndroidManifest.xml"
    )
    manifest.write_bytes(b'<manifest package="\xff\xfe"/>')

    result = runner.invoke(app, ["backfill", str(flutter_project)])
    assert result.exit_code == 1
    assert "Backfill failed" in result.output


def test_config():
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "NSB_LOG_LEVEL" in result.output


def test_backfill_fails_on_malformed_flutter_plugins(flutter_project):
    (flutter_project.parent / ".flutter-plugins-dependencies").write_text("{not json", encoding="utf-8")

    result = runner.invoke(app, ["backfill", str(flutter_project)])
    assert result.exit_code == 1
    assert "Backfill failed" in result.output
    assert not isinstance(result.exception, ValueError)


def test_backfill_fails_on_non_utf8_build_file(flutter_project):
    plugin_build_file(flutter_project).write_bytes(b"apply plugin: '\xff\xfe'\n")

    result = runner.invoke(app, ["backfill", str(flutter_project)])
    assert result.exit_code == 1
    assert "Backfill failed" in result.output


def test_scan_fails_on_malformed_flutter_plugins(flutter_project):
    (flutter_project.parent / ".flutter-plugins-dependencies").write_text("{not json", encoding="utf-8")

    result = runner.invoke(app, ["scan", str(flutter_project)])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_verbose_does_not_change_cached_config(flutter_project):
    before = get_config().log_level

    result = runner.invoke(app, ["backfill", str(flutter_project), "--verbose"])
    assert result.exit_code == 0
    assert get_config().log_level == before
