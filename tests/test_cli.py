"""Tests for CLI commands."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from better_debug.cli.main import app

runner = CliRunner()


class TestCLIHelp:
    """Tests for CLI help commands."""

    def test_help(self):
        """Test --help displays correctly."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "debug views" in result.stdout

    def test_check_help(self):
        result = runner.invoke(app, ["check", "--help"])
        assert result.exit_code == 0
        assert "schema" in result.stdout.lower()


class TestCLIVersion:
    """Tests for version command."""

    def test_version(self):
        from better_debug import __version__

        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "better-debug" in result.stdout
        assert __version__ in result.stdout


class TestCLICheck:
    """Tests for check command."""

    def test_check_valid_schema(self, schema_file):
        result = runner.invoke(app, ["check", str(schema_file)])
        assert result.exit_code == 0
        assert "Record Credentials" in result.stdout
        assert "Pwd" in result.stdout
        assert "2 record(s) valid" in result.stdout

    def test_check_json(self, schema_file):
        result = runner.invoke(app, ["check", str(schema_file), "--json"])
        assert result.exit_code == 0

        plans = json.loads(result.stdout)
        credentials = plans[0]
        assert credentials["type_name"] == "Credentials"
        assert [e["action"] for e in credentials["entries"]] == ["default", "redact", "omit"]
        assert credentials["redaction_marker"] == "<SECRET>"

    def test_check_invalid_schema(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(
            """\
records:
  Broken:
    fields:
      - name: a
        exclude: true
        rename_to: b
"""
        )
        result = runner.invoke(app, ["check", str(path)])
        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_check_missing_file(self, tmp_path):
        result = runner.invoke(app, ["check", str(tmp_path / "missing.yaml"), "--json"])
        assert result.exit_code == 1
        assert "error" in json.loads(result.stdout)


class TestCLIRender:
    """Tests for render command."""

    def test_render_record(self, schema_file):
        result = runner.invoke(
            app,
            [
                "render",
                str(schema_file),
                "Credentials",
                "--set",
                "username=alice",
                "-s",
                "password=x",
            ],
        )
        assert result.exit_code == 0
        assert result.stdout.strip() == "Credentials { username: 'alice', Pwd: <SECRET> }"

    def test_render_parses_scalars(self, schema_file):
        args = ["render", str(schema_file), "Credentials", "-s", "username=42"]
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert "username: 42," in result.stdout

    def test_render_unknown_record(self, schema_file):
        result = runner.invoke(app, ["render", str(schema_file), "Nope"])
        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_render_unknown_field(self, schema_file):
        result = runner.invoke(app, ["render", str(schema_file), "Credentials", "-s", "bogus=1"])
        assert result.exit_code == 1

    def test_render_bad_assignment(self, schema_file):
        result = runner.invoke(app, ["render", str(schema_file), "Credentials", "-s", "novalue"])
        assert result.exit_code == 1
        assert "field=value" in result.stdout


class TestCLIFormatters:
    """Tests for formatters command."""

    def test_no_formatters(self):
        result = runner.invoke(app, ["formatters"])
        assert result.exit_code == 0
        assert "No named formatters" in result.stdout

    def test_lists_registered(self):
        from better_debug.registry.formatter_registry import get_formatter_registry

        get_formatter_registry().register_formatter("mask", lambda r: "***")
        result = runner.invoke(app, ["formatters"])
        assert result.exit_code == 0
        assert "mask" in result.stdout


class TestCLIConfig:
    """Tests for config command."""

    def test_config_show_no_file(self):
        result = runner.invoke(app, ["config", "--show"])
        assert result.exit_code == 0
        assert "No configuration file found" in result.stdout
        assert "redaction_marker: <SECRET>" in result.stdout

    def test_config_init_then_show(self, tmp_path):
        result = runner.invoke(app, ["config", "--init"])
        assert result.exit_code == 0
        assert (tmp_path / ".config" / "better-debug" / "config.yaml").exists()

        result = runner.invoke(app, ["config", "--show"])
        assert result.exit_code == 0
        assert "value_style: repr" in result.stdout

    def test_config_usage(self):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Usage" in result.stdout
