"""
Unit tests for the schemalog CLI interface.
"""

import logging

import pytest
import yaml
from click.testing import CliRunner

from schemalog.cli import handle_errors, main
from schemalog.config import SchemalogConfig
from schemalog.exceptions import ConfigurationError


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers bound to the runner's streams after each command."""
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()


class TestCLIMain:
    """Test main CLI functionality."""

    def test_cli_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "generate changelog changes from a schema diff" in result.output

    def test_cli_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_package_metadata(self):
        """Only the collective author is declared."""
        import schemalog

        assert schemalog.__author__ == "schemalog Contributors"
        assert not hasattr(schemalog, "__email__")


class TestGenerateCommand:
    """Test the generate command."""

    def test_generate_to_stdout(self, runner, diff_file):
        """Changes are written to stdout as a YAML changelog."""
        result = runner.invoke(main, ["generate", "--diff", diff_file])

        assert result.exit_code == 0
        document = yaml.safe_load(result.stdout)
        change_types = [next(iter(entry)) for entry in document["changes"]]
        assert change_types == [
            "dropTable",
            "createTable",
            "modifyDataType",
            "createIndex",
            "createIndex",
            "addForeignKeyConstraint",
        ]

        fk = document["changes"][5]["addForeignKeyConstraint"]
        assert fk["referenced_table_catalog_name"] == "analytics"
        assert fk["on_delete"] == "cascade"
        assert "base_table_schema_name" not in fk

    def test_generate_to_file(self, runner, diff_file, tmp_path):
        output = tmp_path / "changes.yaml"
        result = runner.invoke(
            main, ["generate", "-d", diff_file, "-o", str(output), "--include-schema"]
        )

        assert result.exit_code == 0
        assert "Wrote 6 changes" in result.output
        document = yaml.safe_load(output.read_text(encoding="utf-8"))
        create_table = document["changes"][1]["createTable"]
        assert create_table["schema_name"] == "public"
        assert create_table["columns"][0] == {
            "name": "id",
            "type": "bigint",
            "nullable": False,
            "primary_key": True,
        }

    def test_generate_with_config(self, runner, diff_file, config_file):
        """Configuration output flags apply to every change."""
        result = runner.invoke(main, ["generate", "-d", diff_file, "-c", config_file])

        assert result.exit_code == 0
        document = yaml.safe_load(result.stdout)
        drop_table = document["changes"][0]["dropTable"]
        assert drop_table["schema_name"] == "public"

    def test_generate_with_bad_diff(self, runner, tmp_path):
        path = tmp_path / "diff.yaml"
        path.write_text(
            "diff:\n  missing:\n    - {kind: table, table: ghosts}\n", encoding="utf-8"
        )
        result = runner.invoke(main, ["generate", "-d", str(path)])

        assert result.exit_code == 1
        assert "Unknown table 'ghosts'" in result.output

    def test_generate_requires_diff(self, runner):
        result = runner.invoke(main, ["generate"])
        assert result.exit_code != 0


class TestInfoCommands:
    """Test order and dialects commands."""

    def test_order(self, runner):
        result = runner.invoke(main, ["order", "--dialect", "postgresql"])
        assert result.exit_code == 0
        assert "missing" in result.output
        assert "foreign_key" in result.output

    def test_order_unknown_dialect(self, runner):
        result = runner.invoke(main, ["order", "--dialect", "db2"])
        assert result.exit_code == 1
        assert "Unknown dialect" in result.output

    def test_dialects(self, runner):
        result = runner.invoke(main, ["dialects"])
        assert result.exit_code == 0
        for dialect in ("generic", "mysql", "postgresql", "sqlite"):
            assert dialect in result.output

    def test_dialects_reports_failures(self, runner, monkeypatch):
        """Rendering failures exit with one instead of a traceback."""
        def broken_table(*args, **kwargs):
            raise RuntimeError("no terminal")

        monkeypatch.setattr("schemalog.cli.Table", broken_table)
        result = runner.invoke(main, ["dialects"])

        assert result.exit_code == 1
        assert "Unexpected error" in result.output
        assert "no terminal" in result.output


class TestConfigCommands:
    """Test init and validate-config."""

    def test_init(self, runner, tmp_path):
        output = tmp_path / "schemalog.yaml"
        result = runner.invoke(main, ["init", "-o", str(output), "--dialect", "mysql"])

        assert result.exit_code == 0
        config = SchemalogConfig.from_yaml(output)
        assert config.reference.dialect == "mysql"
        assert config.comparison.dialect == "mysql"

    def test_init_unknown_dialect(self, runner, tmp_path):
        output = tmp_path / "schemalog.yaml"
        result = runner.invoke(main, ["init", "-o", str(output), "--dialect", "db2"])
        assert result.exit_code == 1
        assert not output.exists()

    def test_validate_config(self, runner, config_file):
        result = runner.invoke(main, ["validate-config", "-c", config_file])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_validate_config_invalid(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("reference:\n  dialect: db2\n", encoding="utf-8")
        result = runner.invoke(main, ["validate-config", "-c", str(path)])
        assert result.exit_code == 1
        assert "Configuration error" in result.output


class TestErrorHandling:
    """Test the error handling decorator."""

    def test_schemalog_error_exits_with_one(self):
        @handle_errors
        def failing():
            raise ConfigurationError("bad config")

        with pytest.raises(SystemExit) as exc_info:
            failing()
        assert exc_info.value.code == 1

    def test_unexpected_error_exits_with_one(self):
        @handle_errors
        def failing():
            raise RuntimeError("boom")

        with pytest.raises(SystemExit) as exc_info:
            failing()
        assert exc_info.value.code == 1
