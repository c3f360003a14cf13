"""Tests for the CLI main module."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from mjml_import.cli.main import (
    create_argument_parser,
    format_validation,
    import_paths,
    load_config,
    main,
)
from mjml_import.api import MarkupImporter
from mjml_import.shared.config import STRICT_MAX_INPUT_LENGTH, ImportConfig

VALID_DOCUMENT = (
    '<mjml><mj-body><mj-section background-color="#fff">'
    "<mj-column><mj-text>Hi<br>there</mj-text></mj-column>"
    "</mj-section></mj-body></mjml>"
)


@pytest.fixture
def valid_file(tmp_path: Path) -> Path:
    path = tmp_path / "valid.mjml"
    path.write_text(VALID_DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def broken_file(tmp_path: Path) -> Path:
    path = tmp_path / "broken.mjml"
    path.write_text("<mjml><mj-body></mjml>", encoding="utf-8")
    return path


class TestArgumentParser:
    """Test argument parsing."""

    def test_import_arguments(self):
        """Test import command options."""
        args = create_argument_parser().parse_args(
            ["import", "a.mjml", "b.mjml", "-o", "out.json", "--indent", "4", "--strict"]
        )

        assert args.command == "import"
        assert args.paths == [Path("a.mjml"), Path("b.mjml")]
        assert args.output == Path("out.json")
        assert args.indent == 4
        assert args.strict is True

    def test_validate_defaults(self):
        """Test validate command defaults to text output."""
        args = create_argument_parser().parse_args(["validate", "a.mjml"])

        assert args.format == "text"
        assert args.config is None

    def test_version(self, capsys):
        """Test --version prints the package version."""
        with pytest.raises(SystemExit) as exc_info:
            create_argument_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out


class TestLoadConfig:
    """Test configuration loading for commands."""

    def test_defaults(self):
        """Test no file and no flag gives the default configuration."""
        assert load_config(None) == ImportConfig()

    def test_strict(self):
        """Test the strict flag bounds input size."""
        assert load_config(None, strict=True).max_input_length == STRICT_MAX_INPUT_LENGTH

    def test_file_with_strict(self, tmp_path: Path):
        """Test the strict flag fills in a missing size limit from a file."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"wrap_plain_text": False}), encoding="utf-8")

        config = load_config(path, strict=True)

        assert config.wrap_plain_text is False
        assert config.max_input_length == STRICT_MAX_INPUT_LENGTH


class TestImportPaths:
    """Test per-file record collection."""

    def test_records(self, valid_file: Path, broken_file: Path, tmp_path: Path):
        """Test each file yields a record, unreadable ones included."""
        records = import_paths(
            MarkupImporter(), [valid_file, broken_file, tmp_path / "missing.mjml"]
        )

        assert [record["success"] for record in records] == [True, False, False]
        assert records[0]["block"]["type"] == "mjml"
        assert records[1]["error"]["kind"] == "syntax"
        assert records[2]["error"]["kind"] == "io"


class TestFormatValidation:
    """Test validation report formatting."""

    RECORDS = [
        {"file": "a.mjml", "success": True, "repair_count": 2},
        {"file": "b.mjml", "success": False, "repair_count": 0,
         "error": {"kind": "structure", "detail": "root element must be the document wrapper"}},
    ]

    def test_text(self):
        """Test the text report lists each file."""
        output = format_validation(self.RECORDS, "text")

        assert output.startswith("Validated 2 files, 1 valid")
        assert "✓ a.mjml (2 repairs)" in output
        assert "✗ b.mjml (0 repairs)" in output
        assert "structure error: root element must be the document wrapper" in output

    def test_json(self):
        """Test the JSON report."""
        data = json.loads(format_validation(self.RECORDS, "json"))

        assert data[0] == {"file": "a.mjml", "valid": True, "repair_count": 2, "error": None}
        assert data[1]["error"]["kind"] == "structure"


class TestMain:
    """Test the CLI entry point."""

    def test_no_command(self, capsys):
        """Test running without a command prints help and fails."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_import_single_file(self, valid_file: Path, capsys):
        """Test importing one file prints its Block tree."""
        assert main(["import", str(valid_file)]) == 0

        block = json.loads(capsys.readouterr().out)
        assert block["type"] == "mjml"
        section = block["children"][0]["children"][0]
        assert section["attributes"] == {"backgroundColor": "#fff"}
        assert section["children"][0]["children"][0]["content"] == "<p>Hi<br/>there</p>"

    def test_import_with_failure(self, valid_file: Path, broken_file: Path, capsys):
        """Test a failing file sets the exit code and reports on stderr."""
        assert main(["import", str(valid_file), str(broken_file)]) == 1

        captured = capsys.readouterr()
        records = json.loads(captured.out)
        assert len(records) == 2
        assert "syntax error" in captured.err

    def test_import_to_file(self, valid_file: Path, tmp_path: Path):
        """Test import output can be written to a file."""
        output = tmp_path / "out.json"

        assert main(["import", str(valid_file), "-o", str(output)]) == 0
        assert json.loads(output.read_text(encoding="utf-8"))["type"] == "mjml"

    def test_preprocess(self, valid_file: Path, capsys):
        """Test preprocess prints the repaired markup."""
        assert main(["preprocess", str(valid_file)]) == 0

        captured = capsys.readouterr()
        assert "Hi<br/>there" in captured.out
        assert "Applied 1 repairs" in captured.err

    def test_preprocess_missing_file(self, tmp_path: Path, capsys):
        """Test preprocess reports unreadable files."""
        assert main(["preprocess", str(tmp_path / "missing.mjml")]) == 1
        assert "Could not read" in capsys.readouterr().err

    def test_validate(self, valid_file: Path, broken_file: Path, capsys):
        """Test validate reports each file and fails on any invalid one."""
        assert main(["validate", str(valid_file), str(broken_file)]) == 1

        output = capsys.readouterr().out
        assert "Validated 2 files, 1 valid" in output

    def test_validate_json(self, valid_file: Path, capsys):
        """Test validate JSON output."""
        assert main(["validate", str(valid_file), "--format", "json"]) == 0

        assert json.loads(capsys.readouterr().out)[0]["valid"] is True

    def test_invalid_config(self, valid_file: Path, tmp_path: Path, capsys):
        """Test a broken configuration file fails cleanly."""
        config_path = tmp_path / "config.json"
        config_path.write_text("{not json", encoding="utf-8")

        assert main(["import", str(valid_file), "-c", str(config_path)]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_keyboard_interrupt(self, valid_file: Path, capsys):
        """Test interruption exits with the SIGINT status."""
        with patch("mjml_import.cli.main.cmd_import", side_effect=KeyboardInterrupt):
            assert main(["import", str(valid_file)]) == 130
