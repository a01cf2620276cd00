"""Tests for the schemacraft command-line interface."""

import json
import subprocess
import sys
from pathlib import Path

import pytest

from schemacraft.__main__ import EXIT_ERROR, EXIT_INVALID, EXIT_OK, build_parser, main

REPO_ROOT = Path(__file__).resolve().parents[2]

SCHEMA = {
    "type": "object",
    "properties": {
        "email": {"type": "string", "rules": ["required", "email"], "required": True},
        "age": {"type": "integer", "rules": ["integer", "min:18"], "required": False},
        "is_business": {"type": "boolean", "rules": [], "required": False},
        "tax_id": {
            "type": "string",
            "rules": [],
            "required": False,
            "conditionalRules": [
                {"type": "field", "field": "is_business", "value": True, "rules": ["required"]}
            ],
        },
    },
    "required": ["email"],
}


@pytest.fixture
def write_json(tmp_path):
    """Write an object to a JSON file under tmp_path and return its path."""

    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write


# =============================================================================
# validate
# =============================================================================


class TestValidateCommand:
    """Tests for `schemacraft validate`."""

    @pytest.mark.integration
    def test_valid_record(self, write_json, capsys):
        """A valid record exits 0 and prints the result."""
        schema = write_json("schema.json", SCHEMA)
        record = write_json("record.json", {"email": "ada@example.com", "age": 30})
        assert main(["validate", schema, record]) == EXIT_OK
        output = json.loads(capsys.readouterr().out)
        assert output["valid"] is True
        assert output["errors"] == {}

    @pytest.mark.integration
    def test_invalid_record(self, write_json, capsys):
        """An invalid record exits 1 and lists the errors."""
        schema = write_json("schema.json", SCHEMA)
        record = write_json("record.json", {"email": "nope", "is_business": True})
        assert main(["validate", schema, record]) == EXIT_INVALID
        output = json.loads(capsys.readouterr().out)
        assert output["valid"] is False
        assert output["errors"]["email"] == ["The email field must be a valid email address."]
        assert output["errors"]["tax_id"] == ["The tax id field is required."]

    @pytest.mark.integration
    def test_messages_and_attributes(self, write_json, capsys):
        """Custom messages and labels are read from files."""
        schema = write_json("schema.json", SCHEMA)
        record = write_json("record.json", {"email": "ada@example.com", "age": 12})
        messages = write_json("messages.json", {"age.min": "Too young."})
        attributes = write_json("attributes.json", {"email": "e-mail address"})
        code = main(["validate", schema, record, "-m", messages, "-a", attributes])
        assert code == EXIT_INVALID
        output = json.loads(capsys.readouterr().out)
        assert output["errors"] == {"age": ["Too young."]}

    @pytest.mark.integration
    def test_missing_file(self, write_json, tmp_path):
        """Unreadable input exits 2."""
        schema = write_json("schema.json", SCHEMA)
        assert main(["validate", schema, str(tmp_path / "missing.json")]) == EXIT_ERROR

    @pytest.mark.integration
    def test_malformed_json(self, write_json, tmp_path):
        """Malformed JSON exits 2."""
        schema = write_json("schema.json", SCHEMA)
        record = tmp_path / "record.json"
        record.write_text("{not json", encoding="utf-8")
        assert main(["validate", schema, str(record)]) == EXIT_ERROR

    @pytest.mark.integration
    def test_record_must_be_object(self, write_json):
        """A record that is not an object exits 2."""
        schema = write_json("schema.json", SCHEMA)
        record = write_json("record.json", ["email"])
        assert main(["validate", schema, record]) == EXIT_ERROR

    @pytest.mark.integration
    def test_invalid_schema_document(self, write_json):
        """A schema of the wrong shape exits 2."""
        schema = write_json("schema.json", {"type": "array", "properties": {}})
        record = write_json("record.json", {})
        assert main(["validate", schema, record]) == EXIT_ERROR

    @pytest.mark.integration
    def test_unknown_rule(self, write_json):
        """An unknown rule token exits 2 in strict mode."""
        schema = write_json(
            "schema.json", {"properties": {"code": {"type": "string", "rules": ["shouty"]}}}
        )
        record = write_json("record.json", {"code": "abc"})
        assert main(["validate", schema, record]) == EXIT_ERROR

    @pytest.mark.integration
    def test_unknown_rule_lenient(self, write_json, monkeypatch):
        """Unknown rules are skipped when strict mode is off."""
        monkeypatch.setenv("SCHEMACRAFT_STRICT_RULES", "false")
        schema = write_json(
            "schema.json", {"properties": {"code": {"type": "string", "rules": ["shouty"]}}}
        )
        record = write_json("record.json", {"code": "abc"})
        assert main(["validate", schema, record]) == EXIT_OK


# =============================================================================
# compile / env
# =============================================================================


class TestCompileCommand:
    """Tests for `schemacraft compile`."""

    @pytest.mark.integration
    def test_prints_schema_and_rules(self, write_json, capsys):
        """compile prints the normalized document and rule table."""
        schema = write_json("schema.json", SCHEMA)
        assert main(["compile", schema]) == EXIT_OK
        output = json.loads(capsys.readouterr().out)
        assert output["schema"]["required"] == ["email"]
        assert output["rules"]["email"] == ["required", "email"]
        assert output["rules"]["tax_id"] == [{"when": "field", "rules": ["required"]}]

    @pytest.mark.integration
    def test_missing_schema(self, tmp_path):
        """A missing schema exits 2."""
        assert main(["compile", str(tmp_path / "missing.json")]) == EXIT_ERROR


class TestEnvCommand:
    """Tests for `schemacraft env`."""

    @pytest.mark.integration
    def test_lists_variables(self, capsys):
        """env prints every variable with its value."""
        assert main(["env"]) == EXIT_OK
        output = capsys.readouterr().out
        assert "SCHEMACRAFT_LOG_LEVEL=WARNING" in output
        assert "SCHEMACRAFT_STRICT_RULES=True" in output

    @pytest.mark.integration
    def test_category_filter(self, capsys):
        """--category limits the listing."""
        assert main(["env", "--category", "logging"]) == EXIT_OK
        output = capsys.readouterr().out
        assert "SCHEMACRAFT_LOG_LEVEL" in output
        assert "SCHEMACRAFT_STRICT_RULES" not in output

    @pytest.mark.integration
    def test_unknown_category(self):
        """An empty category exits 2."""
        assert main(["env", "--category", "nope"]) == EXIT_ERROR


class TestParser:
    """Tests for argument handling."""

    @pytest.mark.integration
    def test_no_command(self, capsys):
        """Running without a command prints help and exits 2."""
        assert main([]) == EXIT_ERROR
        assert "usage" in capsys.readouterr().out

    @pytest.mark.integration
    def test_parser_defaults(self):
        """validate defaults to an indent of 2 and no extras."""
        args = build_parser().parse_args(["validate", "s.json", "r.json"])
        assert args.indent == 2
        assert args.messages is None
        assert args.attributes is None

    @pytest.mark.integration
    def test_module_entry_point(self):
        """python -m schemacraft runs and exits cleanly."""
        result = subprocess.run(
            [sys.executable, "-m", "schemacraft", "env", "-c", "validation"],
            capture_output=True,
            text=True,
            cwd=REPO_ROOT,
            timeout=30,
        )
        assert result.returncode == 0
        assert "SCHEMACRAFT_STOP_ON_FIRST_FAILURE" in result.stdout
