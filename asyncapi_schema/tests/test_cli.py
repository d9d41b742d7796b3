import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from asyncapi_schema.cli import asyncapi_schema

TEST_DATA = Path(__file__).parent / "test_data"
STREETLIGHTS = str(TEST_DATA / "streetlights.json")


@pytest.fixture
def runner():
    return CliRunner()


def write_json(path, data):
    path.write_text(json.dumps(data))
    return str(path)


class TestRoundtripCommand:
    def test_document_passes_check(self, runner):
        result = runner.invoke(asyncapi_schema, ["roundtrip", "--check", STREETLIGHTS])
        assert result.exit_code == 0, result.output
        out = json.loads(result.output)
        with open(STREETLIGHTS) as f:
            assert out["components"]["schemas"] == json.load(f)["components"]["schemas"]

    def test_single_schema_to_file(self, runner, tmp_path):
        source = write_json(tmp_path / "payload.json", {"type": "string", "format": "custom-unknown"})
        output = tmp_path / "out.json"
        result = runner.invoke(asyncapi_schema, ["roundtrip", source, str(output)])
        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text()) == {"type": "string", "format": "custom-unknown"}

    def test_check_reports_mismatch(self, runner, tmp_path):
        source = write_json(tmp_path / "lossy.json", {"type": "string", "minimum": 3})
        result = runner.invoke(asyncapi_schema, ["roundtrip", "--check", source])
        assert result.exit_code == 1
        assert "Round-trip mismatch for 'lossy.json'" in result.output

    def test_parse_error(self, runner, tmp_path):
        source = write_json(tmp_path / "bad.json", {"type": "integer", "minimum": "x"})
        result = runner.invoke(asyncapi_schema, ["roundtrip", source])
        assert result.exit_code == 1
        assert "#/minimum" in result.output

    @pytest.mark.parametrize("components", [[], "", 0])
    def test_malformed_components_section(self, runner, tmp_path, components):
        source = write_json(tmp_path / "doc.json", {"components": components})
        result = runner.invoke(asyncapi_schema, ["roundtrip", source])
        assert result.exit_code == 1
        assert not isinstance(result.exception, AttributeError)
        assert "Error: #/components: expected an object" in result.output

    def test_invalid_json(self, runner, tmp_path):
        source = tmp_path / "broken.json"
        source.write_text("{")
        result = runner.invoke(asyncapi_schema, ["roundtrip", str(source)])
        assert result.exit_code == 1
        assert "invalid JSON" in result.output

    def test_strict_flag(self, runner, tmp_path):
        source = write_json(tmp_path / "extra.json", {"type": "string", "minimum": 3})
        result = runner.invoke(asyncapi_schema, ["--strict", "roundtrip", source])
        assert result.exit_code == 1
        assert "unexpected keys: minimum" in result.output

    def test_config_file(self, runner, tmp_path):
        config = write_json(tmp_path / "config.json", {"strict": True, "indent": 4})
        source = write_json(tmp_path / "extra.json", {"type": "string", "minimum": 3})
        result = runner.invoke(asyncapi_schema, ["--config", config, "roundtrip", source])
        assert result.exit_code == 1

        source = write_json(tmp_path / "ok.json", {"type": "boolean"})
        result = runner.invoke(asyncapi_schema, ["--config", config, "roundtrip", source])
        assert result.exit_code == 0
        assert result.output == '{\n    "type": "boolean"\n}\n'


class TestJsonSchemaCommand:
    def test_document(self, runner, tmp_path):
        output = tmp_path / "out.json"
        result = runner.invoke(asyncapi_schema, ["json-schema", STREETLIGHTS, str(output)])
        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text())
        assert data["$defs"]["streetlightRef"] == {"$ref": "#/$defs/lightMeasuredPayload"}

    def test_single_schema_with_prefix(self, runner, tmp_path):
        source = write_json(tmp_path / "payload.json", {"type": "array", "items": {"$ref": "#/components/schemas/Item"}})
        output = tmp_path / "out.json"
        result = runner.invoke(asyncapi_schema, ["json-schema", "--ref-prefix", "#/definitions/", source, str(output)])
        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text()) == {
            "$schema": "https://json-schema.org/draft/2020-12/schema",
            "type": "array",
            "items": {"$ref": "#/definitions/Item"},
        }


class TestDocsCommand:
    def test_docs(self, runner, tmp_path):
        output = tmp_path / "api.md"
        result = runner.invoke(asyncapi_schema, ["docs", "--title", "Streetlights", STREETLIGHTS, str(output)])
        assert result.exit_code == 0, result.output
        text = output.read_text()
        assert text.startswith("<!-- Generated by asyncapi-schema docs streetlights.json")
        assert "--title Streetlights" in text
        assert "# Streetlights\n" in text
        assert "## sentAt\n" in text
