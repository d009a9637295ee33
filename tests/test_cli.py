import json
from pathlib import Path

from click.testing import CliRunner

from swagger2_validate.cli import main

FIXTURES = Path(__file__).parent / "fixtures"
PETSTORE = str(FIXTURES / "petstore.yaml")


def _run(*args: str):
    return CliRunner().invoke(main, list(args))


class TestCliCheck:
    def test_valid_document(self):
        result = _run("check", PETSTORE)
        assert result.exit_code == 0
        assert "OK" in result.output

    def test_invalid_document(self, tmp_path):
        doc = tmp_path / "bad.yaml"
        doc.write_text('swagger: "2.0"\n')
        result = _run("check", str(doc))
        assert result.exit_code == 1
        assert "OK" not in result.output

    def test_unparseable_document(self, tmp_path):
        doc = tmp_path / "list.yaml"
        doc.write_text("- a\n- b\n")
        result = _run("check", str(doc))
        assert result.exit_code == 1
        assert "not a mapping" in result.output


class TestCliRoutes:
    def test_lists_templates_with_methods(self):
        result = _run("routes", PETSTORE)
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "/v1/pets\tGET PUT POST",
            "/v1/pets/{petId}\tGET",
        ]


class TestCliRequest:
    def test_valid_request(self):
        result = _run("request", PETSTORE, "get", "/v1/pets", "-q", "limit=5")
        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_invalid_request(self):
        result = _run("request", PETSTORE, "get", "/v1/pets", "-q", "limit=hello")
        assert result.exit_code == 1
        errors = json.loads(result.output)
        assert len(errors) == 1
        assert errors[0]["where"] == "query"
        assert errors[0]["name"] == "limit"
        assert errors[0]["expected"] == {"type": "integer", "format": "int32"}

    def test_repeated_query_becomes_array(self):
        result = _run(
            "request", PETSTORE, "get", "/v1/pets/123",
            "-q", "String=a", "-q", "String=b", "-H", "If-Match=xyz",
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_json_body(self):
        result = _run("request", PETSTORE, "put", "/v1/pets", "--body", '[{"id": 1, "name": "rex"}]')
        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_unknown_path(self):
        result = _run("request", PETSTORE, "get", "/v1/nope")
        assert result.exit_code == 2
        assert "404" in result.output

    def test_undeclared_method(self):
        result = _run("request", PETSTORE, "delete", "/v1/pets")
        assert result.exit_code == 2
        assert "405" in result.output

    def test_malformed_body(self):
        result = _run("request", PETSTORE, "put", "/v1/pets", "--body", "{not json")
        assert result.exit_code == 2

    def test_malformed_query(self):
        result = _run("request", PETSTORE, "get", "/v1/pets", "-q", "limit")
        assert result.exit_code == 2


class TestCliResponse:
    def test_valid_response(self):
        result = _run("response", PETSTORE, "get", "/v1/pets", "200", "--body", "[]")
        assert result.exit_code == 0
        assert "OK" in result.output

    def test_invalid_response(self):
        result = _run("response", PETSTORE, "get", "/v1/pets", "200", "--body", "{}")
        assert result.exit_code == 1
        error = json.loads(result.output)
        assert error["actual"] == {}
        assert "is not of type 'array'" in error["error"]

    def test_unknown_path(self):
        result = _run("response", PETSTORE, "get", "/v1/nope", "200")
        assert result.exit_code == 1
        assert json.loads(result.output) == {"actual": "UNDEFINED_PATH", "expected": "PATH"}

    def test_format_checks_can_be_disabled(self):
        result = _run("--no-check-formats", "response", PETSTORE, "post", "/v1/pets", "201")
        assert result.exit_code == 0
