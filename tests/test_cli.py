import json
from pathlib import Path
from unittest.mock import patch

import httpx
import yaml
from click.testing import CliRunner

from curl_data_gen.cli import main
from curl_data_gen.parser.curl import parse_curl
from curl_data_gen.replay import ReplayClient

FIXTURES = Path(__file__).parent / "fixtures"
COMMAND = (FIXTURES / "create_contact.sh").read_text()


class TestCliParse:
    def test_parse_argument(self):
        runner = CliRunner()
        result = runner.invoke(main, ["parse", "curl -X PUT https://api.test/x -d '{\"a\":\"1\"}'"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["method"] == "PUT"
        assert data["body"] == {"a": 1}

    def test_parse_from_file(self):
        runner = CliRunner()
        result = runner.invoke(main, ["parse", "-f", str(FIXTURES / "create_contact.sh")])
        assert result.exit_code == 0
        assert json.loads(result.output)["url"] == "https://api.example.com/v1/contacts"

    def test_parse_from_stdin(self):
        runner = CliRunner()
        result = runner.invoke(main, ["parse"], input="curl https://api.test/ping")
        assert result.exit_code == 0
        assert json.loads(result.output)["method"] == "GET"

    def test_missing_url_fails(self):
        runner = CliRunner()
        result = runner.invoke(main, ["parse", "curl -X POST -d '{}'"])
        assert result.exit_code == 1
        assert "URL not found in CURL command" in result.output


class TestCliSchema:
    def test_schema_lines(self):
        runner = CliRunner()
        result = runner.invoke(main, ["schema", "-f", str(FIXTURES / "create_contact.sh")])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert "quantity\tnumber\tnumber\t3" in lines
        assert "firstName\tstring\tfirstName\t\"Ann\"" in lines
        assert "relations.0.recordId\tstring\tid\t\"r1\"" in lines


class TestCliGenerate:
    def test_defaults_reproduce_body(self, tmp_path):
        output = tmp_path / "entries.json"
        runner = CliRunner()
        result = runner.invoke(main, ["generate", "-f", str(FIXTURES / "create_contact.sh"), "-n", "3", "-o", str(output)])
        assert result.exit_code == 0, result.output
        entries = json.loads(output.read_text())
        assert entries == [parse_curl(COMMAND).body] * 3

    def test_static_and_random_overrides(self, tmp_path):
        output = tmp_path / "entries.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", COMMAND, "-n", "5", "-o", str(output),
            "--static", "quantity=7", "--random", "email", "--seed", "3",
        ])
        assert result.exit_code == 0, result.output
        entries = json.loads(output.read_text())
        assert [e["quantity"] for e in entries] == [7] * 5
        assert all("@" in e["email"] for e in entries)
        assert len({e["email"] for e in entries}) > 1

    def test_fields_file(self, tmp_path):
        output = tmp_path / "entries.yaml"
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", COMMAND, "-n", "2", "--format", "yaml", "-o", str(output),
            "--fields", str(FIXTURES / "fields.yaml"),
        ])
        assert result.exit_code == 0, result.output
        entries = yaml.safe_load(output.read_text())
        assert [e["quantity"] for e in entries] == [42, 42]
        assert [e["isActive"] for e in entries] == [False, False]

    def test_seed_is_reproducible(self, tmp_path):
        runner = CliRunner()
        outputs = []
        for name in ("a.json", "b.json"):
            output = tmp_path / name
            result = runner.invoke(main, ["generate", COMMAND, "--all-random", "--seed", "9", "-o", str(output)])
            assert result.exit_code == 0, result.output
            outputs.append(output.read_text())
        assert outputs[0] == outputs[1]

    def test_csv_format(self, tmp_path):
        output = tmp_path / "entries.csv"
        runner = CliRunner()
        result = runner.invoke(main, ["generate", COMMAND, "-n", "2", "--format", "csv", "-o", str(output)])
        assert result.exit_code == 0, result.output
        lines = output.read_text().splitlines()
        assert len(lines) == 3
        assert lines[0].startswith('"firstName","email","quantity"')

    def test_bad_fields_file(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("- nope\n")
        runner = CliRunner()
        result = runner.invoke(main, ["generate", COMMAND, "--fields", str(bad)])
        assert result.exit_code == 2

    def test_bad_override(self):
        runner = CliRunner()
        result = runner.invoke(main, ["generate", COMMAND, "--static", "quantity"])
        assert result.exit_code == 2

    def test_parse_error_blocks_generation(self, tmp_path):
        output = tmp_path / "entries.json"
        runner = CliRunner()
        result = runner.invoke(main, ["generate", "curl -d '{}'", "-o", str(output)])
        assert result.exit_code == 1
        assert not output.exists()

    @patch("curl_data_gen.cli.ReplayClient")
    def test_replay_writes_outcomes(self, MockClient, tmp_path):
        transport = httpx.MockTransport(lambda request: httpx.Response(201, json={"ok": True}))
        MockClient.side_effect = lambda timeout=None: ReplayClient(timeout=timeout, transport=transport)

        output = tmp_path / "entries.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", COMMAND, "-n", "3", "-o", str(output),
            "--replay", "--expected-status", "201", "--strategy", "concurrent",
        ])
        assert result.exit_code == 0, result.output
        assert "matched 3/3" in result.output
        outcomes = json.loads((tmp_path / "entries.replay.json").read_text())
        assert [o["http_status"] for o in outcomes] == [201, 201, 201]
