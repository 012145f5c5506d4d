import csv
import io
import json

import yaml

from curl_data_gen.export import outcomes_to_json, render, to_csv, to_json, to_yaml, write_output
from curl_data_gen.parser.base import ReplayOutcome

ENTRIES = [
    {"name": "Ann", "age": 30, "tags": ["a"], "ok": True, "note": None},
    {"name": 'Bo "B"', "extra": {"k": 1}},
]


class TestJson:
    def test_pretty_printed(self):
        text = to_json([{"a": 1}])
        assert text == '[\n  {\n    "a": 1\n  }\n]'

    def test_unicode_kept(self):
        assert "Zoë" in to_json([{"name": "Zoë"}])


class TestCsv:
    def test_header_is_union_of_keys(self):
        text = to_csv(ENTRIES)
        assert text.splitlines()[0] == '"name","age","tags","ok","note","extra"'

    def test_cells(self):
        rows = list(csv.reader(io.StringIO(to_csv(ENTRIES))))
        assert rows[1] == ["Ann", "30", '["a"]', "true", "", ""]
        assert rows[2] == ['Bo "B"', "", "", "", "", '{"k": 1}']

    def test_nested_values_quoted(self):
        line = to_csv([{"tags": ["a"]}]).splitlines()[1]
        assert line == '"[""a""]"'

    def test_empty(self):
        assert to_csv([]) == ""


class TestYaml:
    def test_key_order_preserved(self):
        text = to_yaml([{"zeta": 1, "alpha": 2}])
        assert text.index("zeta") < text.index("alpha")
        assert yaml.safe_load(text) == [{"zeta": 1, "alpha": 2}]


class TestRender:
    def test_dispatch(self):
        assert render(ENTRIES, "json") == to_json(ENTRIES)
        assert render(ENTRIES, "csv") == to_csv(ENTRIES)

    def test_outcomes(self):
        outcomes = [ReplayOutcome(http_status=0, matched_expected=False, error="refused")]
        assert json.loads(outcomes_to_json(outcomes)) == [
            {"http_status": 0, "matched_expected": False, "response_body": None, "error": "refused"},
        ]

    def test_write_output_creates_parents(self, tmp_path):
        path = tmp_path / "out" / "entries.json"
        write_output("[]", path)
        assert path.read_text() == "[]"
