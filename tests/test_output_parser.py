import json

import pytest

from discovery.output_parser import MATCHERS, parse_status_output


class TestJsonOutput:
    @pytest.mark.parametrize("port", [5273, 55329, 8080])
    def test_port_and_running_status(self, port):
        result = parse_status_output(json.dumps({"port": port, "status": "running"}))
        assert result.endpoint == f"http://127.0.0.1:{port}"
        assert result.port == port
        assert result.is_running is True

    def test_boolean_running_flag(self):
        result = parse_status_output('{"port": 5000, "running": true}')
        assert result.is_running is True

    def test_port_without_running_status(self):
        result = parse_status_output('{"port": 5000, "status": "stopped"}')
        assert result.endpoint == "http://127.0.0.1:5000"
        assert result.is_running is False

    def test_url_used_verbatim(self):
        result = parse_status_output('{"url": "http://localhost:6000/openai"}')
        assert result.endpoint == "http://localhost:6000/openai"
        assert result.port is None
        assert result.is_running is True

    def test_port_wins_over_url(self):
        result = parse_status_output('{"port": 5000, "url": "http://localhost:6000", "status": "running"}')
        assert result.endpoint == "http://127.0.0.1:5000"

    def test_unrelated_schema_does_not_crash(self):
        result = parse_status_output('{"version": "1.2", "models": []}')
        assert result.endpoint is None
        assert result.is_running is False

    def test_json_array_falls_through(self):
        result = parse_status_output('["http://127.0.0.1:7000"]')
        assert result.endpoint == "http://127.0.0.1:7000"


class TestTextOutput:
    def test_full_url_with_path(self):
        text = "Model management service is running on http://127.0.0.1:55329/openai/status\n"
        result = parse_status_output(text)
        assert result.endpoint == "http://127.0.0.1:55329/openai/status"
        assert result.port == 55329
        assert result.is_running is True

    def test_full_url_without_path(self):
        result = parse_status_output("listening at https://localhost:5273 now")
        assert result.endpoint == "https://localhost:5273"
        assert result.port == 5273

    def test_trailing_punctuation_dropped(self):
        result = parse_status_output("Service running on http://127.0.0.1:5273/v1.")
        assert result.endpoint == "http://127.0.0.1:5273/v1"

    def test_bare_port_suffix(self):
        result = parse_status_output("Service endpoint :51679 ready")
        assert result.endpoint == "http://127.0.0.1:51679"
        assert result.port == 51679
        assert result.is_running is True

    def test_url_without_port(self):
        result = parse_status_output("see http://foundry.local/status for details")
        assert result.endpoint == "http://foundry.local/status"
        assert result.port is None
        assert result.is_running is True

    def test_bare_number(self):
        result = parse_status_output("55329\n")
        assert result.endpoint == "http://127.0.0.1:55329"

    def test_port_phrase(self):
        result = parse_status_output("Service running on port 51679")
        assert result.endpoint == "http://127.0.0.1:51679"

    @pytest.mark.parametrize("text", ["", "   \n", "Service is not running.", None])
    def test_no_match(self, text):
        result = parse_status_output(text)
        assert result.endpoint is None
        assert result.port is None
        assert result.is_running is False

    def test_out_of_range_port_ignored(self):
        result = parse_status_output("error code :99999")
        assert result.endpoint is None

    def test_raw_output_kept(self):
        text = "running on http://127.0.0.1:1234"
        assert parse_status_output(text).raw == text


def test_broken_matcher_is_skipped(monkeypatch):
    def explode(text):
        raise RuntimeError("boom")

    monkeypatch.setattr("discovery.output_parser.MATCHERS", [("explode", explode)] + MATCHERS)
    result = parse_status_output('{"port": 5000, "status": "running"}')
    assert result.endpoint == "http://127.0.0.1:5000"
