import logging

import pytest
import yaml

from config_loader import TimezoneFormatter, get_sample_config, load_config


def write_config(tmp_path, data):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


def test_missing_file_uses_defaults(tmp_path):
    config = load_config(str(tmp_path / "absent.yaml"))

    assert config["service"]["start_command"] == ["foundry", "service", "start"]
    assert config["service"]["status_timeout_seconds"] == 2
    assert config["poll"]["max_attempts"] == 60
    assert config["poll"]["initial_delay_seconds"] == 2
    assert config["network"]["verify_timeout_seconds"] == 3
    assert config["network"]["models_timeout_seconds"] == 5
    assert config["cache"]["ttl_hours"] == 24
    assert config["api"]["enabled"] is False


def test_partial_override_keeps_other_defaults(tmp_path):
    config = load_config(write_config(tmp_path, {"poll": {"max_attempts": 10}}))

    assert config["poll"]["max_attempts"] == 10
    assert config["poll"]["interval_seconds"] == 1


def test_string_command_is_split(tmp_path):
    config = load_config(write_config(tmp_path, {"service": {"status_command": "foundry service status --json"}}))
    assert config["service"]["status_command"] == ["foundry", "service", "status", "--json"]


def test_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(str(path))["poll"]["max_attempts"] == 60


def test_sample_config_is_valid(tmp_path):
    config = load_config(write_config(tmp_path, get_sample_config()))
    assert config["api"]["enabled"] is True


@pytest.mark.parametrize("data", [
    {"poll": {"max_attempts": 0}},
    {"poll": {"max_attempts": "sixty"}},
    {"service": {"start_command": []}},
    {"service": "foundry"},
    {"network": {"verify_timeout_seconds": -1}},
    {"network": {"models_path": "v1/models"}},
    {"cache": {"ttl_hours": 0}},
])
def test_invalid_config(tmp_path, data):
    with pytest.raises(ValueError):
        load_config(write_config(tmp_path, data))


def test_non_mapping_root(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        load_config(str(path))


def _record(created):
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)
    record.created = created
    return record


def test_timezone_formatter():
    # 2024-01-15 12:00:00 UTC
    record = _record(1705320000)

    assert TimezoneFormatter(tz_name="UTC").formatTime(record) == "2024-01-15 12:00:00 UTC"
    assert TimezoneFormatter(tz_name="America/New_York").formatTime(record) == "2024-01-15 07:00:00 EST"
    assert TimezoneFormatter(tz_name="UTC").formatTime(record, "%H:%M") == "12:00"


def test_unknown_timezone_falls_back_to_utc():
    formatter = TimezoneFormatter(tz_name="Mars/Olympus_Mons")
    assert formatter.formatTime(_record(1705320000)).endswith("UTC")
