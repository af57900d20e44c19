from __future__ import annotations

import json
import logging

import pytest

from servo_core.config import DEFAULT_ADDRESS, DeviceConfigError, load_device_config, resource_location


def _write(tmp_path, payload, name="rig.json"):
    path = tmp_path / name
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


def test_load_and_resolve_address(tmp_path):
    path = _write(tmp_path, {"device": {"servo_a": " 10.0.0.5 ", "servo_b": "10.0.0.6:5020"}})
    cfg = load_device_config(path)

    assert cfg.path == path
    assert cfg.resolve_address("servo_a") == "10.0.0.5"
    assert cfg.resolve_address("servo_b") == "10.0.0.6:5020"
    assert (cfg.port, cfg.unit_id, cfg.timeout_s) == (502, 1, 1.0)


def test_transport_settings_are_read(tmp_path):
    path = _write(tmp_path, {"device": {}, "port": 5020, "unit_id": 3, "timeout_s": 0.5})
    cfg = load_device_config(path)
    assert (cfg.port, cfg.unit_id, cfg.timeout_s) == (5020, 3, 0.5)


def test_absent_servo_falls_back_to_loopback(tmp_path, caplog):
    cfg = load_device_config(_write(tmp_path, {"device": {"servo_a": "10.0.0.5"}}))

    with caplog.at_level(logging.WARNING):
        assert cfg.resolve_address("servo_z") == DEFAULT_ADDRESS
    assert "127.0.0.1" in caplog.text


def test_absent_servo_is_error_when_fallback_disabled(tmp_path):
    cfg = load_device_config(_write(tmp_path, {"device": {}}))
    with pytest.raises(DeviceConfigError):
        cfg.resolve_address("servo_z", allow_default=False)


def test_missing_file_is_config_error(tmp_path):
    with pytest.raises(DeviceConfigError, match="Unable to read device config"):
        load_device_config(tmp_path / "missing.json")


def test_unparseable_file_is_config_error(tmp_path):
    with pytest.raises(DeviceConfigError, match="Unable to parse config file"):
        load_device_config(_write(tmp_path, "{device: "))


def test_non_utf8_file_is_config_error(tmp_path):
    path = tmp_path / "rig.json"
    path.write_bytes(b'{"device": {"servo_a": "\xff\xfe"}}')
    with pytest.raises(DeviceConfigError, match="Unable to parse config file"):
        load_device_config(path)


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"device": ["servo_a"]},
        {"device": {"servo_a": 17}},
        {"device": {"servo_a": "  "}},
        {"device": {}, "port": "modbus"},
    ],
)
def test_malformed_config_is_rejected(tmp_path, payload):
    with pytest.raises(DeviceConfigError):
        load_device_config(_write(tmp_path, payload))


def test_resource_location_is_per_device(tmp_path):
    assert resource_location("rig", tmp_path) == tmp_path / "rig.json"
