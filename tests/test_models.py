from __future__ import annotations

import dataclasses

import pytest

from tv_wifi_remote import (
    CommandTable,
    DiscoveredDevice,
    InvalidDeviceError,
    TvRemoteConfig,
    TvRemoteError,
  )

def test_command_table_lookup_fallbacks():
    table = CommandTable({"Fast_Forward": "FF", "Volume Up": "VU", "Channel_Up": "CU"})
    assert table.lookup("Fast_Forward") == "FF"
    assert table.lookup("Volume_Up") == "VU"
    assert table.lookup("Channel Up") == "CU"
    assert table.lookup("fast_forward") == "FF"
    assert table.lookup("FAST_FORWARD") == "FF"
    assert table.lookup("Rewind") is None

def test_command_table_is_read_only():
    source = {"Power": "KEY_POWER"}
    table = CommandTable(source)
    source["Power"] = "changed"
    assert table["Power"] == "KEY_POWER"
    assert len(table) == 1
    assert list(table) == ["Power"]
    with pytest.raises(TypeError):
        table["Power"] = "x"  # type: ignore[index]

def test_device_validation():
    device = DiscoveredDevice(name="Den", ip_address="192.168.1.40", brand="Roku", port=8060)
    assert device.display_name == "Den (192.168.1.40)"
    assert device.with_port(80).port == 80
    assert device.to_jsonable()['unique_id'] == ""
    with pytest.raises(dataclasses.FrozenInstanceError):
        device.port = 1  # type: ignore[misc]

@pytest.mark.parametrize("ip_address,port", [
    ("not-an-ip", 80),
    ("192.168.1.300", 80),
    ("192.168.1.4", 0),
    ("192.168.1.4", 65536),
    ("192.168.1.4", True),
])
def test_invalid_devices_are_rejected(ip_address, port):
    with pytest.raises(InvalidDeviceError):
        DiscoveredDevice(name="x", ip_address=ip_address, brand="Roku", port=port)

def test_invalid_device_error_hierarchy():
    assert issubclass(InvalidDeviceError, TvRemoteError)
    assert issubclass(InvalidDeviceError, ValueError)

def test_blank_name_displays_address():
    assert DiscoveredDevice(name=" ", ip_address="10.0.0.1", brand="LG", port=3000).display_name == "10.0.0.1"

def test_config_defaults_and_evolve():
    config = TvRemoteConfig()
    assert config.max_concurrent_probes >= 1
    assert config.sony_psk == "0000"
    changed = config.evolve(sony_psk="4321", discovery_timeout=1.5)
    assert changed.sony_psk == "4321"
    assert changed.discovery_timeout == 1.5
    assert config.sony_psk == "0000"

def test_config_fields():
    assert [f.name for f in dataclasses.fields(TvRemoteConfig)] == [
        'discovery_timeout',
        'http_timeout',
        'probe_timeout',
        'connect_probe_timeout',
        'max_concurrent_probes',
        'search_targets',
        'bind_addresses',
        'sony_psk',
        'vizio_auth_token',
    ]

@pytest.mark.parametrize("changes", [
    dict(max_concurrent_probes=0),
    dict(http_timeout=0),
    dict(probe_timeout=-1.0),
])
def test_config_rejects_nonsense(changes):
    with pytest.raises(ValueError):
        TvRemoteConfig(**changes)
