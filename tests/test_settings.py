from __future__ import annotations

import pytest

from custom_components.kaku_ics2000.const import DEFAULT_REST_SERVER_PORT
from custom_components.kaku_ics2000.errors import ConfigurationError
from custom_components.kaku_ics2000.models import DeviceFunctions
from custom_components.kaku_ics2000.settings import KakuSettings

CREDENTIALS = {"email": "user@example.com", "password": "secret"}


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"email": "user@example.com"},
        {"password": "secret"},
        {"email": "", "password": "secret"},
    ],
)
def test_missing_credentials_raise(data) -> None:
    with pytest.raises(ConfigurationError, match="E-mail and password are required"):
        KakuSettings.from_mapping(data)


def test_defaults() -> None:
    settings = KakuSettings.from_mapping(CREDENTIALS)

    assert settings.entity_blacklist == frozenset()
    assert settings.local_backup_address is None
    assert settings.device_configs_overrides == {}
    assert settings.discover_message is None
    assert settings.show_scenes is False
    assert settings.hide_reload_switch is False
    assert settings.start_rest_server is False
    assert settings.rest_server_port == DEFAULT_REST_SERVER_PORT == 9100


def test_blacklist_is_coerced_to_ints() -> None:
    settings = KakuSettings.from_mapping({**CREDENTIALS, "entity_blacklist": ["3", 4]})
    assert settings.entity_blacklist == frozenset({3, 4})


def test_legacy_device_blacklist_is_used_as_fallback() -> None:
    settings = KakuSettings.from_mapping({**CREDENTIALS, "device_blacklist": [8]})
    assert settings.entity_blacklist == frozenset({8})

    preferred = KakuSettings.from_mapping(
        {**CREDENTIALS, "device_blacklist": [8], "entity_blacklist": [9]}
    )
    assert preferred.entity_blacklist == frozenset({9})


def test_device_overrides_are_keyed_by_device_type() -> None:
    settings = KakuSettings.from_mapping(
        {
            **CREDENTIALS,
            "device_configs_overrides": {
                "53": {"on_off_function": 3, "dim_function": "4"},
            },
        }
    )

    assert settings.device_configs_overrides == {
        53: DeviceFunctions(on_off=3, dim=4, color_temperature=None)
    }


def test_rest_server_port_from_number_selector() -> None:
    settings = KakuSettings.from_mapping(
        {**CREDENTIALS, "start_rest_server": True, "rest_server_port": 8080.0}
    )
    assert settings.start_rest_server is True
    assert settings.rest_server_port == 8080


def test_invalid_values_raise_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        KakuSettings.from_mapping({**CREDENTIALS, "rest_server_port": 70000})

    with pytest.raises(ConfigurationError):
        KakuSettings.from_mapping({**CREDENTIALS, "entity_blacklist": ["lamp"]})


def test_unknown_keys_are_ignored() -> None:
    settings = KakuSettings.from_mapping({**CREDENTIALS, "platform": "ICS2000"})
    assert settings.email == "user@example.com"
