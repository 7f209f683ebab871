"""Constants for the KlikAanKlikUit ICS-2000 integration."""

from __future__ import annotations

from typing import Final

DOMAIN: Final = "kaku_ics2000"
MANUFACTURER: Final = "KlikAanKlikUit"

# Config entry data / options
CONF_ENTITY_BLACKLIST: Final = "entity_blacklist"
CONF_DEVICE_BLACKLIST: Final = "device_blacklist"  # legacy name
CONF_LOCAL_BACKUP_ADDRESS: Final = "local_backup_address"
CONF_DEVICE_CONFIGS_OVERRIDES: Final = "device_configs_overrides"
CONF_DISCOVER_MESSAGE: Final = "discover_message"
CONF_SHOW_SCENES: Final = "show_scenes"
CONF_HIDE_RELOAD_SWITCH: Final = "hide_reload_switch"
CONF_START_REST_SERVER: Final = "start_rest_server"
CONF_REST_SERVER_PORT: Final = "rest_server_port"

# Device function override keys
CONF_ON_OFF_FUNCTION: Final = "on_off_function"
CONF_DIM_FUNCTION: Final = "dim_function"
CONF_COLOR_TEMPERATURE_FUNCTION: Final = "color_temperature_function"

DEFAULT_REST_SERVER_PORT: Final = 9100

# Discovery
DISCOVERY_PORT: Final = 2012
DISCOVERY_TIMEOUT: Final = 10  # seconds
DEFAULT_DISCOVER_MESSAGE: Final = (
    "010003ffffffffffffca000000010400044795000401040004000400040000000000000000020000003000"
)

# Cloud API
API_BASE_URL: Final = "https://trustsmartcloud2.com/ics2000_api/"
API_ACCOUNT: Final = "account.php"
API_GATEWAY: Final = "gateway.php"
API_ENTITY: Final = "entity.php"
API_COMMAND: Final = "command.php"
API_DEVICE_UNIQUE_ID: Final = "android"
API_TIMEOUT: Final = 30  # seconds

# Sync schedule (daily at midnight)
SYNC_HOUR: Final = 0
SYNC_MINUTE: Final = 0
SYNC_SECOND: Final = 0

# Sync triggers
TRIGGER_STARTUP: Final = "startup"
TRIGGER_SCHEDULE: Final = "schedule"
TRIGGER_MANUAL: Final = "manual"

# Reload switch
RELOAD_SWITCH_NAME: Final = "Reload Switch"

# Services
SERVICE_RELOAD: Final = "reload"

# Storage
STORAGE_VERSION: Final = 1
STORAGE_KEY: Final = f"{DOMAIN}.accessories"

# Known device types: device tag -> (on/off, dim, color temperature) function index
DEVICE_TYPE_FUNCTIONS: Final[dict[int, tuple[int | None, int | None, int | None]]] = {
    1: (0, None, None),  # on/off receiver
    2: (0, 1, None),  # dimmer receiver
    3: (0, None, None),  # wall switch
    24: (0, 1, None),  # dimmer with memory
    48: (3, None, None),  # zigbee plug
    52: (3, 4, None),  # zigbee dimmable light
    53: (3, 4, 9),  # zigbee tunable white light
    55: (3, 4, 9),  # zigbee tunable white spot
}

# Color temperature range exposed to Home Assistant
COLOR_TEMP_MIN_KELVIN: Final = 2200
COLOR_TEMP_MAX_KELVIN: Final = 6500
COLOR_TEMP_HUB_MAX: Final = 600  # hub scale: 0 = coolest, 600 = warmest

BRIGHTNESS_HUB_MAX: Final = 255
