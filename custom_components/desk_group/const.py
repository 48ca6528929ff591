"""Constants for the Desk Group integration."""

from homeassistant.const import Platform

DOMAIN = "desk_group"

# Platforms
PLATFORMS = [Platform.COVER]

# Config entry keys
CONF_BASE_HEIGHT = "base_height"
CONF_MAX_HEIGHT = "max_height"
CONF_ADD_INDIVIDUAL_DESKS = "add_individual_desks"

# Options keys
CONF_SYNC_TARGET_ON_READ = "sync_target_on_read"
CONF_TOPIC_BASE = "topic_base"

DEFAULT_BASE_HEIGHT = 540
DEFAULT_MAX_HEIGHT = 1200
DEFAULT_ADD_INDIVIDUAL_DESKS = False
DEFAULT_SYNC_TARGET_ON_READ = True

SETTLE_DELAY = 0.5  # seconds without new requests before a move is sent
DISPATCH_DELAY = 0.1  # seconds between announcing motion and sending the move
REQUEST_TIMEOUT = 10  # seconds
RECOVERY_INTERVAL = 30  # seconds between reads of an unresponsive pushed desk

MANUFACTURER = "Linak"

ATTR_TARGET_POSITION = "target_position"
ATTR_READBACK_DESK = "readback_desk"
ATTR_MEMBERS = "members"
