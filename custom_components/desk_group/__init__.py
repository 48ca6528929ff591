"""Integration for height-adjustable desks and desk groups."""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_PASSWORD, CONF_URL, CONF_USERNAME
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryError, ConfigEntryNotReady
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import (
    DeskGroupApiClient,
    DeskGroupApiError,
    DeskGroupAuthError,
    DeskGroupConnectionError,
)
from .const import (
    CONF_ADD_INDIVIDUAL_DESKS,
    CONF_BASE_HEIGHT,
    CONF_MAX_HEIGHT,
    CONF_SYNC_TARGET_ON_READ,
    CONF_TOPIC_BASE,
    DEFAULT_ADD_INDIVIDUAL_DESKS,
    DEFAULT_SYNC_TARGET_ON_READ,
    DOMAIN,
    PLATFORMS,
)
from .controller import DeskPositionController
from .discovery import async_discover_actuators
from .models import DeskConfigurationError, TravelRange
from .telemetry import async_subscribe_telemetry

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Desk Group from a config entry."""

    # An unusable travel range is a configuration error, retrying won't help
    try:
        travel_range = TravelRange(
            entry.data[CONF_BASE_HEIGHT], entry.data[CONF_MAX_HEIGHT]
        )
    except DeskConfigurationError as err:
        raise ConfigEntryError(str(err)) from err

    api = DeskGroupApiClient(
        async_get_clientsession(hass),
        entry.data[CONF_URL],
        entry.data[CONF_USERNAME],
        entry.data[CONF_PASSWORD],
    )

    try:
        actuators = await async_discover_actuators(
            api,
            entry.data.get(CONF_ADD_INDIVIDUAL_DESKS, DEFAULT_ADD_INDIVIDUAL_DESKS),
        )
    except DeskGroupAuthError as err:
        raise ConfigEntryError(
            f"Desk server rejected the credentials: {err}"
        ) from err
    except (DeskGroupConnectionError, DeskGroupApiError) as err:
        raise ConfigEntryNotReady(f"Failed to discover desks: {err}") from err

    controller = DeskPositionController(
        hass,
        api,
        travel_range,
        actuators,
        sync_target_on_read=entry.options.get(
            CONF_SYNC_TARGET_ON_READ, DEFAULT_SYNC_TARGET_ON_READ
        ),
    )

    # Listen for pushed heights when a topic base is configured, poll otherwise
    if topic_base := entry.options.get(CONF_TOPIC_BASE):
        unsubscribe = await async_subscribe_telemetry(hass, controller, topic_base)
        if unsubscribe is not None:
            controller.push_telemetry = True
            entry.async_on_unload(unsubscribe)

    # Store controller for platforms to access
    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = controller

    # Set up platforms
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    # Add an entry cleanup function when unloading
    entry.async_on_unload(entry.add_update_listener(update_listener))

    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    if unload_ok:
        controller: DeskPositionController = hass.data[DOMAIN].pop(entry.entry_id)
        await controller.async_shutdown()

        if not hass.data[DOMAIN]:
            hass.data.pop(DOMAIN)

    return unload_ok


async def update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle options update."""
    await hass.config_entries.async_reload(entry.entry_id)
