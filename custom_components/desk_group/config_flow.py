"""Config flow for Desk Group integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant.config_entries import (
    ConfigEntry,
    ConfigFlow,
    ConfigFlowResult,
    OptionsFlow,
)
from homeassistant.const import CONF_PASSWORD, CONF_URL, CONF_USERNAME
from homeassistant.core import callback
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
    DEFAULT_BASE_HEIGHT,
    DEFAULT_MAX_HEIGHT,
    DEFAULT_SYNC_TARGET_ON_READ,
    DOMAIN,
)
from .models import DeskConfigurationError, TravelRange

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_URL): str,
        vol.Required(CONF_USERNAME): str,
        vol.Required(CONF_PASSWORD): str,
        vol.Required(CONF_BASE_HEIGHT, default=DEFAULT_BASE_HEIGHT): vol.Coerce(int),
        vol.Required(CONF_MAX_HEIGHT, default=DEFAULT_MAX_HEIGHT): vol.Coerce(int),
        vol.Required(
            CONF_ADD_INDIVIDUAL_DESKS, default=DEFAULT_ADD_INDIVIDUAL_DESKS
        ): bool,
    }
)


class DeskGroupConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Desk Group."""

    VERSION = 1

    @staticmethod
    @callback
    def async_get_options_flow(config_entry: ConfigEntry) -> DeskGroupOptionsFlow:
        """Create the options flow."""
        return DeskGroupOptionsFlow()

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}

        if user_input is not None:
            url = user_input[CONF_URL].rstrip("/")

            # Check if already configured
            await self.async_set_unique_id(url)
            self._abort_if_unique_id_configured()

            try:
                TravelRange(user_input[CONF_BASE_HEIGHT], user_input[CONF_MAX_HEIGHT])
            except DeskConfigurationError:
                errors[CONF_MAX_HEIGHT] = "invalid_range"
            else:
                errors = await self._async_validate_server(user_input)

            if not errors:
                return self.async_create_entry(
                    title=f"Desk Group ({url})",
                    data={**user_input, CONF_URL: url},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=self.add_suggested_values_to_schema(
                STEP_USER_DATA_SCHEMA, user_input
            ),
            errors=errors,
        )

    async def _async_validate_server(
        self, user_input: dict[str, Any]
    ) -> dict[str, str]:
        """Check the server can be reached with the given credentials."""
        api = DeskGroupApiClient(
            async_get_clientsession(self.hass),
            user_input[CONF_URL],
            user_input[CONF_USERNAME],
            user_input[CONF_PASSWORD],
        )
        try:
            await api.async_validate_connection()
        except DeskGroupConnectionError:
            return {"base": "cannot_connect"}
        except DeskGroupAuthError:
            return {"base": "invalid_auth"}
        except DeskGroupApiError:
            return {"base": "invalid_response"}
        except Exception:  # pylint: disable=broad-except
            _LOGGER.exception("Unexpected exception")
            return {"base": "unknown"}
        return {}


class DeskGroupOptionsFlow(OptionsFlow):
    """Handle Desk Group options."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Manage the options."""
        if user_input is not None:
            return self.async_create_entry(data=user_input)

        options = self.config_entry.options
        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {
                    vol.Required(
                        CONF_SYNC_TARGET_ON_READ,
                        default=options.get(
                            CONF_SYNC_TARGET_ON_READ, DEFAULT_SYNC_TARGET_ON_READ
                        ),
                    ): bool,
                    vol.Optional(
                        CONF_TOPIC_BASE,
                        default=options.get(CONF_TOPIC_BASE, ""),
                    ): str,
                }
            ),
        )
