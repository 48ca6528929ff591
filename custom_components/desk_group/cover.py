"""Support for desks and desk groups as covers."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.cover import (
    ATTR_POSITION,
    CoverEntity,
    CoverEntityFeature,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity_platform import AddConfigEntryEntitiesCallback

from .const import (
    ATTR_MEMBERS,
    ATTR_READBACK_DESK,
    ATTR_TARGET_POSITION,
    DOMAIN,
    MANUFACTURER,
)
from .controller import DeskPositionController
from .models import ActuatorKind, DeskActuator, DeskPositionState, MotionState

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddConfigEntryEntitiesCallback,
) -> None:
    """Set up desk cover devices."""
    controller: DeskPositionController = hass.data[DOMAIN][entry.entry_id]

    async_add_entities(
        [DeskCover(controller, actuator) for actuator in controller.actuators.values()],
        update_before_add=True,
    )


class DeskCover(CoverEntity):
    """Representation of a desk, or a group of desks, as a cover.

    The cover is open when the desk is at its maximum height.
    """

    _attr_has_entity_name = True
    _attr_name = None
    _attr_supported_features = (
        CoverEntityFeature.OPEN
        | CoverEntityFeature.CLOSE
        | CoverEntityFeature.SET_POSITION
    )

    def __init__(
        self, controller: DeskPositionController, actuator: DeskActuator
    ) -> None:
        """Initialize the cover."""
        self._controller = controller
        self._actuator = actuator

        self._attr_unique_id = actuator.unique_id
        self._attr_should_poll = not controller.push_telemetry
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, actuator.unique_id)},
            name=actuator.name,
            manufacturer=MANUFACTURER,
            model="Desk group" if actuator.kind is ActuatorKind.GROUP else "Desk",
        )

    @property
    def _state(self) -> DeskPositionState:
        return self._controller.get_state(self._actuator.unique_id)

    async def async_added_to_hass(self) -> None:
        """Subscribe to position changes."""
        await super().async_added_to_hass()
        self.async_on_remove(
            self._controller.async_add_listener(
                self._actuator.unique_id, self.async_write_ha_state
            )
        )

    @property
    def available(self) -> bool:  # type: ignore[override]
        """Return if the last request to the desk succeeded."""
        return self._state.available

    @property
    def current_cover_position(self) -> int | None:  # type: ignore[override]
        """Return current position, 0 at base height and 100 at max height."""
        return self._state.current_position

    @property
    def is_closed(self) -> bool | None:  # type: ignore[override]
        """Return if the desk is all the way down."""
        return self._state.current_position == 0

    @property
    def is_opening(self) -> bool | None:  # type: ignore[override]
        """Return if the desk is rising."""
        return self._state.motion is MotionState.INCREASING

    @property
    def is_closing(self) -> bool | None:  # type: ignore[override]
        """Return if the desk is lowering."""
        return self._state.motion is MotionState.DECREASING

    @property
    def extra_state_attributes(self) -> dict[str, Any]:  # type: ignore[override]
        """Return extra state attributes."""
        return {
            ATTR_TARGET_POSITION: self._state.target_position,
            ATTR_READBACK_DESK: self._actuator.readback_desk_id,
            ATTR_MEMBERS: list(self._actuator.members),
        }

    async def async_update(self) -> None:
        """Poll the desk height."""
        await self._controller.async_get_current_position(self._actuator.unique_id)

    async def async_open_cover(self, **kwargs: Any) -> None:
        """Raise the desk to its maximum height."""
        self._controller.async_request_move(self._actuator.unique_id, 100)

    async def async_close_cover(self, **kwargs: Any) -> None:
        """Lower the desk to its base height."""
        self._controller.async_request_move(self._actuator.unique_id, 0)

    async def async_set_cover_position(self, **kwargs: Any) -> None:
        """Move the desk to a position."""
        self._controller.async_request_move(
            self._actuator.unique_id, kwargs[ATTR_POSITION]
        )
