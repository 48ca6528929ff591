"""Position controller for desks and desk groups."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
import logging

from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers.event import async_call_later

from .api import DeskGroupApiClient, DeskGroupApiError, DeskGroupConnectionError
from .const import (
    DISPATCH_DELAY,
    DOMAIN,
    RECOVERY_INTERVAL,
    REQUEST_TIMEOUT,
    SETTLE_DELAY,
)
from .models import DeskActuator, DeskPositionState, MotionState, TravelRange
from .position import (
    clamp_percentage,
    derive_motion_state,
    height_to_percentage,
    percentage_to_height,
)

_LOGGER = logging.getLogger(__name__)


class DeskPositionController:
    """Track and move desk positions on behalf of the cover entities.

    Every actuator has one pending move slot. A new request replaces the
    pending move for that actuator, so a burst of requests (for example while
    dragging a slider) results in a single height command with the last
    requested position. Once a height command has been sent it is never
    cancelled, and moves of one actuator never overlap.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        api: DeskGroupApiClient,
        travel_range: TravelRange,
        actuators: Iterable[DeskActuator],
        *,
        sync_target_on_read: bool = True,
        settle_delay: float = SETTLE_DELAY,
        dispatch_delay: float = DISPATCH_DELAY,
    ) -> None:
        """Initialize the controller."""
        self.hass = hass
        self.api = api
        self.travel_range = travel_range
        self.sync_target_on_read = sync_target_on_read
        self.push_telemetry = False
        self.actuators: dict[str, DeskActuator] = {
            actuator.unique_id: actuator for actuator in actuators
        }
        self._settle_delay = settle_delay
        self._dispatch_delay = dispatch_delay
        self._states = {
            actuator_id: DeskPositionState() for actuator_id in self.actuators
        }
        self._pending_moves: dict[str, asyncio.Task[None]] = {}
        self._move_locks = {
            actuator_id: asyncio.Lock() for actuator_id in self.actuators
        }
        self._listeners: dict[str, list[CALLBACK_TYPE]] = {}
        self._recovery_timers: dict[str, CALLBACK_TYPE] = {}

    def get_state(self, actuator_id: str) -> DeskPositionState:
        """Return the position state of an actuator."""
        return self._states[actuator_id]

    @callback
    def async_add_listener(
        self, actuator_id: str, update_callback: CALLBACK_TYPE
    ) -> CALLBACK_TYPE:
        """Listen for state changes of one actuator."""
        listeners = self._listeners.setdefault(actuator_id, [])
        listeners.append(update_callback)

        @callback
        def remove_listener() -> None:
            listeners.remove(update_callback)

        return remove_listener

    @callback
    def _async_notify(self, actuator_id: str) -> None:
        for update_callback in list(self._listeners.get(actuator_id, [])):
            update_callback()

    @callback
    def _async_mark_available(self, actuator_id: str) -> None:
        self._states[actuator_id].available = True
        if (cancel := self._recovery_timers.pop(actuator_id, None)) is not None:
            cancel()

    @callback
    def _async_mark_unavailable(self, actuator_id: str) -> None:
        """Flag an actuator as not responding until it answers again.

        Polled covers recover on their next update. Covers fed by pushed
        heights are never polled, so the desk is read back on a timer instead.
        """
        self._states[actuator_id].available = False
        if not self.push_telemetry or actuator_id in self._recovery_timers:
            return

        @callback
        def _async_recover(_now) -> None:
            self._recovery_timers.pop(actuator_id, None)
            self.hass.async_create_task(
                self.async_get_current_position(actuator_id),
                f"{DOMAIN} recover {actuator_id}",
            )

        self._recovery_timers[actuator_id] = async_call_later(
            self.hass, RECOVERY_INTERVAL, _async_recover
        )

    @callback
    def async_request_move(self, actuator_id: str, target_position: float) -> None:
        """Request a move, replacing any move still waiting to be sent."""
        actuator = self.actuators[actuator_id]
        state = self._states[actuator_id]
        self._async_cancel_pending_move(actuator_id)

        state.target_position = round(clamp_percentage(target_position))
        _LOGGER.debug(
            "Requested %s to move to %s%%", actuator.name, state.target_position
        )
        self._async_notify(actuator_id)

        self._pending_moves[actuator_id] = self.hass.async_create_task(
            self._async_settle_and_dispatch(actuator, state.target_position),
            f"{DOMAIN} move {actuator_id}",
        )

    @callback
    def _async_cancel_pending_move(self, actuator_id: str) -> None:
        if (pending := self._pending_moves.pop(actuator_id, None)) is not None:
            pending.cancel()

    async def _async_settle_and_dispatch(
        self, actuator: DeskActuator, target_position: int
    ) -> None:
        """Wait for requests to settle, announce the motion, then move."""
        actuator_id = actuator.unique_id
        state = self._states[actuator_id]

        await asyncio.sleep(self._settle_delay)
        state.motion = derive_motion_state(state.current_position, target_position)
        self._async_notify(actuator_id)

        await asyncio.sleep(self._dispatch_delay)
        async with self._move_locks[actuator_id]:
            # From here on the move is committed and can no longer be replaced
            if self._pending_moves.get(actuator_id) is asyncio.current_task():
                del self._pending_moves[actuator_id]
            await self.async_execute_move(actuator, target_position)

    async def async_execute_move(
        self, actuator: DeskActuator, target_position: int
    ) -> bool:
        """Send a height command and wait for the server to answer a readback.

        Returns:
            True if the move was accepted, False if it failed

        """
        actuator_id = actuator.unique_id
        state = self._states[actuator_id]
        height = percentage_to_height(target_position, self.travel_range)
        _LOGGER.debug(
            "Moving %s to %s%% (height %s)", actuator.name, target_position, height
        )

        try:
            await self.api.async_set_height(actuator.height_path, height)
            async with asyncio.timeout(REQUEST_TIMEOUT):
                await self.api.async_get_height(actuator.readback_desk_id)
        except (DeskGroupApiError, DeskGroupConnectionError, TimeoutError) as err:
            _LOGGER.error(
                "Failed to move %s to %s%%: %s", actuator.name, target_position, err
            )
            state.motion = MotionState.STOPPED
            self._async_mark_unavailable(actuator_id)
            self._async_notify(actuator_id)
            return False

        state.current_position = target_position
        state.motion = MotionState.STOPPED
        self._async_mark_available(actuator_id)
        self._async_notify(actuator_id)
        return True

    async def async_get_current_position(self, actuator_id: str) -> int | None:
        """Read the position of an actuator from its readback desk.

        Returns:
            The position in percent, None if the desk could not be read

        """
        actuator = self.actuators[actuator_id]
        state = self._states[actuator_id]

        try:
            height = await self.api.async_get_height(actuator.readback_desk_id)
        except (DeskGroupApiError, DeskGroupConnectionError) as err:
            _LOGGER.error("Failed to read height of %s: %s", actuator.name, err)
            self._async_mark_unavailable(actuator_id)
            self._async_notify(actuator_id)
            return None

        position = height_to_percentage(height, self.travel_range)
        state.current_position = position
        self._async_mark_available(actuator_id)
        if self.sync_target_on_read:
            # The desk is the source of truth, a hand-moved desk has arrived
            state.target_position = position
            state.motion = MotionState.STOPPED
        elif state.motion is not MotionState.STOPPED:
            state.motion = derive_motion_state(position, state.target_position)
        self._async_notify(actuator_id)
        return position

    @callback
    def async_ingest_telemetry(self, actuator_id: str, height: float) -> None:
        """Update the current position from a pushed height reading.

        The target position and any pending move are left alone.
        """
        state = self._states[actuator_id]
        state.current_position = height_to_percentage(height, self.travel_range)
        self._async_mark_available(actuator_id)
        if state.motion is not MotionState.STOPPED:
            state.motion = derive_motion_state(
                state.current_position, state.target_position
            )
        _LOGGER.debug(
            "Height %s received for %s (%s%%)",
            height,
            self.actuators[actuator_id].name,
            state.current_position,
        )
        self._async_notify(actuator_id)

    async def async_shutdown(self) -> None:
        """Cancel moves that have not been sent yet and pending recoveries."""
        for actuator_id in list(self._pending_moves):
            self._async_cancel_pending_move(actuator_id)
        while self._recovery_timers:
            _, cancel = self._recovery_timers.popitem()
            cancel()
