"""Pushed desk height updates over MQTT."""

from __future__ import annotations

from collections.abc import Callable
import logging
import math

from homeassistant.components import mqtt
from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback

from .controller import DeskPositionController

_LOGGER = logging.getLogger(__name__)


def height_topic(topic_base: str, actuator_name: str) -> str:
    """Return the topic a desk publishes its height on."""
    return f"{topic_base.rstrip('/')}/{actuator_name}/height"


async def async_subscribe_telemetry(
    hass: HomeAssistant, controller: DeskPositionController, topic_base: str
) -> CALLBACK_TYPE | None:
    """Feed height messages of every actuator into the controller.

    Returns:
        Callback removing all subscriptions, None if MQTT is not available

    """
    if not await mqtt.async_wait_for_mqtt_client(hass):
        _LOGGER.error("MQTT integration is not available, polling desk heights")
        return None

    unsubscribers: list[CALLBACK_TYPE] = []
    for actuator_id, actuator in controller.actuators.items():
        topic = height_topic(topic_base, actuator.name)
        _LOGGER.debug("Subscribing to %s for %s", topic, actuator.name)
        unsubscribers.append(
            await mqtt.async_subscribe(
                hass, topic, _height_message_handler(controller, actuator_id)
            )
        )

    @callback
    def async_unsubscribe() -> None:
        for unsubscribe in unsubscribers:
            unsubscribe()
        unsubscribers.clear()

    return async_unsubscribe


def _height_message_handler(
    controller: DeskPositionController, actuator_id: str
) -> Callable[[mqtt.ReceiveMessage], None]:
    @callback
    def async_height_received(msg: mqtt.ReceiveMessage) -> None:
        try:
            height = float(msg.payload)
            if not math.isfinite(height):
                raise ValueError(height)
        except (TypeError, ValueError):
            _LOGGER.warning(
                "Ignoring non-numeric height %r on %s", msg.payload, msg.topic
            )
            return
        controller.async_ingest_telemetry(actuator_id, height)

    return async_height_received
