"""Discovery of desks and desk groups on the server."""

from __future__ import annotations

import logging

from .api import DeskGroupApiClient
from .models import DeskActuator

_LOGGER = logging.getLogger(__name__)


async def async_discover_actuators(
    api: DeskGroupApiClient, include_desks: bool
) -> list[DeskActuator]:
    """Query the server for the groups, and optionally desks, to expose.

    Raises:
        DeskGroupApiError: If API returns an error
        DeskGroupConnectionError: If connection fails

    """
    actuators: list[DeskActuator] = []

    for group_id, members in (await api.async_get_groups()).items():
        if not members:
            _LOGGER.warning("Skipping desk group %s without desks", group_id)
            continue
        actuators.append(DeskActuator.group(group_id, members))

    if include_desks:
        for desk in await api.async_get_desks():
            desk_id = desk.get("id")
            if desk_id is None:
                continue
            actuators.append(
                DeskActuator.single(str(desk_id), desk.get("config_name"))
            )

    _LOGGER.info(
        "Discovered %s desk groups and desks: %s",
        len(actuators),
        ", ".join(actuator.name for actuator in actuators),
    )
    return actuators
