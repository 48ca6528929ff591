"""Global fixtures for Desk Group integration."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from custom_components.desk_group.api import DeskGroupApiClient
from custom_components.desk_group.controller import DeskPositionController
from custom_components.desk_group.models import DeskActuator, TravelRange
from homeassistant.core import HomeAssistant

from .const import MOCK_DESKS, MOCK_GROUPS

pytest_plugins = "pytest_homeassistant_custom_component"


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> None:  # noqa: D103
    return


@pytest.fixture
def mock_api() -> AsyncMock:
    """Return a mocked desk server client with desks at 50%."""
    api = AsyncMock(spec=DeskGroupApiClient)
    api.async_get_groups.return_value = MOCK_GROUPS
    api.async_get_desks.return_value = MOCK_DESKS
    api.async_get_height.return_value = 870
    return api


@pytest.fixture
def travel_range() -> TravelRange:
    """Return the default travel range."""
    return TravelRange(540, 1200)


@pytest.fixture
def group() -> DeskActuator:
    """Return a desk group."""
    return DeskActuator.group("office", MOCK_GROUPS["office"])


@pytest.fixture
def desk() -> DeskActuator:
    """Return a single desk."""
    return DeskActuator.single("desk3", "Standing desk")


@pytest.fixture
def controller(
    hass: HomeAssistant,
    mock_api: AsyncMock,
    travel_range: TravelRange,
    group: DeskActuator,
    desk: DeskActuator,
) -> DeskPositionController:
    """Return a controller that sends moves without waiting."""
    return DeskPositionController(
        hass,
        mock_api,
        travel_range,
        [group, desk],
        settle_delay=0,
        dispatch_delay=0,
    )
