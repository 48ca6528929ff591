"""Test conversions between desk heights and positions."""

import pytest

from custom_components.desk_group.models import (
    DeskConfigurationError,
    MotionState,
    TravelRange,
)
from custom_components.desk_group.position import (
    derive_motion_state,
    height_to_percentage,
    percentage_to_height,
)


async def test_percentage_to_height(travel_range: TravelRange) -> None:
    """Test positions map linearly onto the travel range."""
    assert percentage_to_height(0, travel_range) == 540
    assert percentage_to_height(50, travel_range) == 870
    assert percentage_to_height(100, travel_range) == 1200
    assert percentage_to_height(33, travel_range) == 758


@pytest.mark.parametrize(("percentage", "height"), [(-20, 540), (150, 1200)])
async def test_percentage_to_height_clamps(
    travel_range: TravelRange, percentage: int, height: int
) -> None:
    """Test positions outside 0-100 are clamped before conversion."""
    assert percentage_to_height(percentage, travel_range) == height


async def test_height_to_percentage(travel_range: TravelRange) -> None:
    """Test heights map back onto positions and clamp outside the range."""
    assert height_to_percentage(870, travel_range) == 50
    assert height_to_percentage(870.4, travel_range) == 50
    assert height_to_percentage(500, travel_range) == 0
    assert height_to_percentage(1300, travel_range) == 100


@pytest.mark.parametrize(
    "travel_range", [TravelRange(540, 1200), TravelRange(620, 1270), TravelRange(0, 7)]
)
async def test_round_trip(travel_range: TravelRange) -> None:
    """Test converting to a height and back stays within rounding."""
    for percentage in range(101):
        height = percentage_to_height(percentage, travel_range)
        assert abs(height_to_percentage(height, travel_range) - percentage) <= (
            100 / travel_range.span / 2 + 1
        )


async def test_round_trip_millimetres() -> None:
    """Test a fine grained range reproduces every position exactly."""
    travel_range = TravelRange(540, 1200)
    for percentage in range(101):
        height = percentage_to_height(percentage, travel_range)
        assert height_to_percentage(height, travel_range) == percentage


@pytest.mark.parametrize(("base", "maximum"), [(1200, 540), (700, 700)])
async def test_invalid_travel_range(base: int, maximum: int) -> None:
    """Test a range without travel is rejected."""
    with pytest.raises(DeskConfigurationError):
        TravelRange(base, maximum)


@pytest.mark.parametrize(
    ("current", "target", "motion"),
    [
        (0, 50, MotionState.INCREASING),
        (80, 20, MotionState.DECREASING),
        (40, 40, MotionState.STOPPED),
        (99, 100, MotionState.INCREASING),
    ],
)
async def test_derive_motion_state(
    current: int, target: int, motion: MotionState
) -> None:
    """Test the motion follows the sign of target - current."""
    assert derive_motion_state(current, target) is motion
