"""Conversions between desk height and cover position."""

from __future__ import annotations

from .models import MotionState, TravelRange


def clamp_percentage(percentage: float) -> float:
    """Limit a position to the 0-100 range."""
    return max(0, min(100, percentage))


def percentage_to_height(percentage: float, travel_range: TravelRange) -> int:
    """Convert a position in percent to a physical desk height."""
    percentage = clamp_percentage(percentage)
    return round(percentage / 100 * travel_range.span + travel_range.base_height)


def height_to_percentage(height: float, travel_range: TravelRange) -> int:
    """Convert a physical desk height to a position in percent.

    Heights outside the travel range are reported as 0 or 100.
    """
    percentage = round((height - travel_range.base_height) / travel_range.span * 100)
    return int(clamp_percentage(percentage))


def derive_motion_state(current: int, target: int) -> MotionState:
    """Return which way the desk has to travel to reach the target."""
    if target > current:
        return MotionState.INCREASING
    if target < current:
        return MotionState.DECREASING
    return MotionState.STOPPED
