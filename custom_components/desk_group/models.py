"""Data models for Desk Group integration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from homeassistant.exceptions import HomeAssistantError


class DeskConfigurationError(HomeAssistantError):
    """Exception to indicate the configured travel range is unusable."""


class ActuatorKind(StrEnum):
    """How a desk actuator is addressed on the server."""

    SINGLE = "single"
    GROUP = "group"


class MotionState(StrEnum):
    """Direction the desk is travelling in.

    INCREASING means the desk is rising (position moving toward 100),
    DECREASING means it is lowering (position moving toward 0).
    """

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class TravelRange:
    """Physical height range a desk travels between, in server height units."""

    base_height: int
    max_height: int

    def __post_init__(self) -> None:
        """Reject ranges that cannot be mapped to a percentage."""
        if self.max_height <= self.base_height:
            raise DeskConfigurationError(
                f"Max height ({self.max_height}) must be higher than "
                f"base height ({self.base_height})"
            )

    @property
    def span(self) -> int:
        """Return the travel distance between base and max height."""
        return self.max_height - self.base_height


@dataclass(frozen=True, slots=True)
class DeskActuator:
    """A single desk, or a group of desks moved by one command.

    Groups read their position back from their first member desk.
    """

    id: str
    name: str
    kind: ActuatorKind
    members: tuple[str, ...]

    def __post_init__(self) -> None:
        """Require at least one desk to read the height from."""
        if not self.members:
            raise ValueError(f"Actuator {self.id} has no member desks")

    @classmethod
    def single(cls, desk_id: str, name: str | None = None) -> DeskActuator:
        """Create an actuator for one desk."""
        return cls(desk_id, name or desk_id, ActuatorKind.SINGLE, (desk_id,))

    @classmethod
    def group(
        cls,
        group_id: str,
        members: list[str] | tuple[str, ...],
        name: str | None = None,
    ) -> DeskActuator:
        """Create an actuator for a group of desks."""
        return cls(group_id, name or group_id, ActuatorKind.GROUP, tuple(members))

    @property
    def unique_id(self) -> str:
        """Return an id that cannot collide between groups and desks."""
        return f"{self.kind}_{self.id}"

    @property
    def readback_desk_id(self) -> str:
        """Return the desk whose height represents this actuator."""
        return self.members[0]

    @property
    def height_path(self) -> str:
        """Return the server path used to set this actuator's height."""
        if self.kind is ActuatorKind.GROUP:
            return f"/groups/{self.id}/height"
        return f"/desks/{self.id}/height"


@dataclass(slots=True)
class DeskPositionState:
    """Position bookkeeping for one actuator, in percent."""

    current_position: int = 0
    target_position: int = 0
    motion: MotionState = MotionState.STOPPED
    available: bool = True
