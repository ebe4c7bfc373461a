"""Editor colour records and time helpers."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from .structs import Color

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class NoxelColor(enum.Enum):
    """Colour roles used by the editor, valued by their display names."""

    NODE_INACTIVE = "Inactive node"
    NODE_FOCUS_1 = "Focused node 1"
    NODE_FOCUS_2 = "Focused node 2"
    NODE_SELECTED_1 = "Selected node 1"
    NODE_SELECTED_2 = "Selected node 2"
    LINE_COLOR = "Line color"
    PLANE_COLOR = "Plane color"
    MOVE_COLOR_1 = "Move color"
    MOVE_COLOR_2 = "Move color (arrows)"


@dataclass
class SavedColor:
    """A named colour stored as RRGGBBAA hex."""

    name: str = "NO-NAME"
    hex_color: str = "00000000"

    @classmethod
    def from_color(cls, name: str, color: Color) -> "SavedColor":
        return cls(name, color.to_hex())

    @property
    def color(self) -> Color:
        return Color.from_hex(self.hex_color)

    def to_dict(self) -> dict[str, str]:
        return {"Name": self.name, "HexColor": self.hex_color}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SavedColor":
        return cls(str(data["Name"]), str(data["HexColor"]))


@dataclass
class SavedColorArray:
    """A list of saved colours."""

    colors: list[SavedColor] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"Colors": [color.to_dict() for color in self.colors]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SavedColorArray":
        return cls([SavedColor.from_dict(item) for item in data.get("Colors", [])])


def utc_from_unix_timestamp(timestamp: int) -> datetime:
    """UTC date and time for a count of seconds since the Unix epoch."""
    return _EPOCH + timedelta(seconds=int(timestamp))


def unix_timestamp(moment: datetime) -> int:
    """Whole seconds since the Unix epoch, truncated toward zero; naive times count as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    microseconds = (moment - _EPOCH) // timedelta(microseconds=1)
    seconds = abs(microseconds) // 1_000_000
    return seconds if microseconds >= 0 else -seconds