"""Data models for dashboard counters and view state."""

from dataclasses import dataclass, field
from typing import Any

# Fields every counter object must carry as strings.
_REQUIRED_FIELDS = ("id", "value", "title", "description")


@dataclass(frozen=True)
class CounterRecord:
    """A single counter as received from the stats endpoint.

    Attributes:
        id: Opaque identifier, used only as a rendering key.
        value: Display value. Rendered as text, never parsed as a number.
        title: Short label shown as the card heading.
        description: Free-text explanation shown under the value.
        units: Optional unit suffix, or None when no suffix is rendered.
    """

    id: str
    value: str
    title: str
    description: str
    units: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "CounterRecord":
        """Build a record from one decoded JSON object.

        Only the shape is checked: required fields must be strings and
        ``units`` must be a string, null, or absent.

        Raises:
            ValueError: If the object does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Counter entry must be an object, got {type(data).__name__}")

        for name in _REQUIRED_FIELDS:
            if name not in data:
                raise ValueError(f"Counter entry is missing '{name}' field")
            if not isinstance(data[name], str):
                raise ValueError(f"Counter field '{name}' must be a string")

        units = data.get("units")
        if units is not None and not isinstance(units, str):
            raise ValueError("Counter field 'units' must be a string or null")

        return cls(
            id=data["id"],
            value=data["value"],
            title=data["title"],
            description=data["description"],
            units=units,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape the endpoint uses."""
        return {
            "id": self.id,
            "value": self.value,
            "title": self.title,
            "units": self.units,
            "description": self.description,
        }


@dataclass(frozen=True)
class Loading:
    """No fetch has resolved yet."""


@dataclass(frozen=True)
class Error:
    """The most recent fetch failed.

    Attributes:
        message: Fixed user-facing message. Never the underlying cause.
    """

    message: str


@dataclass(frozen=True)
class Loaded:
    """The most recent fetch succeeded.

    Attributes:
        counters: Counters in the order the endpoint returned them.
    """

    counters: tuple[CounterRecord, ...] = field(default_factory=tuple)


# Exactly one of these is the active view state at any time
ViewState = Loading | Error | Loaded
