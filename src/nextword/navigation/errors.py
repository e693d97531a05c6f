"""Exceptions raised when a host hands the navigator malformed input."""

from __future__ import annotations

from typing import Any


class NavigationError(ValueError):
    """Base class for contract violations detected by the navigator."""

    error_code = "navigation_error"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary for JSON output."""

        return {"error": self.error_code, "message": str(self)}


class InvalidRangeError(NavigationError):
    """Raised when the current word range does not fit inside the text."""

    error_code = "invalid_range"

    def __init__(self, start: int, end: int, length: int) -> None:
        super().__init__(f"Range [{start}, {end}) exceeds text length {length}")
        self.start = start
        self.end = end
        self.length = length

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["details"] = {"start": self.start, "end": self.end, "length": self.length}
        return payload


class InvalidDirectionError(NavigationError):
    """Raised when a direction value cannot be interpreted."""

    error_code = "invalid_direction"


__all__ = ["NavigationError", "InvalidRangeError", "InvalidDirectionError"]
