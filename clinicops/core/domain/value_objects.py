"""
Base Value Object Classes

Value objects are immutable and compared by their values, not by reference.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Self


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for all value objects.

    Value objects are:
    - Immutable (frozen=True)
    - Compared by value (dataclass equality)
    - Validated on construction through `_validate`

    Example:
        ```python
        @dataclass(frozen=True)
        class Slot(ValueObject):
            start: time
            end: time

            def _validate(self) -> None:
                if self.start >= self.end:
                    raise ValueError("Slot must end after it starts")
        ```
    """

    def __post_init__(self):
        self._validate()

    def _validate(self) -> None:
        """Validate the value object. Override in subclasses."""
        pass


class StatusEnum(str, Enum):
    """
    Base class for status enums.

    Members are plain strings, so they serialize to JSON as their value.
    """

    @classmethod
    def values(cls) -> list[str]:
        """Get all possible values."""
        return [e.value for e in cls]

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create from string value (case-insensitive)."""
        for member in cls:
            if member.value.lower() == value.lower():
                return member
        raise ValueError(f"Invalid {cls.__name__}: {value}")
