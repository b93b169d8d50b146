"""
Daily Slot Catalog

The clinic books appointments only into a fixed set of daily slots.
An appointment instant is matched against the catalog on a wall clock
that is a fixed offset from UTC; the match must be exact to the minute.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, timezone

from clinicops.core.domain import ValueObject


def parse_hhmm(value: str) -> time:
    """Parse "HH:MM" into a time, rejecting anything else."""
    try:
        hours, minutes = value.strip().split(":")
        return time(int(hours), int(minutes))
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid HH:MM value: {value!r}") from e


def is_time_between(moment: time, start: time, end: time) -> bool:
    """Inclusive window check on both ends."""
    return start <= moment <= end


@dataclass(frozen=True)
class Slot(ValueObject):
    """A bookable daily time window."""

    start: time
    end: time

    def _validate(self) -> None:
        if self.start >= self.end:
            raise ValueError("Slot must end after it starts")

    @classmethod
    def from_definition(cls, definition: str) -> "Slot":
        """Build from "HH:MM-HH:MM"."""
        try:
            start, end = definition.split("-")
        except ValueError as e:
            raise ValueError(f"Invalid slot definition: {definition!r}") from e
        return cls(start=parse_hhmm(start), end=parse_hhmm(end))

    @property
    def label(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class SlotPlacement(ValueObject):
    """A slot pinned to a calendar day, with UTC bounds."""

    slot: Slot
    starts_at: datetime
    ends_at: datetime

    def _validate(self) -> None:
        if self.starts_at >= self.ends_at:
            raise ValueError("Slot placement must end after it starts")

    @property
    def label(self) -> str:
        return f"{self.starts_at.date().isoformat()} {self.slot.label}"


@dataclass(frozen=True)
class SlotCatalog(ValueObject):
    """
    Immutable, ordered set of daily slots.

    Example:
        ```python
        catalog = SlotCatalog.from_definitions(["07:00-07:30", "07:35-08:05"])
        catalog.find_slot("07:35")  # Slot(07:35-08:05)
        catalog.find_slot("07:31")  # None
        ```
    """

    slots: tuple[Slot, ...]

    def _validate(self) -> None:
        if not self.slots:
            raise ValueError("Slot catalog cannot be empty")
        for previous, current in zip(self.slots, self.slots[1:]):
            if current.start < previous.end:
                raise ValueError(f"Slots must be ordered and non-overlapping: {previous} then {current}")

    @classmethod
    def from_definitions(cls, definitions: list[str] | tuple[str, ...]) -> "SlotCatalog":
        return cls(slots=tuple(Slot.from_definition(d) for d in definitions))

    def __iter__(self):
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    def find_slot(self, start: str | time) -> Slot | None:
        """Exact match on slot start."""
        wanted = parse_hhmm(start) if isinstance(start, str) else start
        for slot in self.slots:
            if slot.start == wanted:
                return slot
        return None

    def place(self, instant: datetime, utc_offset_hours: int = 0) -> SlotPlacement | None:
        """
        Locate the slot starting exactly at `instant`.

        Args:
            instant: Aware appointment instant
            utc_offset_hours: Offset of the catalog's wall clock from UTC

        Returns:
            The slot with UTC bounds on that day, or None when `instant`
            is not a slot start (seconds included).
        """
        wall_tz = timezone(timedelta(hours=utc_offset_hours))
        local = instant.astimezone(wall_tz)
        if local.second or local.microsecond:
            return None
        slot = self.find_slot(local.time().replace(second=0, microsecond=0))
        if slot is None:
            return None
        return SlotPlacement(
            slot=slot,
            starts_at=_at(local.date(), slot.start, wall_tz),
            ends_at=_at(local.date(), slot.end, wall_tz),
        )


def _at(day: date, moment: time, tz: timezone) -> datetime:
    return datetime.combine(day, moment, tzinfo=tz).astimezone(UTC)
