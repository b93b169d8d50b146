"""
Interval conflict predicates.

Appointments occupy half-open slot intervals `[start, end)`: a slot that
ends at 07:30 and one that starts at 07:30 do not collide. Treatment
periods are compared inclusively: sharing a single instant is already an
overlap. The two predicates are kept separate and chosen per call site
through `OverlapPolicy`.

An open end (`None`) is replaced by `open_end`. Callers pass
`FAR_FUTURE` when the interval occupies time forever, or the current
instant when only the present occupancy matters.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from clinicops.core.domain import ValueObject

FAR_FUTURE = datetime.max.replace(tzinfo=UTC)


class OverlapPolicy(str, Enum):
    """Boundary semantics for interval comparison."""

    HALF_OPEN = "half_open"
    INCLUSIVE = "inclusive"


def overlaps_half_open(
    start_a: datetime,
    end_a: datetime | None,
    start_b: datetime,
    end_b: datetime | None,
    *,
    open_end: datetime = FAR_FUTURE,
) -> bool:
    """Strict overlap of `[start_a, end_a)` and `[start_b, end_b)`."""
    resolved_a = open_end if end_a is None else end_a
    resolved_b = open_end if end_b is None else end_b
    return start_a < resolved_b and start_b < resolved_a


def overlaps_inclusive(
    start_a: datetime,
    end_a: datetime | None,
    start_b: datetime,
    end_b: datetime | None,
    *,
    open_end: datetime = FAR_FUTURE,
) -> bool:
    """Non-strict overlap of `[start_a, end_a]` and `[start_b, end_b]`."""
    resolved_a = open_end if end_a is None else end_a
    resolved_b = open_end if end_b is None else end_b
    return start_a <= resolved_b and start_b <= resolved_a


def overlaps(
    policy: OverlapPolicy,
    start_a: datetime,
    end_a: datetime | None,
    start_b: datetime,
    end_b: datetime | None,
    *,
    open_end: datetime = FAR_FUTURE,
) -> bool:
    """Dispatch to the predicate matching `policy`."""
    if policy is OverlapPolicy.HALF_OPEN:
        return overlaps_half_open(start_a, end_a, start_b, end_b, open_end=open_end)
    return overlaps_inclusive(start_a, end_a, start_b, end_b, open_end=open_end)


@dataclass(frozen=True)
class Period(ValueObject):
    """A time range with an optional end."""

    start: datetime
    end: datetime | None = None

    def _validate(self) -> None:
        if self.end is not None and self.end < self.start:
            raise ValueError("Period end cannot be before its start")

    @property
    def is_open(self) -> bool:
        return self.end is None

    def overlaps(
        self,
        other: "Period",
        policy: OverlapPolicy = OverlapPolicy.HALF_OPEN,
        *,
        open_end: datetime = FAR_FUTURE,
    ) -> bool:
        return overlaps(policy, self.start, self.end, other.start, other.end, open_end=open_end)
