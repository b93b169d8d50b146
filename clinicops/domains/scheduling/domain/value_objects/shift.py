"""
Doctor working shifts.
"""

from datetime import UTC, date, datetime

from clinicops.core.domain import StatusEnum


class Shift(StatusEnum):
    """Half-day working shift of a doctor."""

    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"

    @classmethod
    def of(cls, instant: datetime, utc_offset_hours: int = 7, cutoff_hour: int = 11) -> "Shift":
        """
        Shift that covers `instant`.

        The UTC hour is shifted back by `utc_offset_hours`; anything below
        `cutoff_hour` is MORNING. With the defaults, 17:59Z is MORNING and
        18:00Z is AFTERNOON. Stored schedules were written with the same
        arithmetic, so it must not be "corrected" here.
        """
        hour = instant.astimezone(UTC).hour
        return cls.MORNING if hour - utc_offset_hours < cutoff_hour else cls.AFTERNOON


def schedule_date(instant: datetime) -> date:
    """Calendar day (UTC) a schedule entry is filed under."""
    return instant.astimezone(UTC).date()
