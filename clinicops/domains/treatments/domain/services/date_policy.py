"""
Treatment date and notes validation.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from clinicops.config.settings import Settings
from clinicops.core.domain import ValidationException

START_TOO_FAR_PAST = "Start date cannot be more than 1 year in the past"
START_TOO_FAR_FUTURE = "Start date cannot be more than 2 years in the future"
END_BEFORE_START = "End date must be after start date"
END_TOO_FAR_FUTURE = "End date cannot be more than 2 years in the future"


@dataclass(frozen=True)
class TreatmentDatePolicy:
    """Window a treatment's dates must fall in, relative to now."""

    max_past_days: int = 365
    max_future_days: int = 730
    notes_max_length: int = 2000

    @classmethod
    def from_settings(cls, settings: Settings) -> "TreatmentDatePolicy":
        return cls(
            max_past_days=settings.TREATMENT_MAX_PAST_DAYS,
            max_future_days=settings.TREATMENT_MAX_FUTURE_DAYS,
            notes_max_length=settings.TREATMENT_NOTES_MAX_LENGTH,
        )

    def validate_window(self, start: datetime, end: datetime | None, now: datetime) -> None:
        """
        Check a new treatment's dates.

        Raises:
            ValidationException: start outside [now - past, now + future],
                end not after start, or end beyond now + future
        """
        if start < now - timedelta(days=self.max_past_days):
            raise ValidationException(START_TOO_FAR_PAST, field="start_date")

        latest = now + timedelta(days=self.max_future_days)
        if start > latest:
            raise ValidationException(START_TOO_FAR_FUTURE, field="start_date")

        if end is not None:
            self.validate_order(start, end)
            if end > latest:
                raise ValidationException(END_TOO_FAR_FUTURE, field="end_date")

    def validate_order(self, start: datetime, end: datetime | None) -> None:
        if end is not None and end <= start:
            raise ValidationException(END_BEFORE_START, field="end_date")

    def validate_notes(self, notes: str | None) -> None:
        if notes is not None and len(notes) > self.notes_max_length:
            raise ValidationException(
                f"Notes cannot exceed {self.notes_max_length} characters", field="notes"
            )
