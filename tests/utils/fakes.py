"""
In-memory implementations of the scheduling and treatment ports.

They keep just enough state to exercise the services end to end without
a database. Stored entities are copied on the way in and out so tests
observe only what was explicitly saved.
"""

import copy
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from datetime import date, datetime

from clinicops.core.domain import AppointmentConflictException
from clinicops.domains.scheduling.application.ports.meeting_port import MeetingLinks
from clinicops.domains.scheduling.domain.entities.appointment import Appointment
from clinicops.domains.scheduling.domain.entities.clinic_service import ClinicService
from clinicops.domains.scheduling.domain.entities.doctor_schedule import DoctorSchedule, DoctorShifts
from clinicops.domains.scheduling.domain.value_objects.appointment_status import AppointmentStatus
from clinicops.domains.scheduling.domain.value_objects.shift import Shift
from clinicops.domains.shared.domain.intervals import overlaps_half_open
from clinicops.domains.shared.domain.people import Doctor, Patient
from clinicops.domains.treatments.domain.entities.patient_treatment import PatientTreatment
from clinicops.domains.treatments.domain.entities.treatment_protocol import TreatmentProtocol


class InMemoryPatientDirectory:
    def __init__(self, patients: Iterable[Patient] = ()):
        self._patients = {p.id: p for p in patients}

    async def find_by_id(self, patient_id: int) -> Patient | None:
        return self._patients.get(patient_id)


class InMemoryDoctorDirectory:
    def __init__(self, doctors: Iterable[Doctor] = ()):
        self._doctors = {d.id: d for d in doctors}

    async def find_by_id(self, doctor_id: int) -> Doctor | None:
        return self._doctors.get(doctor_id)


class InMemoryServiceCatalog:
    def __init__(self, services: Iterable[ClinicService] = ()):
        self._services = {s.id: s for s in services}

    async def find_by_id(self, service_id: int) -> ClinicService | None:
        return self._services.get(service_id)


class InMemoryProtocolDirectory:
    def __init__(self, protocols: Iterable[TreatmentProtocol] = ()):
        self._protocols = {p.id: p for p in protocols}

    async def find_by_id(self, protocol_id: int) -> TreatmentProtocol | None:
        return self._protocols.get(protocol_id)


class InMemoryShiftDirectory:
    """Roster in insertion order; records which candidates were pulled."""

    def __init__(self, schedules: Iterable[DoctorSchedule] = ()):
        self.schedules = list(schedules)
        self.yielded: list[int] = []

    def add(self, doctor_id: int, work_date: date, shift: Shift, is_off: bool = False) -> "InMemoryShiftDirectory":
        self.schedules.append(
            DoctorSchedule(id=len(self.schedules) + 1, doctor_id=doctor_id, work_date=work_date, shift=shift, is_off=is_off)
        )
        return self

    async def find_by_date(self, work_date: date) -> list[DoctorSchedule]:
        return [s for s in self.schedules if s.work_date == work_date and not s.is_off]

    async def find_doctors_working(self, work_date: date) -> list[DoctorShifts]:
        grouped: dict[int, DoctorShifts] = {}
        for schedule in await self.find_by_date(work_date):
            grouped.setdefault(schedule.doctor_id, DoctorShifts(doctor_id=schedule.doctor_id)).schedules.append(
                schedule
            )
        return list(grouped.values())

    async def iter_candidates(self, work_date: date, shift: Shift) -> AsyncIterator[int]:
        for schedule in self.schedules:
            if schedule.covers(work_date, shift):
                self.yielded.append(schedule.doctor_id)
                yield schedule.doctor_id

    async def has_shift(self, doctor_id: int, work_date: date, shift: Shift) -> bool:
        return any(s.doctor_id == doctor_id and s.covers(work_date, shift) for s in self.schedules)


class InMemoryAppointmentRepository:
    """
    Appointment store that also enforces the active-slot uniqueness the
    database index provides.
    """

    def __init__(self):
        self._rows: dict[int, Appointment] = {}
        self._next_id = 1
        self.saved: list[Appointment] = []

    @property
    def rows(self) -> list[Appointment]:
        return [copy.deepcopy(a) for a in self._rows.values()]

    async def find_by_id(self, appointment_id: int) -> Appointment | None:
        row = self._rows.get(appointment_id)
        return copy.deepcopy(row) if row else None

    async def find_conflicting(
        self,
        doctor_id: int,
        slot_start: datetime,
        slot_end: datetime,
        statuses: Iterable[AppointmentStatus],
        exclude_id: int | None = None,
    ) -> list[Appointment]:
        wanted = set(statuses)
        return [
            copy.deepcopy(a)
            for a in self._rows.values()
            if a.doctor_id == doctor_id
            and a.status in wanted
            and a.id != exclude_id
            and a.appointment_time is not None
            and overlaps_half_open(a.appointment_time, a.slot_end, slot_start, slot_end)
        ]

    async def find_by_doctor(self, doctor_id: int, limit: int = 50) -> list[Appointment]:
        rows = [a for a in self._rows.values() if a.doctor_id == doctor_id]
        rows.sort(key=lambda a: a.appointment_time, reverse=True)
        return [copy.deepcopy(a) for a in rows[:limit]]

    async def find_by_patient(self, user_id: int, limit: int = 50) -> list[Appointment]:
        rows = [a for a in self._rows.values() if a.user_id == user_id]
        rows.sort(key=lambda a: a.appointment_time, reverse=True)
        return [copy.deepcopy(a) for a in rows[:limit]]

    async def set_status(self, appointment_id: int, status: AppointmentStatus) -> Appointment | None:
        row = self._rows.get(appointment_id)
        if row is None:
            return None
        row.status = status
        return copy.deepcopy(row)

    async def save(self, appointment: Appointment) -> Appointment:
        if appointment.holds_slot:
            for other in self._rows.values():
                if (
                    other.id != appointment.id
                    and other.holds_slot
                    and other.doctor_id == appointment.doctor_id
                    and other.appointment_time == appointment.appointment_time
                ):
                    raise AppointmentConflictException(
                        doctor_id=appointment.doctor_id, message="This slot is already booked"
                    )

        stored = copy.deepcopy(appointment)
        if stored.id is None:
            stored.id = self._next_id
            self._next_id += 1
        self._rows[stored.id] = stored
        self.saved.append(copy.deepcopy(stored))
        return copy.deepcopy(stored)


class InMemoryTreatmentRepository:
    """
    Treatment store with a snapshot-based unit of work.

    `fail_on_insert` makes the next insert raise, to exercise rollback.
    """

    def __init__(self, treatments: Iterable[PatientTreatment] = ()):
        self._rows: dict[int, PatientTreatment] = {}
        self._next_id = 1
        self.fail_on_insert = False
        self.fail_on_update_ids: set[int] = set()
        self.commits = 0
        self.rollbacks = 0
        for treatment in treatments:
            self._store(copy.deepcopy(treatment))

    def _store(self, treatment: PatientTreatment) -> PatientTreatment:
        if treatment.id is None:
            treatment.id = self._next_id
        self._next_id = max(self._next_id, treatment.id + 1)
        self._rows[treatment.id] = treatment
        return treatment

    def get(self, treatment_id: int) -> PatientTreatment:
        return copy.deepcopy(self._rows[treatment_id])

    @property
    def rows(self) -> list[PatientTreatment]:
        return [copy.deepcopy(t) for t in self._rows.values()]

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        snapshot = copy.deepcopy(self._rows)
        next_id = self._next_id
        try:
            yield
        except Exception:
            self._rows = snapshot
            self._next_id = next_id
            self.rollbacks += 1
            raise
        self.commits += 1

    async def find_by_id(self, treatment_id: int) -> PatientTreatment | None:
        row = self._rows.get(treatment_id)
        return copy.deepcopy(row) if row else None

    async def find_active(self, now: datetime, patient_id: int | None = None) -> list[PatientTreatment]:
        rows = [
            t
            for t in self._rows.values()
            if (patient_id is None or t.patient_id == patient_id) and t.is_active(now)
        ]
        rows.sort(key=lambda t: (t.patient_id, t.start_date))
        return [copy.deepcopy(t) for t in rows]

    async def find_by_patient(self, patient_id: int) -> list[PatientTreatment]:
        rows = sorted((t for t in self._rows.values() if t.patient_id == patient_id), key=lambda t: t.start_date)
        return [copy.deepcopy(t) for t in rows]

    async def save(self, treatment: PatientTreatment, commit: bool = True) -> PatientTreatment:
        if treatment.id is None and self.fail_on_insert:
            raise RuntimeError("insert failed")
        if treatment.id in self.fail_on_update_ids:
            raise RuntimeError(f"update of treatment {treatment.id} failed")
        stored = self._store(copy.deepcopy(treatment))
        if commit:
            self.commits += 1
        return copy.deepcopy(stored)


class RecordingMeetingProvider:
    def __init__(self, fail_with: Exception | None = None):
        self.fail_with = fail_with
        self.calls: list[tuple[str, int, int]] = []

    async def create_meeting(self, room_id: str, patient_id: int, doctor_id: int) -> MeetingLinks:
        self.calls.append((room_id, patient_id, doctor_id))
        if self.fail_with is not None:
            raise self.fail_with
        return MeetingLinks(
            room_id=room_id,
            patient_url=f"https://meet.test/meeting?roomId={room_id}&token=patient",
            doctor_url=f"https://meet.test/meeting?roomId={room_id}&token=doctor",
        )


class RecordingNotifier:
    def __init__(self, fail_with: Exception | None = None):
        self.fail_with = fail_with
        self.sent: list[tuple[str, str]] = []

    async def send_meeting_link(self, email: str, meeting_url: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((email, meeting_url))
