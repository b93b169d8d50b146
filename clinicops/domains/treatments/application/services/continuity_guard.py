"""
Treatment Continuity Guard

Keeps every patient on at most one active treatment protocol.

Creation either refuses while another treatment is active, or (with
`auto_end_existing`) closes the active ones one second before the new
start and inserts the new treatment in the same transaction. Updates
that move dates are checked against the patient's other active
treatments with inclusive boundaries. The audit pair
`detect_violations` / `fix_violations` finds and repairs patients who
ended up with several active treatments anyway.
"""

import logging
import math
from collections import defaultdict
from datetime import datetime, timedelta

from clinicops.core.domain import EntityNotFoundException, TreatmentConflictException
from clinicops.core.shared.clock import Clock, ensure_utc, utc_now
from clinicops.domains.shared.application.ports.people_directory import IDoctorDirectory, IPatientDirectory
from clinicops.domains.shared.domain.intervals import overlaps_inclusive
from clinicops.domains.treatments.application.dto.treatment_dtos import (
    ContinuityReport,
    PatientViolation,
    QuickCheckResult,
    RepairAction,
    RepairReport,
    TreatmentChanges,
    TreatmentCreateRequest,
    TreatmentSummary,
    ViolationReport,
)
from clinicops.domains.treatments.application.ports.protocol_directory import IProtocolDirectory
from clinicops.domains.treatments.application.ports.treatment_repository import ITreatmentRepository
from clinicops.domains.treatments.domain.entities.patient_treatment import PatientTreatment
from clinicops.domains.treatments.domain.services.date_policy import TreatmentDatePolicy
from clinicops.domains.treatments.domain.value_objects.treatment_state import RiskLevel

logger = logging.getLogger(__name__)

AUTO_END_GAP = timedelta(seconds=1)

# Continuity thresholds, in whole days
CONTINUOUS_MAX_GAP_DAYS = 7
MEDIUM_RISK_MAX_GAP_DAYS = 14
HIGH_RISK_MAX_GAP_DAYS = 30

NO_VIOLATIONS = "No violations detected."
MULTIPLE_ACTIVE_HINT = "Patient has multiple active treatments. Only one active treatment per patient is allowed."
FUTURE_START_HINT = "Some treatments have a start date in the future. Please review."
INVALID_RANGE_HINT = "Some treatments have invalid date ranges (end date before start date)."


class TreatmentContinuityGuard:
    """
    Entry point for every change to patient treatments.

    Example:
        ```python
        guard = TreatmentContinuityGuard(
            treatment_repository=treatments,
            protocol_directory=protocols,
            patient_directory=patients,
            doctor_directory=doctors,
        )
        treatment = await guard.guard_create(
            TreatmentCreateRequest(patient_id=5, protocol_id=2, doctor_id=3,
                                   start_date=start, auto_end_existing=True)
        )
        ```
    """

    def __init__(
        self,
        treatment_repository: ITreatmentRepository,
        protocol_directory: IProtocolDirectory,
        patient_directory: IPatientDirectory,
        doctor_directory: IDoctorDirectory,
        date_policy: TreatmentDatePolicy | None = None,
        clock: Clock = utc_now,
    ):
        self.treatment_repo = treatment_repository
        self.protocols = protocol_directory
        self.patients = patient_directory
        self.doctors = doctor_directory
        self.date_policy = date_policy or TreatmentDatePolicy()
        self._clock = clock

    # ============================================================
    # GUARDED WRITES
    # ============================================================

    async def guard_create(self, request: TreatmentCreateRequest) -> PatientTreatment:
        """
        Create a treatment, enforcing the single-active-protocol rule.

        Args:
            request: New treatment; `auto_end_existing` ends active ones

        Returns:
            Persisted treatment

        Raises:
            TreatmentConflictException: active treatment exists and
                auto-end is off, or an active one started after the
                auto-end cutoff
            ValidationException: dates or notes out of range
            EntityNotFoundException: patient, doctor or protocol missing
        """
        now = self._clock()
        start = ensure_utc(request.start_date)
        end = ensure_utc(request.end_date) if request.end_date is not None else None
        self.date_policy.validate_notes(request.notes)

        active = await self.treatment_repo.find_active(now, patient_id=request.patient_id)
        if active and not request.auto_end_existing:
            protocol_ids = sorted({t.protocol_id for t in active})
            raise TreatmentConflictException(
                f"Business rule violation: Patient {request.patient_id} already has {len(active)} "
                f"active treatment(s) with protocol(s): {', '.join(str(p) for p in protocol_ids)}. "
                "Only 1 active protocol is allowed per patient. "
                "Please end existing treatments first or use auto_end_existing=true parameter.",
                treatment_ids=[t.id for t in active if t.id is not None],
                protocol_ids=protocol_ids,
            )

        cutoff = start - AUTO_END_GAP
        for treatment in active:
            if treatment.start_date is not None and cutoff < treatment.start_date:
                raise TreatmentConflictException(
                    f"Cannot auto-end treatment ID {treatment.id}: "
                    "New treatment start date must be after existing treatment start date",
                    treatment_ids=[treatment.id] if treatment.id is not None else [],
                    protocol_ids=[treatment.protocol_id],
                )

        self.date_policy.validate_window(start, end, now)
        await self._ensure_references(request.patient_id, request.doctor_id, request.protocol_id)

        new_treatment = PatientTreatment(
            patient_id=request.patient_id,
            protocol_id=request.protocol_id,
            doctor_id=request.doctor_id,
            start_date=start,
            end_date=end,
            custom_medications=request.custom_medications,
            total=request.total,
            notes=request.notes,
            created_by_id=request.created_by_id,
        )

        async with self.treatment_repo.atomic():
            for treatment in active:
                treatment.end_at(cutoff)
                await self.treatment_repo.save(treatment, commit=False)
                logger.info(
                    f"Auto-ended treatment {treatment.id} of patient {treatment.patient_id} "
                    f"at {cutoff.isoformat()}"
                )
            saved = await self.treatment_repo.save(new_treatment, commit=False)

        logger.info(
            f"Treatment {saved.id} created: patient={saved.patient_id} protocol={saved.protocol_id} "
            f"start={start.isoformat()} auto_ended={len(active)}"
        )
        return saved

    async def guard_update(self, treatment_id: int, changes: TreatmentChanges) -> PatientTreatment:
        """
        Update a treatment. Date changes are checked for overlap with the
        patient's other active treatments.

        Raises:
            EntityNotFoundException: unknown treatment, doctor or protocol
            ValidationException: notes too long or end not after start
            TreatmentConflictException: new dates overlap another active treatment
        """
        treatment = await self.get(treatment_id)
        self.date_policy.validate_notes(changes.notes)

        new_start = ensure_utc(changes.start_date) if changes.start_date is not None else treatment.period.start
        if changes.clear_end_date:
            new_end = None
        elif changes.end_date is not None:
            new_end = ensure_utc(changes.end_date)
        else:
            new_end = treatment.end_date
        self.date_policy.validate_order(new_start, new_end)

        if changes.touches_dates:
            await self._check_update_overlap(treatment, new_start, new_end)

        if changes.protocol_id is not None and changes.protocol_id != treatment.protocol_id:
            if await self.protocols.find_by_id(changes.protocol_id) is None:
                raise EntityNotFoundException(
                    "TreatmentProtocol",
                    changes.protocol_id,
                    f"Treatment protocol with ID {changes.protocol_id} not found",
                )
            treatment.protocol_id = changes.protocol_id
        if changes.doctor_id is not None and changes.doctor_id != treatment.doctor_id:
            if await self.doctors.find_by_id(changes.doctor_id) is None:
                raise EntityNotFoundException("Doctor", changes.doctor_id, f"Doctor with ID {changes.doctor_id} not found")
            treatment.doctor_id = changes.doctor_id

        treatment.start_date = new_start
        treatment.end_date = new_end
        if changes.custom_medications is not None:
            treatment.custom_medications = changes.custom_medications
        if changes.total is not None:
            treatment.total = changes.total
        if changes.notes is not None:
            treatment.notes = changes.notes
        treatment.touch()

        saved = await self.treatment_repo.save(treatment)
        logger.info(
            f"Treatment {saved.id} updated: start={new_start.isoformat()} "
            f"end={new_end.isoformat() if new_end else None}"
        )
        return saved

    # ============================================================
    # AUDIT AND REPAIR
    # ============================================================

    async def detect_violations(self) -> ViolationReport:
        """Patients with more than one treatment active right now."""
        groups = await self._violating_groups(self._clock())
        violating = [
            PatientViolation(
                patient_id=patient_id,
                active_treatment_count=len(treatments),
                treatments=[self._summarize(t) for t in treatments],
                protocols=list(dict.fromkeys(t.protocol_id for t in treatments)),
            )
            for patient_id, treatments in groups.items()
        ]
        if violating:
            logger.warning(f"{len(violating)} patients have more than one active treatment")
        return ViolationReport(total_violations=len(violating), violating_patients=violating)

    async def fix_violations(self, dry_run: bool = True) -> RepairReport:
        """
        Keep each violating patient's newest treatment and end the others now.

        Nothing is written on a dry run; the report lists what would change.
        A failure for one patient is recorded and the next patient is tried.
        """
        now = self._clock()
        groups = await self._violating_groups(now)
        actions: list[RepairAction] = []
        errors: list[str] = []
        treatments_ended = 0

        for patient_id, treatments in groups.items():
            newest_first = sorted(treatments, key=lambda t: t.start_date or now, reverse=True)
            to_end = newest_first[1:]
            if not dry_run:
                try:
                    # One unit of work per patient; a failed patient leaves the session usable
                    async with self.treatment_repo.atomic():
                        for treatment in to_end:
                            treatment.end_at(now)
                            await self.treatment_repo.save(treatment, commit=False)
                except Exception as e:
                    logger.error(f"Repair failed for patient {patient_id}: {e}")
                    errors.append(f"Failed to fix violations for patient {patient_id}: {e}")
                    continue
                logger.info(f"Ended treatments {[t.id for t in to_end]} of patient {patient_id} during repair")

            actions.extend(
                RepairAction(
                    patient_id=patient_id,
                    treatment_id=treatment.id or 0,
                    protocol_id=treatment.protocol_id,
                    new_end_date=now.isoformat(),
                )
                for treatment in to_end
            )
            treatments_ended += len(to_end)

        return RepairReport(
            processed_patients=len(groups),
            treatments_ended=treatments_ended,
            errors=errors,
            actions=actions,
            dry_run=dry_run,
        )

    async def quick_check(self, patient_id: int) -> QuickCheckResult:
        """Flag obvious inconsistencies among a patient's unfinished treatments."""
        now = self._clock()
        unfinished = [
            t for t in await self.treatment_repo.find_by_patient(patient_id) if t.end_date is None or t.end_date > now
        ]

        multiple_active = len(unfinished) > 1
        future_dates = any(t.start_date is not None and t.start_date > now for t in unfinished)
        invalid_ranges = any(
            t.end_date is not None and t.start_date is not None and t.end_date < t.start_date for t in unfinished
        )

        hints = [
            hint
            for flagged, hint in (
                (multiple_active, MULTIPLE_ACTIVE_HINT),
                (future_dates, FUTURE_START_HINT),
                (invalid_ranges, INVALID_RANGE_HINT),
            )
            if flagged
        ]
        return QuickCheckResult(
            patient_id=patient_id,
            has_active_violations=bool(hints),
            active_violations_count=len(hints),
            multiple_active=multiple_active,
            future_dates=future_dates,
            invalid_ranges=invalid_ranges,
            recommendation=" ".join(hints) if hints else NO_VIOLATIONS,
        )

    async def continuity_check(self, patient_id: int, start: datetime) -> ContinuityReport:
        """
        Measure the gap between `start` and the end of the patient's
        previous treatment. Ongoing previous treatments count as ending now.
        """
        start = ensure_utc(start)
        earlier = [
            t
            for t in await self.treatment_repo.find_by_patient(patient_id)
            if t.start_date is not None and t.start_date < start
        ]
        if not earlier:
            return ContinuityReport(
                patient_id=patient_id,
                is_continuous=True,
                gap_days=None,
                risk_level=RiskLevel.LOW,
                recommendations=["First treatment for patient - no continuity concerns"],
            )

        previous = max(earlier, key=lambda t: t.start_date or start)
        previous_end = previous.end_date or self._clock()
        gap_days = math.floor((start - previous_end).total_seconds() / 86400)

        if gap_days <= CONTINUOUS_MAX_GAP_DAYS:
            risk, recommendations = RiskLevel.LOW, []
        elif gap_days <= MEDIUM_RISK_MAX_GAP_DAYS:
            risk, recommendations = RiskLevel.MEDIUM, ["Short treatment gap detected - monitor closely"]
        elif gap_days <= HIGH_RISK_MAX_GAP_DAYS:
            risk, recommendations = RiskLevel.HIGH, ["Treatment gap >14 days - monitor for viral rebound"]
        else:
            risk, recommendations = RiskLevel.CRITICAL, [
                "Treatment gap >30 days - high risk of viral rebound",
                "Consider resistance testing before restarting",
            ]

        return ContinuityReport(
            patient_id=patient_id,
            is_continuous=gap_days <= CONTINUOUS_MAX_GAP_DAYS,
            gap_days=gap_days,
            risk_level=risk,
            previous_treatment_id=previous.id,
            previous_end_date=previous_end,
            recommendations=recommendations,
        )

    # ============================================================
    # QUERIES
    # ============================================================

    async def get(self, treatment_id: int) -> PatientTreatment:
        treatment = await self.treatment_repo.find_by_id(treatment_id)
        if treatment is None:
            raise EntityNotFoundException(
                "PatientTreatment", treatment_id, f"Patient treatment with ID {treatment_id} not found"
            )
        return treatment

    # ============================================================
    # HELPERS
    # ============================================================

    async def _ensure_references(self, patient_id: int, doctor_id: int, protocol_id: int) -> None:
        if await self.patients.find_by_id(patient_id) is None:
            raise EntityNotFoundException("Patient", patient_id, f"Patient with ID {patient_id} not found")
        if await self.doctors.find_by_id(doctor_id) is None:
            raise EntityNotFoundException("Doctor", doctor_id, f"Doctor with ID {doctor_id} not found")
        if await self.protocols.find_by_id(protocol_id) is None:
            raise EntityNotFoundException(
                "TreatmentProtocol", protocol_id, f"Treatment protocol with ID {protocol_id} not found"
            )

    async def _check_update_overlap(
        self, treatment: PatientTreatment, new_start: datetime, new_end: datetime | None
    ) -> None:
        now = self._clock()
        if new_end is not None and new_end <= now:
            return

        others = [
            t for t in await self.treatment_repo.find_active(now, patient_id=treatment.patient_id) if t.id != treatment.id
        ]
        for other in others:
            if other.start_date is None:
                continue
            if overlaps_inclusive(new_start, new_end, other.start_date, other.end_date, open_end=now):
                raise TreatmentConflictException(
                    f"Updated dates overlap active treatment ID {other.id} with protocol {other.protocol_id}. "
                    "Only 1 active protocol is allowed per patient.",
                    treatment_ids=[other.id] if other.id is not None else [],
                    protocol_ids=[other.protocol_id],
                )

    async def _violating_groups(self, now: datetime) -> dict[int, list[PatientTreatment]]:
        by_patient: dict[int, list[PatientTreatment]] = defaultdict(list)
        for treatment in await self.treatment_repo.find_active(now):
            by_patient[treatment.patient_id].append(treatment)
        return {pid: treatments for pid, treatments in by_patient.items() if len(treatments) > 1}

    @staticmethod
    def _summarize(treatment: PatientTreatment) -> TreatmentSummary:
        return TreatmentSummary(
            id=treatment.id or 0,
            protocol_id=treatment.protocol_id,
            start_date=treatment.start_date,  # type: ignore[arg-type]
            end_date=treatment.end_date,
        )
