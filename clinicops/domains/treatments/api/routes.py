"""
Treatments API Routes

FastAPI router for patient treatment endpoints.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from clinicops.core.shared.clock import utc_now
from clinicops.domains.treatments.api.dependencies import get_continuity_guard
from clinicops.domains.treatments.api.schemas import (
    ContinuityResponse,
    QuickCheckResponse,
    RepairReportResponse,
    TreatmentCreate,
    TreatmentResponse,
    TreatmentUpdate,
    ViolationReportResponse,
)
from clinicops.domains.treatments.application.services import TreatmentContinuityGuard

router = APIRouter(prefix="/treatments", tags=["Treatments"])

ContinuityGuardDep = Annotated[TreatmentContinuityGuard, Depends(get_continuity_guard)]


@router.post("", response_model=TreatmentResponse, status_code=201)
async def create_treatment(
    request: TreatmentCreate,
    guard: ContinuityGuardDep,
    auto_end_existing: bool = Query(default=False, description="End the patient's active treatments first"),
):
    """Start a treatment for a patient."""
    treatment = await guard.guard_create(request.to_dto(auto_end_existing))
    return TreatmentResponse.from_entity(treatment, utc_now())


@router.get("/violations", response_model=ViolationReportResponse)
async def detect_violations(guard: ContinuityGuardDep):
    """List patients with more than one active treatment."""
    return ViolationReportResponse.from_report(await guard.detect_violations())


@router.post("/violations/fix", response_model=RepairReportResponse)
async def fix_violations(
    guard: ContinuityGuardDep,
    dry_run: bool = Query(default=True, description="Only report what would change"),
):
    """End all but the newest active treatment of each violating patient."""
    return RepairReportResponse.from_report(await guard.fix_violations(dry_run=dry_run))


@router.get("/patients/{patient_id}/quick-check", response_model=QuickCheckResponse)
async def quick_check(patient_id: int, guard: ContinuityGuardDep):
    return QuickCheckResponse.from_result(await guard.quick_check(patient_id))


@router.get("/patients/{patient_id}/continuity", response_model=ContinuityResponse)
async def continuity_check(
    patient_id: int,
    guard: ContinuityGuardDep,
    start: datetime = Query(..., description="Planned start of the next treatment"),
):
    """Gap and risk level between the previous treatment and `start`."""
    return ContinuityResponse.from_report(await guard.continuity_check(patient_id, start))


@router.get("/{treatment_id}", response_model=TreatmentResponse)
async def get_treatment(treatment_id: int, guard: ContinuityGuardDep):
    return TreatmentResponse.from_entity(await guard.get(treatment_id), utc_now())


@router.patch("/{treatment_id}", response_model=TreatmentResponse)
async def update_treatment(treatment_id: int, request: TreatmentUpdate, guard: ContinuityGuardDep):
    """Update a treatment; date changes are checked against other active treatments."""
    treatment = await guard.guard_update(treatment_id, request.to_dto())
    return TreatmentResponse.from_entity(treatment, utc_now())
