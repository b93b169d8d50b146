from fastapi import APIRouter

from clinicops.domains.scheduling.api import router as scheduling_router
from clinicops.domains.treatments.api import router as treatments_router

api_router = APIRouter()

api_router.include_router(scheduling_router)
api_router.include_router(treatments_router)
