"""
Treatments API
"""

from clinicops.domains.treatments.api.routes import router

__all__ = ["router"]
