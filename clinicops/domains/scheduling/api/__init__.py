"""
Scheduling API
"""

from clinicops.domains.scheduling.api.routes import router

__all__ = ["router"]
