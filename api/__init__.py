"""
API Module
FastAPI routers for the MediSchedule application
"""

from api.medications import router as medications_router
from api.routine import router as routine_router
from api.appointments import router as appointments_router
from api.schedules import router as schedules_router
from api.labels import router as labels_router
from api.interactions import router as interactions_router

from api.deps import get_db, services


__all__ = [
    # Routers
    "medications_router",
    "routine_router",
    "appointments_router",
    "schedules_router",
    "labels_router",
    "interactions_router",
    # Dependencies
    "get_db",
    "services",
]


def include_routers(app, prefix: str = "/api/v1"):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(medications_router, prefix=prefix)
    app.include_router(routine_router, prefix=prefix)
    app.include_router(appointments_router, prefix=prefix)
    app.include_router(schedules_router, prefix=prefix)
    app.include_router(labels_router, prefix=prefix)
    app.include_router(interactions_router, prefix=prefix)
