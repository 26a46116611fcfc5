"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from database import get_db  # noqa: F401  re-exported for routers and test overrides


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_medication_service():
        from services.medication_service import medication_service
        return medication_service

    @staticmethod
    def get_routine_service():
        from services.routine_service import routine_service
        return routine_service

    @staticmethod
    def get_appointment_service():
        from services.appointment_service import appointment_service
        return appointment_service

    @staticmethod
    def get_schedule_service():
        from services.schedule_service import schedule_service
        return schedule_service


# Service dependency instances
services = ServiceDependency()
