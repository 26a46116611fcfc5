"""
Services Module
Business logic layer for the MediSchedule application
"""

from services.medication_service import MedicationService, medication_service
from services.routine_service import RoutineService, routine_service
from services.appointment_service import AppointmentService, appointment_service
from services.schedule_service import ScheduleService, schedule_service, DayAgenda, DoseRow


__all__ = [
    # Service classes
    "MedicationService",
    "RoutineService",
    "AppointmentService",
    "ScheduleService",
    "DayAgenda",
    "DoseRow",
    # Singleton instances
    "medication_service",
    "routine_service",
    "appointment_service",
    "schedule_service",
]
