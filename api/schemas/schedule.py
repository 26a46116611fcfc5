"""
Schedule Schemas
Pydantic models for routine, appointment and day-agenda endpoints
"""

from typing import Optional, List, Dict, Any
from datetime import datetime, date, time
from pydantic import BaseModel, Field, ConfigDict, model_validator

from models import AppointmentType
from tools.label_parser import FoodRule


# ==================== ROUTINE ====================

class RoutineUpdate(BaseModel):
    """Any subset of the routine times"""
    wake_time: Optional[time] = None
    bed_time: Optional[time] = None
    breakfast_time: Optional[time] = None
    lunch_time: Optional[time] = None
    dinner_time: Optional[time] = None


class RoutineResponse(BaseModel):
    """Routine times"""
    wake_time: time = time(7, 0)
    bed_time: time = time(23, 0)
    breakfast_time: time = time(8, 0)
    lunch_time: time = time(13, 0)
    dinner_time: time = time(19, 0)

    model_config = ConfigDict(from_attributes=True)


# ==================== APPOINTMENTS ====================

class AppointmentCreate(BaseModel):
    """Schema for creating an appointment"""
    owner_id: str = Field(..., min_length=1, max_length=64)
    title: str = Field(..., min_length=1, max_length=255)
    type: AppointmentType = AppointmentType.DOCTOR
    scheduled_at: datetime
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class AppointmentResponse(BaseModel):
    """Appointment details"""
    id: str
    owner_id: str
    title: str
    type: AppointmentType
    scheduled_at: datetime
    location: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ==================== AGENDA ====================

class DoseResponse(BaseModel):
    """One medication due at one slot"""
    key: str
    time: datetime
    medication_id: str
    name: str
    dosage: str = ""
    food_rule: FoodRule
    taken: bool = False

    model_config = ConfigDict(from_attributes=True)


class ReminderResponse(BaseModel):
    """A planned notification"""
    id: str
    category: str
    title: str
    body: str
    fire_at: datetime
    data: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)


class AgendaResponse(BaseModel):
    """Day agenda: doses, appointments, reminders"""
    owner_id: str
    day: date
    slot_count: int
    doses: List[DoseResponse]
    appointments: List[AppointmentResponse]
    reminders: List[ReminderResponse]
    interactions_available: bool

    model_config = ConfigDict(from_attributes=True)


class DoseToggleResponse(BaseModel):
    """Result of toggling a dose"""
    key: str
    taken: bool
    cancel_reminder_ids: List[str] = Field(default_factory=list)


# ==================== STATELESS COMPUTE ====================

class ComputeMedication(BaseModel):
    """Inline medication for a one-off schedule computation"""
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    dosage: str = ""
    frequency_per_day: int = Field(default=1, ge=1, le=24)
    start_date: date
    end_date: date
    food_rule: FoodRule = FoodRule.NONE
    ingredients: List[str] = Field(default_factory=list)
    min_interval_hours: Optional[float] = Field(None, gt=0, le=24)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class ComputeRequest(BaseModel):
    """Medications + routine + day"""
    day: date
    routine: RoutineResponse = Field(default_factory=RoutineResponse)
    medications: List[ComputeMedication] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self):
        ids = [m.id for m in self.medications]
        if len(ids) != len(set(ids)):
            raise ValueError("medication ids must be unique")
        return self


class ComputedSlot(BaseModel):
    """One reminder slot"""
    time: datetime
    medications: List[str]


class ComputeResponse(BaseModel):
    """Slots for the requested day"""
    day: date
    slots: List[ComputedSlot]
    interactions_available: bool
