"""
Database Models
SQLAlchemy ORM models for MediSchedule
"""

import uuid
from datetime import date, datetime, time
from enum import Enum as PyEnum

from sqlalchemy import Column, Integer, String, Boolean, Float, DateTime, Text, Date, Time, Enum, JSON, Index, UniqueConstraint

from config import TableNames
from database import Base
from tools.anchors import MedicationInput, Routine as RoutineValue
from tools.label_parser import FoodRule


# ==================== ENUMS ====================

class AppointmentType(str, PyEnum):
    """Kinds of calendar appointments"""
    THERAPY = "therapy"
    DOCTOR = "doctor"
    LAB = "lab"


class DoseStatus(str, PyEnum):
    """Status of one scheduled dose"""
    SCHEDULED = "scheduled"
    TAKEN = "taken"
    MISSED = "missed"


def _new_id() -> str:
    return uuid.uuid4().hex


# ==================== MODELS ====================

class Medication(Base):
    """A patient's medication with the scheduling fields the core reads"""
    __tablename__ = TableNames.MEDICATIONS

    id = Column(String(32), primary_key=True, default=_new_id)
    owner_id = Column(String(64), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    dosage = Column(String(100), default="")
    ingredients = Column(JSON, default=list)

    frequency_per_day = Column(Integer, nullable=False, default=1)
    start_date = Column(Date, nullable=False, default=date.today)
    end_date = Column(Date, nullable=False, default=date.today)

    food_rule = Column(Enum(FoodRule), nullable=False, default=FoodRule.NONE)
    min_interval_hours = Column(Float)
    must_avoid = Column(JSON, default=list)  # pre-filled from label parsing
    notes = Column(Text)

    is_archived = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_medications_owner_archived", "owner_id", "is_archived"),
    )

    def to_input(self) -> MedicationInput:
        """Scheduler view of this row"""
        return MedicationInput(
            id=self.id,
            name=self.name,
            frequency_per_day=self.frequency_per_day,
            start_date=self.start_date,
            end_date=self.end_date,
            food_rule=self.food_rule or FoodRule.NONE,
            ingredients=tuple(self.ingredients or ()),
            min_interval_hours=self.min_interval_hours,
            dosage=self.dosage or "",
            notes=self.notes,
        )


class Routine(Base):
    """Daily meal/sleep pattern, one row per owner"""
    __tablename__ = TableNames.ROUTINES

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String(64), unique=True, nullable=False, index=True)

    wake_time = Column(Time, nullable=False, default=time(7, 0))
    bed_time = Column(Time, nullable=False, default=time(23, 0))
    breakfast_time = Column(Time, nullable=False, default=time(8, 0))
    lunch_time = Column(Time, nullable=False, default=time(13, 0))
    dinner_time = Column(Time, nullable=False, default=time(19, 0))

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_value(self) -> RoutineValue:
        """Scheduler view of this row"""
        return RoutineValue(
            wake_time=self.wake_time,
            bed_time=self.bed_time,
            breakfast_time=self.breakfast_time,
            lunch_time=self.lunch_time,
            dinner_time=self.dinner_time,
        )


class Appointment(Base):
    """Calendar appointment shown alongside the day's doses"""
    __tablename__ = TableNames.APPOINTMENTS

    id = Column(String(32), primary_key=True, default=_new_id)
    owner_id = Column(String(64), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    type = Column(Enum(AppointmentType), nullable=False, default=AppointmentType.DOCTOR)
    scheduled_at = Column(DateTime, nullable=False, index=True)
    location = Column(String(255))
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class DoseLog(Base):
    """Taken/missed state for one dose, keyed by medication id and time"""
    __tablename__ = TableNames.DOSE_LOGS

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String(64), nullable=False, index=True)
    dose_key = Column(String(80), nullable=False)
    medication_id = Column(String(32), nullable=False)
    scheduled_at = Column(DateTime, nullable=False)

    status = Column(Enum(DoseStatus), nullable=False, default=DoseStatus.SCHEDULED)
    taken_at = Column(DateTime)

    __table_args__ = (
        UniqueConstraint("owner_id", "dose_key", name="uq_dose_logs_owner_key"),
    )
