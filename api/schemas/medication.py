"""
Medication Schemas
Pydantic models for medication-related API requests and responses
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict, model_validator

from tools.label_parser import FoodRule


# ==================== BASE SCHEMAS ====================

class MedicationBase(BaseModel):
    """Base medication schema"""
    name: str = Field(..., min_length=1, max_length=255)
    dosage: str = Field(default="", max_length=100)
    frequency_per_day: int = Field(default=1, ge=1, le=24)
    food_rule: FoodRule = FoodRule.NONE
    ingredients: List[str] = Field(default_factory=list)
    min_interval_hours: Optional[float] = Field(None, gt=0, le=24)


# ==================== REQUEST SCHEMAS ====================

class MedicationCreate(MedicationBase):
    """Schema for creating a new medication"""
    owner_id: str = Field(..., min_length=1, max_length=64)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    must_avoid: List[str] = Field(default_factory=list)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class MedicationUpdate(BaseModel):
    """Schema for updating medication"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    dosage: Optional[str] = Field(None, max_length=100)
    frequency_per_day: Optional[int] = Field(None, ge=1, le=24)
    food_rule: Optional[FoodRule] = None
    ingredients: Optional[List[str]] = None
    min_interval_hours: Optional[float] = Field(None, gt=0, le=24)
    must_avoid: Optional[List[str]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None


# ==================== RESPONSE SCHEMAS ====================

class MedicationResponse(MedicationBase):
    """Schema for medication response"""
    id: str
    owner_id: str
    start_date: date
    end_date: date
    must_avoid: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    is_archived: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MedicationList(BaseModel):
    """List of medications"""
    medications: List[MedicationResponse]
    total: int
