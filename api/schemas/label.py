"""
Label & Interaction Schemas
Pydantic models for label parsing, label lookup and interaction checks
"""

from typing import Optional, List
from pydantic import BaseModel, Field

from tools.label_parser import FoodRule


class LabelParseRequest(BaseModel):
    """Free label text to parse"""
    text: str = ""


class LabelParseResponse(BaseModel):
    """Rule fields extracted from label text"""
    food_rule: FoodRule
    min_interval_hours: Optional[float] = None
    frequency_per_day: Optional[int] = None
    must_avoid: List[str] = Field(default_factory=list)


class EssentialsResponse(BaseModel):
    """Summarized label card"""
    title: str
    quick_tips: List[str]
    what_for: List[str]
    how_to_take: List[str]
    common_side_effects: List[str]
    important_warnings: List[str]
    interactions_to_avoid: List[str]
    ingredients: List[str]


class LabelResponse(BaseModel):
    """Label lookup result"""
    name: str
    found: bool
    essentials: EssentialsResponse
    rule: LabelParseResponse


class StrengthsResponse(BaseModel):
    """Marketed strengths for a medication"""
    name: str
    strengths: List[str]


class InteractionMedication(BaseModel):
    """Medication reference for interaction checks"""
    name: str = Field(..., min_length=1)
    ingredients: List[str] = Field(default_factory=list)


class InteractionCheckRequest(BaseModel):
    """Medications to check against each other"""
    medications: List[InteractionMedication]


class ConflictResponse(BaseModel):
    """A single conflict"""
    med_a: str
    med_b: str
    kind: str
    separation_hours: Optional[float] = None
    explanation: str


class InteractionCheckResponse(BaseModel):
    """Conflicts among the given medications"""
    medications_checked: List[str]
    has_conflicts: bool
    conflicts: List[ConflictResponse]
    rules_loaded: bool
