# -*- coding: utf-8 -*-
"""Profile — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ProteinGoal(str, Enum):
    weight_loss = "weight_loss"
    maintenance = "maintenance"
    muscle_gain = "muscle_gain"


class SyncDirection(str, Enum):
    TO_LOCAL = "toLocal"
    TO_REMOTE = "toRemote"


class ProfileData(BaseModel):
    """Profile fields the protein recommendation is derived from."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    weight: float = Field(..., gt=0, le=500, description="kg")
    height: float = Field(..., gt=0, le=300, description="cm")
    age: int = Field(..., ge=0, le=150)
    gender: str = "male"
    activity_level: str = Field(
        "moderate",
        validation_alias=AliasChoices("activity_level", "activityLevel"),
        description="sedentary | light | moderate | active | very_active",
    )
    goal: ProteinGoal = ProteinGoal.maintenance


DEFAULT_PROFILE = ProfileData(
    weight=70,
    height=175,
    age=30,
    gender="male",
    activity_level="moderate",
    goal=ProteinGoal.maintenance,
)


class RemoteProfile(BaseModel):
    """Profile document as stored in the external document store (camelCase)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    weight: float = 70
    height: float = 175
    age: int = 30
    gender: str = "male"
    activity_level: str = Field("moderate", alias="activityLevel")
    fitness_goal: Optional[str] = Field(None, alias="fitnessGoal")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "RemoteProfile":
        # Empty values in the document fall back to the defaults above.
        cleaned = {k: v for k, v in document.items() if v not in (None, "", 0)}
        return cls.model_validate(cleaned)


class NutritionRecommendation(BaseModel):
    recommended: int = Field(..., ge=0, description="g/day")
    current: float = Field(0.0, ge=0, description="g protein logged on last_updated")
    weight: float
    height: float
    age: int
    gender: str
    activity_level: str
    goal: ProteinGoal
    last_updated: str = Field(..., description="YYYY-MM-DD")


class SyncRequest(BaseModel):
    profile: ProfileData
    direction: SyncDirection = SyncDirection.TO_REMOTE


class SyncResponse(BaseModel):
    status: str = Field(..., description="ok | dropped")
    reason: Optional[str] = None
    recommendation: Optional[NutritionRecommendation] = None
