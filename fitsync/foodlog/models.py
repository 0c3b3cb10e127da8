# -*- coding: utf-8 -*-
"""Food log — Pydantic models."""

from __future__ import annotations

import re
from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ValidationError

_DAY_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_day_key(value: str) -> str:
    """Return ``value`` if it is a real ``YYYY-MM-DD`` calendar date."""
    if not isinstance(value, str) or not _DAY_KEY_RE.match(value):
        raise ValidationError(f"Invalid day key: {value!r} (expected YYYY-MM-DD)")
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid day key: {value!r} ({exc})") from exc
    return value


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


class NutritionTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    protein_g: float = Field(0.0, ge=0)
    calories_kcal: float = Field(0.0, ge=0)
    carbs_g: float = Field(0.0, ge=0)
    fat_g: float = Field(0.0, ge=0)


class FoodItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, description="Food name, e.g. 'Chicken Breast'")
    protein_g: float = Field(..., ge=0, allow_inf_nan=False)
    calories_kcal: float = Field(0.0, ge=0, allow_inf_nan=False)
    carbs_g: float = Field(0.0, ge=0, allow_inf_nan=False)
    fat_g: float = Field(0.0, ge=0, allow_inf_nan=False)
    serving_size_g: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    meal_type: MealType = MealType.snack


class FoodEntry(FoodItem):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    timestamp: str = Field(..., description="ISO8601 timestamp (UTC)")


class DailyLogResponse(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    entries: List[FoodEntry] = Field(default_factory=list)
    totals: NutritionTotals = Field(default_factory=NutritionTotals)


class RemoveEntryResponse(BaseModel):
    date: str
    entry_id: str
    removed: bool
    totals: NutritionTotals


class StoredDaysResponse(BaseModel):
    count: int
    dates: List[str]


class CatalogFood(BaseModel):
    id: str
    name: str
    protein_g: float = Field(..., ge=0)
    calories_kcal: float = Field(0.0, ge=0)
    carbs_g: float = Field(0.0, ge=0)
    fat_g: float = Field(0.0, ge=0)
    serving_size_g: float = Field(100.0, gt=0)
    serving_unit: str = "g"


class CatalogSearchResponse(BaseModel):
    count: int
    foods: List[CatalogFood]
