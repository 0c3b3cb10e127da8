# -*- coding: utf-8 -*-
"""Food log — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..engine import NutritionEngine, get_engine
from ..errors import ValidationError
from .catalog import search_foods
from .models import (
    CatalogSearchResponse,
    DailyLogResponse,
    FoodEntry,
    FoodItem,
    MealType,
    RemoveEntryResponse,
    StoredDaysResponse,
)

router = APIRouter(prefix="/api/foodlog", tags=["Food log"])
foods_router = APIRouter(prefix="/api/foods", tags=["Food log"])


def _daily_log(engine: NutritionEngine, day: str) -> DailyLogResponse:
    try:
        entries, totals = engine.mutator.get_day(day)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return DailyLogResponse(date=day, entries=entries, totals=totals)


@router.get("/today", response_model=DailyLogResponse, summary="Today's food log and totals")
def get_today(engine: NutritionEngine = Depends(get_engine)):
    return _daily_log(engine, engine.mutator.today())


@router.get("/days", response_model=StoredDaysResponse, summary="Days that have a stored log")
def list_days(engine: NutritionEngine = Depends(get_engine)):
    dates = engine.log_store.dates()
    return StoredDaysResponse(count=len(dates), dates=dates)


@router.get("/{day}", response_model=DailyLogResponse, summary="Food log for a day")
def get_day(day: str, engine: NutritionEngine = Depends(get_engine)):
    return _daily_log(engine, day)


@router.post("/{day}/entries", response_model=FoodEntry, summary="Add a food entry")
def add_entry(day: str, item: FoodItem, engine: NutritionEngine = Depends(get_engine)):
    try:
        return engine.mutator.add(day, item)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/{day}/catalog/{food_id}", response_model=FoodEntry, summary="Add a catalog food")
def add_catalog_entry(
    day: str,
    food_id: str,
    servings: float = Query(default=1.0, gt=0, le=50),
    meal_type: MealType = Query(default=MealType.snack),
    engine: NutritionEngine = Depends(get_engine),
):
    try:
        return engine.mutator.add_from_catalog(day, food_id, servings=servings, meal_type=meal_type)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.delete("/{day}/entries/{entry_id}", response_model=RemoveEntryResponse, summary="Remove a food entry")
def remove_entry(day: str, entry_id: str, engine: NutritionEngine = Depends(get_engine)):
    try:
        with engine.mutator.lock:
            removed = engine.mutator.remove(day, entry_id)
            totals = engine.mutator.get_totals(day)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return RemoveEntryResponse(date=day, entry_id=entry_id, removed=removed, totals=totals)


@foods_router.get("", response_model=CatalogSearchResponse, summary="Search the food catalog")
def search(query: str | None = Query(default=None, max_length=100)):
    foods = search_foods(query)
    return CatalogSearchResponse(count=len(foods), foods=foods)
