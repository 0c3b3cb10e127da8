# -*- coding: utf-8 -*-
"""Food log — add/remove operations that keep log, cache and recommendation in step."""

from __future__ import annotations

import logging
import math
import threading
from datetime import date, datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from ..errors import ValidationError
from ..events import EventBus, EventKind
from ..profile.models import NutritionRecommendation
from ..profile.storage import RecommendationStore
from .cache import ComputationCache
from .catalog import get_food
from .models import FoodEntry, FoodItem, MealType, NutritionTotals, validate_day_key
from .storage import PersistentLogStore

logger = logging.getLogger(__name__)


def local_today() -> str:
    return date.today().isoformat()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class FoodLogMutator:
    """The only writer of the food log and of ``NutritionRecommendation.current``.

    Every mutation runs the same sequence: store write, cache invalidate and
    recompute, ``current`` update for the active day, then events. Subscribers
    therefore always observe totals that match the stored log.

    HTTP handlers call in from worker threads, so each operation runs under
    ``lock``. The lock is reentrant: event handlers may call back in.
    """

    def __init__(
        self,
        log_store: PersistentLogStore,
        cache: ComputationCache,
        recommendations: RecommendationStore,
        bus: EventBus,
        *,
        today: Callable[[], str] = local_today,
        now: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._log_store = log_store
        self._cache = cache
        self._recommendations = recommendations
        self._bus = bus
        self._today = today
        self._now = now
        self.lock = threading.RLock()

    def today(self) -> str:
        return self._today()

    def get_log(self, day: str) -> List[FoodEntry]:
        with self.lock:
            return self._log_store.get(validate_day_key(day))

    def get_totals(self, day: str) -> NutritionTotals:
        with self.lock:
            return self._cache.get_totals(validate_day_key(day))

    def get_day(self, day: str) -> Tuple[List[FoodEntry], NutritionTotals]:
        """Entries and totals for ``day`` read together."""
        with self.lock:
            return self.get_log(day), self.get_totals(day)

    def get_current_protein_intake(self) -> float:
        with self.lock:
            return self._cache.get_protein_total(self._today())

    def add(self, day: str, food_item: Union[FoodItem, Mapping[str, Any]]) -> FoodEntry:
        validate_day_key(day)
        item = self._validate(food_item)

        with self.lock:
            entries = self._log_store.get(day)
            entry = FoodEntry(
                **item.model_dump(),
                id=self._new_id({e.id for e in entries}),
                timestamp=self._now(),
            )
            entries.append(entry)
            self._log_store.set(day, entries)
            self._refresh(day, entries)
        return entry

    def add_from_catalog(
        self,
        day: str,
        food_id: str,
        *,
        servings: float = 1.0,
        meal_type: MealType = MealType.snack,
    ) -> FoodEntry:
        food = get_food(food_id)
        if food is None:
            raise ValidationError(f"Unknown catalog food: {food_id!r}")
        if not isinstance(servings, (int, float)) or not math.isfinite(servings) or servings <= 0:
            raise ValidationError(f"Invalid servings: {servings!r}")
        item = FoodItem(
            name=food.name,
            protein_g=round(food.protein_g * servings, 2),
            calories_kcal=round(food.calories_kcal * servings, 2),
            carbs_g=round(food.carbs_g * servings, 2),
            fat_g=round(food.fat_g * servings, 2),
            serving_size_g=round(food.serving_size_g * servings, 2),
            meal_type=meal_type,
        )
        return self.add(day, item)

    def remove(self, day: str, entry_id: str) -> bool:
        validate_day_key(day)
        with self.lock:
            entries = self._log_store.get(day)
            kept = [e for e in entries if e.id != entry_id]
            if len(kept) == len(entries):
                logger.debug("No entry %s in log %s; nothing to remove", entry_id, day)
                return False
            self._log_store.set(day, kept)
            self._refresh(day, kept)
        return True

    def reconcile_current(self) -> Optional[NutritionRecommendation]:
        """Re-derive ``current`` from today's log.

        Covers day rollover: a record last updated on an earlier day picks up
        today's total (0 only when today has no logged protein).
        """
        with self.lock:
            today = self._today()
            stored = self._recommendations.get()
            if stored is None:
                return None
            total = self._cache.get_protein_total(today)
            if stored.current != total or stored.last_updated != today:
                return self._recommendations.update_current(total, today)
            return stored

    def _validate(self, food_item: Union[FoodItem, Mapping[str, Any]]) -> FoodItem:
        data = food_item.model_dump() if isinstance(food_item, FoodItem) else food_item
        try:
            return FoodItem.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid food entry: {exc}") from exc

    @staticmethod
    def _new_id(taken: set[str]) -> str:
        while True:
            candidate = str(uuid4())
            if candidate not in taken:
                return candidate

    def _refresh(self, day: str, entries: List[FoodEntry]) -> NutritionTotals:
        self._cache.invalidate(day)
        totals = self._cache.get_totals(day)

        is_active_day = day == self._today()
        if is_active_day:
            self._recommendations.update_current(totals.protein_g, day)
            self._bus.dispatch(
                EventKind.PROTEIN_DATA_UPDATED,
                {"date": day, "current": totals.protein_g},
            )
        self._bus.dispatch(
            EventKind.FOOD_LOG_UPDATED,
            {
                "date": day,
                "entries": [e.model_dump(mode="json") for e in entries],
                "totals": totals.model_dump(),
            },
        )
        return totals
