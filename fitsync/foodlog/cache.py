# -*- coding: utf-8 -*-
"""Food log — memoized per-day totals."""

from __future__ import annotations

from typing import Dict

from .models import NutritionTotals, validate_day_key
from .storage import PersistentLogStore, compute_totals


class ComputationCache:
    """Per-day totals derived from the persistent log.

    An entry is valid until the next ``invalidate`` for that day. Writers
    must invalidate right after every store write, before emitting events,
    so a read never returns totals computed against an older log.
    """

    def __init__(self, log_store: PersistentLogStore) -> None:
        self._log_store = log_store
        self._totals: Dict[str, NutritionTotals] = {}

    def get_totals(self, day: str) -> NutritionTotals:
        cached = self._totals.get(day)
        if cached is not None:
            return cached
        totals = compute_totals(self._log_store.get(validate_day_key(day)))
        self._totals[day] = totals
        return totals

    def get_protein_total(self, day: str) -> float:
        return self.get_totals(day).protein_g

    def is_valid(self, day: str) -> bool:
        return day in self._totals

    def invalidate(self, day: str) -> None:
        self._totals.pop(day, None)

    def clear(self) -> None:
        self._totals.clear()
