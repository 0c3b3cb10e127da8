# -*- coding: utf-8 -*-
"""Food log — per-day JSON file storage."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError as PydanticValidationError

from ..errors import StorageCorruption
from .models import FoodEntry, NutritionTotals, validate_day_key

logger = logging.getLogger(__name__)


def compute_totals(entries: Iterable[FoodEntry]) -> NutritionTotals:
    protein = 0.0
    calories = 0.0
    carbs = 0.0
    fat = 0.0
    for entry in entries:
        protein += entry.protein_g
        calories += entry.calories_kcal
        carbs += entry.carbs_g
        fat += entry.fat_g
    return NutritionTotals(
        protein_g=protein,
        calories_kcal=calories,
        carbs_g=carbs,
        fat_g=fat,
    )


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def write_json_atomic(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` through a uniquely named sibling temp file."""
    _ensure_dir(path.parent)
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
    ) as fh:
        fh.write(text)
        tmp = Path(fh.name)
    try:
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


class PersistentLogStore:
    """One JSON document per calendar day: ``<root>/<YYYY-MM-DD>.json``.

    ``get`` never raises for a missing or unreadable day; a payload that
    cannot be decoded is logged and read as an empty log. The file on disk
    is left in place so it can be inspected.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _path(self, day: str) -> Path:
        return self.root / f"{validate_day_key(day)}.json"

    def _decode(self, day: str, raw: str) -> List[FoodEntry]:
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise StorageCorruption(day, f"invalid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise StorageCorruption(day, f"expected a list, got {type(data).__name__}")
        try:
            return [FoodEntry.model_validate(item) for item in data]
        except PydanticValidationError as exc:
            raise StorageCorruption(day, f"invalid entry: {exc.error_count()} error(s)") from exc

    def get(self, day: str) -> List[FoodEntry]:
        fp = self._path(day)
        if not fp.exists():
            return []
        try:
            return self._decode(day, fp.read_text(encoding="utf-8"))
        except StorageCorruption as exc:
            logger.warning("%s; treating log as empty", exc)
            return []
        except OSError as exc:
            logger.warning("Failed to read food log %s: %s; treating log as empty", fp, exc)
            return []

    def set(self, day: str, entries: Iterable[FoodEntry]) -> None:
        fp = self._path(day)
        payload = [entry.model_dump(mode="json") for entry in entries]
        write_json_atomic(fp, json.dumps(payload, ensure_ascii=False, indent=2))

    def dates(self) -> List[str]:
        if not self.root.exists():
            return []
        days: List[str] = []
        for fp in self.root.glob("*.json"):
            try:
                days.append(validate_day_key(fp.stem))
            except ValueError:
                continue
        return sorted(days)
