# -*- coding: utf-8 -*-
"""Profile — JSON file storage for the session's nutrition recommendation."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from ..foodlog.storage import write_json_atomic
from .models import NutritionRecommendation

logger = logging.getLogger(__name__)


class RecommendationStore:
    """Single ``NutritionRecommendation`` record for the active session.

    ``current`` is written through ``update_current`` (food log side) and the
    remaining fields through ``save`` (profile sync side).
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def get(self) -> Optional[NutritionRecommendation]:
        if not self.path.exists():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return NutritionRecommendation.model_validate(raw)
        except (OSError, ValueError, PydanticValidationError) as exc:
            logger.warning("Unreadable recommendation record %s: %s", self.path, exc)
            return None

    def save(self, recommendation: NutritionRecommendation) -> NutritionRecommendation:
        write_json_atomic(self.path, recommendation.model_dump_json(indent=2))
        return recommendation

    def update_current(self, current: float, day: str) -> Optional[NutritionRecommendation]:
        stored = self.get()
        if stored is None:
            return None
        return self.save(stored.model_copy(update={"current": current, "last_updated": day}))
