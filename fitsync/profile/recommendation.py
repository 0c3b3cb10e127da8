# -*- coding: utf-8 -*-
"""
Protein recommendation

Daily protein target derived from body weight and goal, plus the mapping
between the local goal names and the remote profile's fitness goals.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

from .models import NutritionRecommendation, ProfileData, ProteinGoal, RemoteProfile

PROTEIN_PER_KG: Dict[ProteinGoal, float] = {
    ProteinGoal.weight_loss: 1.6,
    ProteinGoal.maintenance: 1.2,
    ProteinGoal.muscle_gain: 1.8,
}

MIN_PROTEIN_G = 50
MAX_PROTEIN_G = 300
MIN_PROTEIN_PER_KG = 0.8
MAX_PROTEIN_PER_KG = 2.5

_FITNESS_TO_GOAL = {
    "Weight Loss": ProteinGoal.weight_loss,
    "Muscle Gain": ProteinGoal.muscle_gain,
}
_GOAL_TO_FITNESS = {
    ProteinGoal.weight_loss: "Weight Loss",
    ProteinGoal.muscle_gain: "Muscle Gain",
}
GENERAL_FITNESS = "General Fitness"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def protein_per_kg_for_goal(goal: Any) -> float:
    try:
        return PROTEIN_PER_KG[ProteinGoal(goal)]
    except ValueError:
        return PROTEIN_PER_KG[ProteinGoal.maintenance]


def protein_bounds(weight_kg: float) -> tuple[int, int]:
    lower = max(MIN_PROTEIN_G, _round_half_up(weight_kg * MIN_PROTEIN_PER_KG))
    upper = min(MAX_PROTEIN_G, _round_half_up(weight_kg * MAX_PROTEIN_PER_KG))
    return lower, upper


def calculate_protein_requirement(profile: ProfileData) -> int:
    """Recommended grams of protein per day.

    ``round(weight * per_kg)`` clamped to ``[max(50, 0.8 g/kg), min(300, 2.5 g/kg)]``.
    For very light bodies the lower bound wins over the upper one.
    """
    raw = _round_half_up(profile.weight * protein_per_kg_for_goal(profile.goal))
    lower, upper = protein_bounds(profile.weight)
    return max(lower, min(upper, raw))


def map_fitness_goal_to_goal(fitness_goal: Optional[str]) -> ProteinGoal:
    return _FITNESS_TO_GOAL.get(fitness_goal or "", ProteinGoal.maintenance)


def map_goal_to_fitness_goal(goal: Any) -> str:
    try:
        return _GOAL_TO_FITNESS.get(ProteinGoal(goal), GENERAL_FITNESS)
    except ValueError:
        return GENERAL_FITNESS


def profile_from_remote(remote: RemoteProfile) -> ProfileData:
    return ProfileData(
        weight=remote.weight,
        height=remote.height,
        age=remote.age,
        gender=remote.gender,
        activity_level=remote.activity_level,
        goal=map_fitness_goal_to_goal(remote.fitness_goal),
    )


def remote_fields(profile: ProfileData) -> Dict[str, Any]:
    """Partial document pushed to the remote store."""
    return {
        "weight": profile.weight,
        "height": profile.height,
        "age": profile.age,
        "gender": profile.gender,
        "activityLevel": profile.activity_level,
        "fitnessGoal": map_goal_to_fitness_goal(profile.goal),
    }


def build_recommendation(profile: ProfileData, *, current: float, day: str) -> NutritionRecommendation:
    return NutritionRecommendation(
        recommended=calculate_protein_requirement(profile),
        current=current,
        weight=profile.weight,
        height=profile.height,
        age=profile.age,
        gender=profile.gender,
        activity_level=profile.activity_level,
        goal=profile.goal,
        last_updated=day,
    )
