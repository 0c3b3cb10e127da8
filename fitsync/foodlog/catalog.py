# -*- coding: utf-8 -*-
"""Static catalog of common foods (values per serving)."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .models import CatalogFood

# name, protein g, kcal, carbs g, fat g, serving size, serving unit
_TABLE: List[Tuple[str, float, float, float, float, float, str]] = [
    ("Chicken Breast", 31, 165, 0, 3.6, 100, "g"),
    ("Whey Protein", 25, 120, 2, 1, 30, "g"),
    ("Greek Yogurt", 10, 59, 3.6, 0.4, 100, "g"),
    ("Salmon", 22, 206, 0, 13, 100, "g"),
    ("Eggs", 13, 143, 0.7, 10, 100, "g"),
    ("Tuna", 26, 132, 0, 1.2, 100, "g"),
    ("Turkey Breast", 29, 157, 0, 3.6, 100, "g"),
    ("Lean Beef", 26, 250, 0, 17, 100, "g"),
    ("Pork Loin", 27, 143, 0, 4.8, 100, "g"),
    ("Cottage Cheese", 11, 98, 3.4, 4.3, 100, "g"),
    ("Tempeh", 20, 192, 7.7, 11, 100, "g"),
    ("Seitan", 25, 370, 14, 2, 100, "g"),
    ("Protein Powder (Plant)", 20, 120, 3, 2, 30, "g"),
    # legumes
    ("Black Beans", 8.9, 132, 23.7, 0.5, 100, "g"),
    ("Chickpeas", 8.9, 164, 27.4, 2.6, 100, "g"),
    ("Kidney Beans", 8.7, 127, 22.8, 0.5, 100, "g"),
    ("Edamame", 11, 121, 8.9, 5.2, 100, "g"),
    # grains
    ("Quinoa", 4.4, 120, 21.3, 1.9, 100, "g"),
    ("Oatmeal", 2.5, 68, 12, 1.4, 100, "g"),
    ("Whole Wheat Bread", 4, 247, 41, 3.2, 100, "g"),
    ("Barley", 2.3, 354, 73.5, 2.3, 100, "g"),
    ("Buckwheat", 3.4, 343, 71.5, 3.4, 100, "g"),
    # nuts and seeds
    ("Almonds", 21.2, 579, 21.7, 49.9, 100, "g"),
    ("Peanuts", 25.8, 567, 16.1, 49.2, 100, "g"),
    ("Walnuts", 15.2, 654, 13.7, 65.2, 100, "g"),
    ("Chia Seeds", 16.5, 486, 42.1, 30.7, 100, "g"),
    ("Flax Seeds", 18.3, 534, 28.9, 42.2, 100, "g"),
    ("Pumpkin Seeds", 30.2, 559, 10.7, 49.1, 100, "g"),
    # vegetables
    ("Spinach", 2.9, 23, 3.6, 0.4, 100, "g"),
    ("Kale", 4.3, 49, 8.8, 0.9, 100, "g"),
    ("Broccoli", 2.8, 34, 6.6, 0.4, 100, "g"),
    ("Brussels Sprouts", 3.4, 43, 8.9, 0.3, 100, "g"),
    ("Asparagus", 2.2, 20, 3.9, 0.1, 100, "g"),
    ("Bell Pepper", 0.9, 20, 4.6, 0.2, 100, "g"),
    ("Mushrooms", 3.1, 22, 3.3, 0.3, 100, "g"),
    # fruit
    ("Banana", 1.1, 89, 22.8, 0.3, 100, "g"),
    ("Apple", 0.3, 52, 13.8, 0.2, 100, "g"),
    ("Orange", 0.9, 47, 11.8, 0.1, 100, "g"),
    ("Blueberries", 0.7, 57, 14.5, 0.3, 100, "g"),
    ("Strawberries", 0.7, 32, 7.7, 0.3, 100, "g"),
    ("Avocado", 2, 160, 8.5, 14.7, 100, "g"),
    # other
    ("Almond Milk", 1, 13, 0.3, 1.1, 100, "ml"),
    ("Soy Milk", 3.3, 33, 1.7, 1.8, 100, "ml"),
    ("Cheese", 25, 402, 1.3, 33.1, 100, "g"),
    ("Hummus", 7.9, 166, 14.3, 9.6, 100, "g"),
    ("Peanut Butter", 25.1, 588, 20, 50, 100, "g"),
    ("Olive Oil", 0, 884, 0, 100, 100, "ml"),
    ("Honey", 0.3, 304, 82.4, 0, 100, "g"),
]

_FOODS: List[CatalogFood] = [
    CatalogFood(
        id=f"food{i}",
        name=name,
        protein_g=protein,
        calories_kcal=kcal,
        carbs_g=carbs,
        fat_g=fat,
        serving_size_g=size,
        serving_unit=unit,
    )
    for i, (name, protein, kcal, carbs, fat, size, unit) in enumerate(_TABLE, start=1)
]


def search_foods(query: Optional[str] = None) -> List[CatalogFood]:
    needle = (query or "").strip().lower()
    if not needle:
        return list(_FOODS)
    return [food for food in _FOODS if needle in food.name.lower()]


def get_food(food_id: str) -> Optional[CatalogFood]:
    for food in _FOODS:
        if food.id == food_id:
            return food
    return None
