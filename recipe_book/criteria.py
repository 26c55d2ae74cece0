# recipe_book/criteria.py
"""
Translate sparse search inputs into MongoDB filter documents.

Two builders live here:

- ``build_search_criteria`` for ``GET /recipes``: tags match ANY of the given
  names, ingredients must ALL be present (case-insensitive substring each).
- ``build_ai_criteria`` for model-derived searches: cuisines match ANY,
  ingredients and tags must ALL match exactly.

Both are pure. A key only appears in the output when its input is non-empty,
so an empty input yields ``{}`` which matches every document.
"""
import re
from typing import Any, Dict

from recipe_book.models import AiSearchParams, SearchInput


def contains_ci(text: str) -> Dict[str, str]:
    """Case-insensitive literal substring predicate."""
    return {"$regex": re.escape(text), "$options": "i"}


def build_search_criteria(search: SearchInput) -> Dict[str, Any]:
    criteria: Dict[str, Any] = {}

    # both bounds go into one object; a second assignment would drop $gte
    prep_time: Dict[str, int] = {}
    if search.min_prep_time is not None:
        prep_time["$gte"] = search.min_prep_time
    if search.max_prep_time is not None:
        prep_time["$lte"] = search.max_prep_time
    if prep_time:
        criteria["prepTime"] = prep_time

    if search.name:
        criteria["name"] = contains_ci(search.name)

    if search.cuisine:
        criteria["cuisine.name"] = search.cuisine

    if search.tags:
        criteria["tags.name"] = {"$in": list(search.tags)}

    if search.ingredients:
        criteria["$and"] = [
            {"ingredients.name": contains_ci(ing)} for ing in search.ingredients
        ]

    return criteria


def build_ai_criteria(params: AiSearchParams) -> Dict[str, Any]:
    criteria: Dict[str, Any] = {}
    if params.cuisines:
        criteria["cuisine.name"] = {"$in": list(params.cuisines)}
    if params.ingredients:
        criteria["ingredients.name"] = {"$all": list(params.ingredients)}
    if params.tags:
        criteria["tags.name"] = {"$all": list(params.tags)}
    return criteria
