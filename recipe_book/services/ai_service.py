# recipe_book/services/ai_service.py
import logging
from typing import Any, Dict, List

from pymongo.database import Database

from recipe_book import gemini
from recipe_book.config import GeminiConfig
from recipe_book.criteria import build_ai_criteria
from recipe_book.errors import InvalidReferenceError
from recipe_book.models import AiSearchParams, validate_recipe_payload
from recipe_book.services.recipe_service_mongo import create_recipe, find_recipes, get_search_universe

logger = logging.getLogger(__name__)


def _canonical(values: List[str], allowed: List[str]) -> tuple[List[str], List[str]]:
    """Split ``values`` into (known names in canonical spelling, unknown values)."""
    lookup = {a.lower(): a for a in allowed}
    kept: List[str] = []
    dropped: List[str] = []
    for v in values:
        name = lookup.get(v.lower())
        if name is None:
            dropped.append(v)
        elif name not in kept:
            kept.append(name)
    return kept, dropped


def restrict_to_universe(params: AiSearchParams, universe: Dict[str, List[str]]) -> tuple[AiSearchParams, Dict[str, List[str]]]:
    """Keep only names that exist; model output is never trusted as-is."""
    kept: Dict[str, List[str]] = {}
    ignored: Dict[str, List[str]] = {}
    for field in ("cuisines", "tags", "ingredients"):
        good, bad = _canonical(getattr(params, field), universe.get(field, []))
        kept[field] = good
        if bad:
            ignored[field] = bad
    return AiSearchParams(**kept), ignored


def ai_search(db: Database, query: str, config: GeminiConfig) -> Dict[str, Any]:
    universe = get_search_universe(db)
    raw = gemini.generate_search_params(
        query, universe["tags"], universe["cuisines"], universe["ingredients"], config=config,
    )
    params, ignored = restrict_to_universe(raw, universe)
    if ignored:
        logger.warning("ignored AI search values outside the catalog: %r", ignored)
    if params.is_empty() and not raw.is_empty():
        attempted = [v for values in ignored.values() for v in values]
        raise InvalidReferenceError("No matching cuisines, tags or ingredients", invalid=attempted)

    recipes = find_recipes(db, build_ai_criteria(params))
    return {
        "recipes": recipes,
        "searchParams": params.model_dump(),
        "ignored": ignored,
    }


def ai_create_recipe(db: Database, query: str, config: GeminiConfig) -> Dict[str, Any]:
    universe = get_search_universe(db)
    generated = gemini.generate_recipe(query, universe["cuisines"], universe["tags"], config=config)
    recipe = validate_recipe_payload(generated)
    new_id = create_recipe(db, recipe)
    return {"new_recipe_id": new_id, "recipe": generated}
