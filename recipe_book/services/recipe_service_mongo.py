# recipe_book/services/recipe_service_mongo.py
import logging
from typing import List, Dict, Any

from pymongo.database import Database

from recipe_book.criteria import build_search_criteria
from recipe_book.db_mongo import serialize, to_object_id
from recipe_book.errors import InvalidReferenceError, NotFoundError
from recipe_book.models import RecipeIn, SearchInput

logger = logging.getLogger(__name__)

SUMMARY_PROJECTION = {"name": 1, "cuisine": 1, "tags": 1, "prepTime": 1}


def find_recipes(db: Database, criteria: Dict[str, Any]) -> List[Dict[str, Any]]:
    logger.debug("recipes.find %s", criteria)
    cursor = db.recipes.find(criteria, SUMMARY_PROJECTION)
    return [serialize(doc) for doc in cursor]


def search_recipes(db: Database, search: SearchInput) -> List[Dict[str, Any]]:
    return find_recipes(db, build_search_criteria(search))


def get_recipe_by_id(db: Database, recipe_id: str) -> Dict[str, Any]:
    doc = db.recipes.find_one({"_id": to_object_id(recipe_id, "recipe id")})
    if not doc:
        raise NotFoundError("Recipe not found")
    return serialize(doc)


def resolve_references(db: Database, recipe: RecipeIn) -> tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """Look up the cuisine and tag reference documents a recipe points at."""
    cuisine_doc = db.cuisines.find_one({"name": recipe.cuisine})
    if not cuisine_doc:
        logger.warning("rejected unknown cuisine %r", recipe.cuisine)
        raise InvalidReferenceError("Invalid cuisine", invalid=[recipe.cuisine])

    tag_docs = list(db.tags.find({"name": {"$in": recipe.tags}}))
    # duplicates in the submitted list also fail here
    if len(tag_docs) != len(recipe.tags):
        found = {t["name"] for t in tag_docs}
        invalid = [t for t in recipe.tags if t not in found] or list(recipe.tags)
        logger.warning("rejected tags %r", invalid)
        raise InvalidReferenceError("One or more tags is invalid", invalid=invalid)

    return cuisine_doc, tag_docs


def _to_document(recipe: RecipeIn, cuisine_doc: Dict[str, Any], tag_docs: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "name": recipe.name,
        "cuisine": cuisine_doc,
        "prepTime": recipe.prep_time,
        "cookTime": recipe.cook_time,
        "servings": recipe.servings,
        "ingredients": [i.model_dump() for i in recipe.ingredients],
        "instructions": list(recipe.instructions),
        "tags": tag_docs,
    }


def create_recipe(db: Database, recipe: RecipeIn) -> str:
    cuisine_doc, tag_docs = resolve_references(db, recipe)
    result = db.recipes.insert_one(_to_document(recipe, cuisine_doc, tag_docs))
    logger.info("created recipe %s (%s)", result.inserted_id, recipe.name)
    return str(result.inserted_id)


def replace_recipe(db: Database, recipe_id: str, recipe: RecipeIn) -> None:
    oid = to_object_id(recipe_id, "recipe id")
    cuisine_doc, tag_docs = resolve_references(db, recipe)
    result = db.recipes.replace_one({"_id": oid}, _to_document(recipe, cuisine_doc, tag_docs))
    if result.matched_count == 0:
        raise NotFoundError("Recipe not found")
    logger.info("replaced recipe %s", recipe_id)


def delete_recipe(db: Database, recipe_id: str) -> None:
    result = db.recipes.delete_one({"_id": to_object_id(recipe_id, "recipe id")})
    if result.deleted_count == 0:
        raise NotFoundError("Unable to find recipe")
    logger.info("deleted recipe %s", recipe_id)


def get_search_universe(db: Database) -> Dict[str, List[str]]:
    """All names a search may refer to."""
    return {
        "cuisines": sorted(n for n in db.cuisines.distinct("name") if n),
        "tags": sorted(n for n in db.tags.distinct("name") if n),
        "ingredients": sorted(n for n in db.recipes.distinct("ingredients.name") if n),
    }
