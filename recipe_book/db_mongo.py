# recipe_book/db_mongo.py
from functools import lru_cache
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, ASCENDING
from pymongo.database import Database

from recipe_book.config import get_settings
from recipe_book.errors import InvalidInputError


@lru_cache(maxsize=1)
def get_client() -> MongoClient:
    settings = get_settings()
    return MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=5000)


def get_db() -> Database:
    return get_client()[get_settings().mongo_db]


def ensure_indexes(db):
    # Search filters
    db.recipes.create_index([("prepTime", ASCENDING)])
    db.recipes.create_index([("cuisine.name", ASCENDING)])
    db.recipes.create_index([("tags.name", ASCENDING)])
    db.recipes.create_index([("ingredients.name", ASCENDING)])

    # Reference lookups are by exact name
    db.cuisines.create_index([("name", ASCENDING)], unique=True)
    db.tags.create_index([("name", ASCENDING)], unique=True)

    db.users.create_index([("email", ASCENDING)], unique=True)


def to_object_id(value: str, label: str = "id") -> ObjectId:
    """Parse a 24-char hex id or raise ``InvalidInputError``."""
    if not isinstance(value, str) or len(value) != 24:
        raise InvalidInputError(f"Invalid {label}")
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as e:
        raise InvalidInputError(f"Invalid {label}") from e


def serialize(doc: Any) -> Any:
    """Turn BSON values (ObjectId, nested docs) into JSON-safe ones."""
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, dict):
        return {k: serialize(v) for k, v in doc.items()}
    if isinstance(doc, (list, tuple)):
        return [serialize(v) for v in doc]
    return doc
