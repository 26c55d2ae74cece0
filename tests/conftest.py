import mongomock
import pytest
from fastapi.testclient import TestClient

from main import app
from recipe_book.db_mongo import get_db

CUISINES = ["Italian", "Thai", "Japanese"]
TAGS = ["quick", "easy", "spicy", "vegetarian", "dinner"]


@pytest.fixture
def db():
    database = mongomock.MongoClient().recipe_book_test
    database.cuisines.insert_many([{"name": c} for c in CUISINES])
    database.tags.insert_many([{"name": t} for t in TAGS])
    return database


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_recipe(**overrides):
    body = {
        "name": "Pasta Carbonara",
        "cuisine": "Italian",
        "prepTime": 10,
        "cookTime": 20,
        "servings": 4,
        "ingredients": [
            {"name": "spaghetti", "quantity": "400", "unit": "g"},
            {"name": "bacon", "quantity": "200", "unit": "g"},
            {"name": "eggs", "quantity": "4", "unit": "whole"},
        ],
        "instructions": ["Cook the pasta.", "Fry the bacon.", "Stir in the eggs off the heat."],
        "tags": ["quick", "easy"],
    }
    body.update(overrides)
    return body
