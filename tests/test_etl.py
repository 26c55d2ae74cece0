import mongomock
import pytest

from etl.load_recipes_mongo import (
    load_recipes_to_mongo,
    parse_ingredient,
    parse_list_cell,
    parse_minutes,
    parse_steps_cell,
)

CSV = """Title,Cuisine,Prep Time,Cook Time,Serves,Ingredients,Tags,Directions
Pad Thai,thai,PT20M,15 minutes,2,"['200 g rice noodles', '2 eggs', 'tamarind']","Quick; Spicy","1. Soak noodles
2. Fry everything"
Tiramisu,italian,1 hr 30 min,10 minutes,6,"mascarpone, 3 eggs, coffee",dessert,Layer and chill.
Mystery,,5,5,1,water,mystery,Boil.
Toast,british,5,2,1,bread,breakfast,
"""


@pytest.mark.parametrize("raw, minutes", [
    (55, 55),
    ("55 minutes", 55),
    ("minutes 55", 55),
    ("1 hr 30 min", 90),
    ("PT45M", 45),
    ("1:30", 90),
    ("", None),
    (None, None),
])
def test_parse_minutes(raw, minutes):
    assert parse_minutes(raw) == minutes


def test_parse_list_cell_formats():
    assert parse_list_cell('["a", "b"]') == ["a", "b"]
    assert parse_list_cell("['a', 'b']") == ["a", "b"]
    assert parse_list_cell("a; b, c") == ["a", "b", "c"]
    assert parse_list_cell(None) == []


def test_parse_steps_strips_numbering():
    assert parse_steps_cell("1. Boil\n2) Drain") == ["Boil", "Drain"]
    assert parse_steps_cell("Boil | Drain") == ["Boil", "Drain"]


def test_parse_ingredient():
    assert parse_ingredient("200 g Rice Noodles") == {"name": "rice noodles", "quantity": "200", "unit": "g"}
    assert parse_ingredient("2 eggs") == {"name": "eggs", "quantity": "2", "unit": ""}
    assert parse_ingredient("Black pepper") == {"name": "black pepper", "quantity": "", "unit": ""}


def test_load_seeds_references_and_embeds_them(tmp_path):
    path = tmp_path / "recipes.csv"
    path.write_text(CSV)
    db = mongomock.MongoClient().etl_test

    summary = load_recipes_to_mongo(str(path), db=db)

    assert summary == {"recipes_inserted": 2, "recipes_skipped": 2, "cuisines": 2, "tags": 3}
    assert sorted(db.cuisines.distinct("name")) == ["Italian", "Thai"]
    assert sorted(db.tags.distinct("name")) == ["dessert", "quick", "spicy"]

    pad_thai = db.recipes.find_one({"name": "Pad Thai"})
    assert pad_thai["cuisine"]["name"] == "Thai"
    assert pad_thai["cuisine"]["_id"] == db.cuisines.find_one({"name": "Thai"})["_id"]
    assert [t["name"] for t in pad_thai["tags"]] == ["quick", "spicy"]
    assert pad_thai["prepTime"] == 20
    assert pad_thai["cookTime"] == 15
    assert pad_thai["servings"] == 2
    assert pad_thai["ingredients"][0] == {"name": "rice noodles", "quantity": "200", "unit": "g"}
    assert pad_thai["instructions"] == ["Soak noodles", "Fry everything"]

    tiramisu = db.recipes.find_one({"name": "Tiramisu"})
    assert tiramisu["prepTime"] == 90


def test_skipped_rows_leave_no_references_behind(tmp_path):
    path = tmp_path / "recipes.csv"
    path.write_text(CSV)
    db = mongomock.MongoClient().etl_test

    load_recipes_to_mongo(str(path), db=db)

    assert db.recipes.find_one({"name": {"$in": ["Mystery", "Toast"]}}) is None
    assert db.cuisines.find_one({"name": "British"}) is None
    assert db.tags.find_one({"name": {"$in": ["mystery", "breakfast"]}}) is None


def test_zero_cook_time_row_is_skipped(tmp_path):
    path = tmp_path / "recipes.csv"
    path.write_text("Title,Cuisine,Prep,Cook,Serves,Ingredients,Tags,Steps\nSalad,greek,10,0,2,lettuce,fresh,Toss.\n")
    db = mongomock.MongoClient().etl_test

    summary = load_recipes_to_mongo(str(path), db=db)

    assert summary == {"recipes_inserted": 0, "recipes_skipped": 1, "cuisines": 0, "tags": 0}
    assert db.recipes.count_documents({}) == 0
    assert db.tags.count_documents({}) == 0


def test_reload_keeps_reference_ids(tmp_path):
    path = tmp_path / "recipes.csv"
    path.write_text(CSV)
    db = mongomock.MongoClient().etl_test

    load_recipes_to_mongo(str(path), db=db)
    thai_id = db.cuisines.find_one({"name": "Thai"})["_id"]
    load_recipes_to_mongo(str(path), db=db)

    assert db.cuisines.count_documents({}) == 2
    assert db.recipes.count_documents({}) == 2
    assert db.recipes.find_one({"name": "Pad Thai"})["cuisine"]["_id"] == thai_id
