import pytest

from conftest import make_recipe
from recipe_book.errors import InvalidInputError
from recipe_book.models import REQUIRED_RECIPE_FIELDS, AiSearchParams, SearchInput, validate_recipe_payload


class _QueryParams(dict):
    """Minimal stand-in for Starlette's multi-dict."""

    def __init__(self, pairs):
        super().__init__(pairs)
        self._pairs = pairs

    def getlist(self, key):
        return [v for k, v in self._pairs if k == key]


def test_search_input_merges_repeated_and_comma_values():
    params = _QueryParams([("tags", "quick"), ("tags", "easy,spicy"), ("minPrepTime", " 5 ")])
    search = SearchInput.from_query(params)
    assert search.tags == ["quick", "easy", "spicy"]
    assert search.min_prep_time == 5


def test_search_input_ignores_unknown_params():
    assert SearchInput.from_query({"page": "2"}) == SearchInput()


def test_validate_recipe_payload_ok():
    recipe = validate_recipe_payload(make_recipe())
    assert recipe.prep_time == 10
    assert recipe.ingredients[0].name == "spaghetti"


@pytest.mark.parametrize("field", REQUIRED_RECIPE_FIELDS)
def test_each_required_field_missing(field):
    body = make_recipe()
    del body[field]
    with pytest.raises(InvalidInputError) as exc:
        validate_recipe_payload(body)
    assert exc.value.extra["missing"] == [field]


def test_falsy_values_count_as_missing():
    with pytest.raises(InvalidInputError) as exc:
        validate_recipe_payload(make_recipe(tags=[], prepTime=0))
    assert exc.value.extra["missing"] == ["prepTime", "tags"]


def test_wrong_types_are_rejected():
    with pytest.raises(InvalidInputError):
        validate_recipe_payload(make_recipe(servings="lots"))


def test_bare_ingredient_names_are_accepted():
    recipe = validate_recipe_payload(make_recipe(ingredients=["salt", "pepper"]))
    assert [i.name for i in recipe.ingredients] == ["salt", "pepper"]
    assert recipe.ingredients[0].quantity == ""


def test_non_object_body():
    with pytest.raises(InvalidInputError):
        validate_recipe_payload(["not", "a", "recipe"])


def test_ai_search_params_cleanup():
    params = AiSearchParams.model_validate({"cuisines": None, "tags": [" quick ", "quick", ""], "extra": 1})
    assert params.cuisines == []
    assert params.tags == ["quick"]
