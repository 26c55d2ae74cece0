# recipe_book/models.py
from typing import Any, Mapping, Optional, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from recipe_book.errors import InvalidInputError
from recipe_book.utils.normalization import split_csv, unique_stripped

REQUIRED_RECIPE_FIELDS = (
    "name", "cuisine", "prepTime", "cookTime", "servings", "ingredients", "instructions", "tags",
)
_LIST_PARAMS = ("tags", "ingredients")
# largest value BSON can store as an int64
MAX_INT = 2**63 - 1


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class SearchInput(BaseModel):
    """Sparse search parameters for ``GET /recipes``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    min_prep_time: Optional[int] = Field(default=None, ge=0, le=MAX_INT, alias="minPrepTime")
    max_prep_time: Optional[int] = Field(default=None, ge=0, le=MAX_INT, alias="maxPrepTime")
    cuisine: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)

    @field_validator("cuisine", "min_prep_time", "max_prep_time", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _blank_to_none(v)

    @field_validator("name", mode="before")
    @classmethod
    def blank_name(cls, v):
        # the pattern is matched literally, surrounding spaces included
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("tags", "ingredients", mode="before")
    @classmethod
    def split_lists(cls, v):
        return split_csv(v)

    @model_validator(mode="after")
    def check_range(self):
        if (
            self.min_prep_time is not None
            and self.max_prep_time is not None
            and self.min_prep_time > self.max_prep_time
        ):
            raise ValueError("minPrepTime cannot be greater than maxPrepTime")
        return self

    @classmethod
    def from_query(cls, params: Mapping[str, Any]) -> "SearchInput":
        """Build from query-string params; repeated ``tags``/``ingredients`` keys are merged."""
        raw: dict[str, Any] = dict(params)
        getlist = getattr(params, "getlist", None)
        if getlist is not None:
            for key in _LIST_PARAMS:
                values = getlist(key)
                if values:
                    raw[key] = values
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid search parameters: {_describe(e)}") from e


class AiSearchParams(BaseModel):
    """Structured search produced by the model from free text."""

    model_config = ConfigDict(extra="ignore")

    cuisines: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    ingredients: List[str] = Field(default_factory=list)

    @field_validator("cuisines", "tags", "ingredients", mode="before")
    @classmethod
    def clean_lists(cls, v):
        if isinstance(v, str):
            v = [v]
        if v is not None and not isinstance(v, (list, tuple)):
            return v
        return unique_stripped(v)

    def is_empty(self) -> bool:
        return not (self.cuisines or self.tags or self.ingredients)


class IngredientIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    quantity: str = ""
    unit: str = ""

    @field_validator("quantity", "unit", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return "" if v is None else str(v)


class RecipeIn(BaseModel):
    """A complete recipe as submitted for create/replace."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1)
    cuisine: str = Field(..., min_length=1)
    prep_time: int = Field(..., gt=0, le=MAX_INT, alias="prepTime")
    cook_time: int = Field(..., gt=0, le=MAX_INT, alias="cookTime")
    servings: int = Field(..., gt=0, le=MAX_INT)
    ingredients: List[IngredientIn] = Field(..., min_length=1)
    instructions: List[str] = Field(..., min_length=1)
    tags: List[str] = Field(..., min_length=1)

    @field_validator("name", "cuisine", mode="before")
    @classmethod
    def strip_names(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("ingredients", mode="before")
    @classmethod
    def accept_bare_names(cls, v):
        if isinstance(v, list):
            return [{"name": i} if isinstance(i, str) else i for i in v]
        return v


def validate_recipe_payload(body: Any) -> RecipeIn:
    """Map a loosely-typed request body to ``RecipeIn``; nothing is written on failure."""
    if not isinstance(body, Mapping):
        raise InvalidInputError("Recipe body must be a JSON object")
    missing = [f for f in REQUIRED_RECIPE_FIELDS if not body.get(f)]
    if missing:
        raise InvalidInputError(
            "Some recipe fields are missing", missing=missing
        )
    try:
        return RecipeIn.model_validate(body)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid recipe: {_describe(e)}") from e


class UserIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v


class AiQuery(BaseModel):
    query: str = Field(..., min_length=1)
