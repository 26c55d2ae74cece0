# recipe_book/gemini.py
"""
Gemini integration.

- ``generate_search_params``: free text -> ``AiSearchParams`` using the
  current tag, cuisine and ingredient names as context.
- ``generate_recipe``: free-text recipe description -> recipe body ready for
  ``validate_recipe_payload``.

Both request JSON output constrained by a response schema. Any provider
error or unparseable output is raised as ``UpstreamError``; nothing here
retries.
"""
import json
import logging
from typing import Any, Dict, List

import google.generativeai as genai
from pydantic import ValidationError

from recipe_book.config import DEFAULT_GEMINI_CONFIG, GeminiConfig
from recipe_book.errors import UpstreamError
from recipe_book.models import AiSearchParams

logger = logging.getLogger(__name__)

_STRING_LIST = {"type": "ARRAY", "items": {"type": "STRING"}}

SEARCH_PARAMS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "cuisines": _STRING_LIST,
        "tags": _STRING_LIST,
        "ingredients": _STRING_LIST,
    },
    "required": ["cuisines", "tags", "ingredients"],
}

RECIPE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "name": {"type": "STRING"},
        "cuisine": {"type": "STRING"},
        "prepTime": {"type": "INTEGER"},
        "cookTime": {"type": "INTEGER"},
        "servings": {"type": "INTEGER"},
        "ingredients": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "quantity": {"type": "STRING"},
                    "unit": {"type": "STRING"},
                },
                "required": ["name", "quantity", "unit"],
            },
        },
        "instructions": _STRING_LIST,
        "tags": _STRING_LIST,
    },
    "required": [
        "name", "cuisine", "prepTime", "cookTime", "servings", "ingredients", "instructions", "tags",
    ],
}

SEARCH_PROMPT = (
    "Convert a recipe search written in plain language into structured search fields.\n\n"
    "Return ONLY a JSON object with the keys \"cuisines\", \"tags\" and \"ingredients\", "
    "each an array of strings (empty when nothing applies).\n"
    "- cuisines: recipes of ANY of these cuisines. Use names from the available cuisines only.\n"
    "- tags: tags the recipe must carry. Use names from the available tags only.\n"
    "- ingredients: ingredients the recipe must contain, lowercase. Prefer names from the "
    "available ingredients; map general words to specific ones (\"meat\" may mean chicken or beef).\n"
    "Infer related tags from cuisines and ingredients and the other way round where it is obvious.\n\n"
    "Example: \"italian pasta with chicken and garlic\" -> "
    "{{\"cuisines\": [\"Italian\"], \"tags\": [], \"ingredients\": [\"chicken\", \"garlic\"]}}\n"
    "Example: \"quick dinner without meat\" -> "
    "{{\"cuisines\": [], \"tags\": [\"quick\", \"vegetarian\"], \"ingredients\": []}}\n\n"
    "Available cuisines: {cuisines}\n"
    "Available tags: {tags}\n"
    "Available ingredients: {ingredients}\n\n"
    "Query: {query}\n"
)

RECIPE_PROMPT = (
    "Turn the recipe description below into a structured recipe.\n\n"
    "Return ONLY a JSON object with: name (title case), cuisine (one of the available "
    "cuisines), prepTime and cookTime (whole minutes, estimate when not stated), servings, "
    "ingredients (objects with lowercase name, quantity and unit as strings), instructions "
    "(one full sentence per step) and tags (lowercase, from the available tags only).\n\n"
    "Available cuisines: {cuisines}\n"
    "Available tags: {tags}\n\n"
    "Recipe text: {query}\n"
)


def _generate_json(prompt: str, schema: Dict[str, Any], config: GeminiConfig) -> Dict[str, Any]:
    if not config.api_key:
        raise UpstreamError("AI features are not configured")

    try:
        genai.configure(api_key=config.api_key)
        model = genai.GenerativeModel(config.model)
        response = model.generate_content(
            prompt,
            generation_config={
                "response_mime_type": "application/json",
                "response_schema": schema,
            },
            request_options={"timeout": config.timeout},
        )
        text = response.text
    except Exception as e:
        logger.warning("Gemini request failed", exc_info=True)
        raise UpstreamError("AI provider request failed") from e

    try:
        parsed = json.loads(text)
    except (TypeError, ValueError) as e:
        logger.warning("Gemini returned invalid JSON: %r", text)
        raise UpstreamError("AI provider returned invalid JSON") from e
    if not isinstance(parsed, dict):
        raise UpstreamError("AI provider returned an unexpected response")
    return parsed


def _join(values: List[str]) -> str:
    return ", ".join(values) if values else "(none)"


def generate_search_params(
    query: str,
    tags: List[str],
    cuisines: List[str],
    ingredients: List[str],
    config: GeminiConfig = DEFAULT_GEMINI_CONFIG,
) -> AiSearchParams:
    prompt = SEARCH_PROMPT.format(
        query=query, tags=_join(tags), cuisines=_join(cuisines), ingredients=_join(ingredients),
    )
    parsed = _generate_json(prompt, SEARCH_PARAMS_SCHEMA, config)
    try:
        return AiSearchParams.model_validate(parsed)
    except ValidationError as e:
        raise UpstreamError("AI provider returned an unexpected response") from e


def generate_recipe(
    query: str,
    cuisines: List[str],
    tags: List[str],
    config: GeminiConfig = DEFAULT_GEMINI_CONFIG,
) -> Dict[str, Any]:
    prompt = RECIPE_PROMPT.format(query=query, cuisines=_join(cuisines), tags=_join(tags))
    return _generate_json(prompt, RECIPE_SCHEMA, config)
