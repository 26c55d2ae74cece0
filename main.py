# main.py
import logging
from typing import Any, Dict

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database

from recipe_book.auth import issue_token, require_user
from recipe_book.config import SETTINGS, GeminiConfig, Settings, get_gemini_config, get_settings
from recipe_book.db_mongo import ensure_indexes, get_db
from recipe_book.errors import AuthenticationError, InvalidInputError, RecipeBookError
from recipe_book.models import AiQuery, SearchInput, UserIn, validate_recipe_payload
from recipe_book.services import recipe_service_mongo as recipes_svc
from recipe_book.services import user_service_mongo as users_svc
from recipe_book.services.ai_service import ai_create_recipe, ai_search

logging.basicConfig(
    level=SETTINGS.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Recipe Book API (MongoDB)", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS.cors_origin_list or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup():
    ensure_indexes(get_db())
    logger.info("indexes ensured on %s", SETTINGS.mongo_db)


@app.exception_handler(RecipeBookError)
def _recipe_book_error(request: Request, exc: RecipeBookError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
def _request_validation_error(request: Request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"error": "; ".join(parts) or "Invalid request"})


@app.get("/health")
def health(db: Database = Depends(get_db)):
    try:
        db.command("ping")
        return {"status": "ok", "db": "reachable"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}


@app.get("/metadata")
def metadata(db: Database = Depends(get_db)):
    return recipes_svc.get_search_universe(db)


# ── Recipes ──────────────────────────────────────────────────────────────


@app.get("/recipes")
def list_recipes(request: Request, db: Database = Depends(get_db)):
    search = SearchInput.from_query(request.query_params)
    return {"recipes": recipes_svc.search_recipes(db, search)}


@app.get("/recipes/{recipe_id}")
def recipe_detail(recipe_id: str, db: Database = Depends(get_db)):
    return {"recipe": recipes_svc.get_recipe_by_id(db, recipe_id)}


@app.post("/recipes")
def create_recipe(body: Any = Body(None), db: Database = Depends(get_db)):
    recipe = validate_recipe_payload(body)
    return {"new_recipe_id": recipes_svc.create_recipe(db, recipe)}


@app.put("/recipes/{recipe_id}")
def replace_recipe(recipe_id: str, body: Any = Body(None), db: Database = Depends(get_db)):
    recipe = validate_recipe_payload(body)
    recipes_svc.replace_recipe(db, recipe_id, recipe)
    return {"message": "Recipe has been updated successfully"}


@app.delete("/recipes/{recipe_id}")
def delete_recipe(recipe_id: str, db: Database = Depends(get_db)):
    recipes_svc.delete_recipe(db, recipe_id)
    return {"message": "Recipe has been deleted"}


# ── Users ────────────────────────────────────────────────────────────────


@app.post("/users")
def register(body: UserIn, db: Database = Depends(get_db)):
    return {"new_user_id": users_svc.create_user(db, body)}


@app.post("/login")
def login(body: UserIn, db: Database = Depends(get_db), settings: Settings = Depends(get_settings)):
    user = users_svc.authenticate(db, body.email, body.password)
    if not user:
        raise AuthenticationError("Invalid login")
    return {"accessToken": issue_token(user, settings)}


@app.get("/protected")
def protected(user: Dict[str, Any] = Depends(require_user)):
    return {"message": "You are authorized", "user": user}


# ── AI ───────────────────────────────────────────────────────────────────


@app.get("/ai/recipes")
def ai_recipes_search(
    q: str = "",
    db: Database = Depends(get_db),
    config: GeminiConfig = Depends(get_gemini_config),
):
    if not q.strip():
        raise InvalidInputError("Query parameter 'q' is required")
    return ai_search(db, q.strip(), config)


@app.post("/ai/recipes")
def ai_recipes_create(
    body: AiQuery,
    db: Database = Depends(get_db),
    config: GeminiConfig = Depends(get_gemini_config),
):
    return ai_create_recipe(db, body.query, config)
