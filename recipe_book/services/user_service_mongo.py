# recipe_book/services/user_service_mongo.py
import logging
from typing import Any, Dict

import bcrypt
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from recipe_book.errors import InvalidInputError
from recipe_book.models import UserIn

logger = logging.getLogger(__name__)


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def create_user(db: Database, user: UserIn) -> str:
    if db.users.find_one({"email": user.email}):
        raise InvalidInputError("Email is already registered")
    try:
        result = db.users.insert_one({"email": user.email, "password": _hash_password(user.password)})
    except DuplicateKeyError as e:
        raise InvalidInputError("Email is already registered") from e
    logger.info("registered user %s", result.inserted_id)
    return str(result.inserted_id)


def authenticate(db: Database, email: str, password: str) -> Dict[str, Any] | None:
    """Verify credentials. Returns ``{user_id, email}`` or ``None``."""
    record = db.users.find_one({"email": email.strip().lower()})
    if record and _verify_password(password, record["password"]):
        return {"user_id": str(record["_id"]), "email": record["email"]}
    return None
