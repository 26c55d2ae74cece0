# recipe_book/auth.py
from typing import Any, Dict

from fastapi import Depends, Request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from recipe_book.config import Settings, get_settings
from recipe_book.errors import AuthenticationError

_SALT = "recipe-book-access-token"


def _serializer(settings: Settings) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.token_secret, salt=_SALT)


def issue_token(user: Dict[str, Any], settings: Settings) -> str:
    return _serializer(settings).dumps(user)


def verify_token(token: str, settings: Settings) -> Dict[str, Any]:
    try:
        return _serializer(settings).loads(token, max_age=settings.token_max_age)
    except SignatureExpired as e:
        raise AuthenticationError("Token has expired") from e
    except BadSignature as e:
        raise AuthenticationError("Invalid token") from e


def require_user(request: Request, settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """Raise 401 unless the request carries a valid ``Authorization: Bearer`` token."""
    header = request.headers.get("authorization")
    if not header:
        raise AuthenticationError("Not authenticated")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Not authenticated")
    return verify_token(token.strip(), settings)
