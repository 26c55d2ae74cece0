# recipe_book/errors.py
from typing import Any


class RecipeBookError(Exception):
    """Request-scoped failure rendered as ``{"error": message, **extra}``."""

    status_code = 400

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}


class InvalidInputError(RecipeBookError):
    status_code = 400


class NotFoundError(RecipeBookError):
    status_code = 404


class InvalidReferenceError(RecipeBookError):
    """A cuisine or tag name that has no reference record."""

    status_code = 400

    def __init__(self, message: str, invalid: list[str], **extra: Any):
        super().__init__(message, invalid=invalid, **extra)
        self.invalid = invalid


class AuthenticationError(RecipeBookError):
    status_code = 401


class UpstreamError(RecipeBookError):
    status_code = 502
