# storefront/errors.py
from __future__ import annotations

from typing import Any, Dict, List, Optional


class StorefrontError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationFailed(StorefrontError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: List[str]) -> None:
        super().__init__()
        self.errors = list(errors)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.errors}


class Unauthorized(StorefrontError):
    status_code = 401
    message = "Unauthorized"


class InvalidCredentials(StorefrontError):
    status_code = 401
    message = "Invalid credentials"


class OrderNotFound(StorefrontError):
    status_code = 404
    message = "Not found"

    def __init__(self, order_id: str) -> None:
        super().__init__()
        self.order_id = order_id


class RateLimited(StorefrontError):
    status_code = 429
    message = "Too many requests. Please try later."
