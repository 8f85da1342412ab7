from __future__ import annotations
from typing import Any, Dict, Optional


class ApiError(Exception):
    """Error that maps directly onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.payload = payload or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, **self.payload}


class BadRequest(ApiError):
    status_code = 400


class Unauthorized(ApiError):
    status_code = 401


class NotFound(ApiError):
    status_code = 404


class GoalNotMet(ApiError):
    status_code = 400

    def __init__(self, current_funding: int, test_cost: int):
        super().__init__(
            "Funding goal not reached",
            {"current_funding": current_funding, "test_cost": test_cost},
        )


class ConfigError(ApiError):
    status_code = 500
