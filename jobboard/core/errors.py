"""
Typed failures raised by builders, validators, repositories and the auth gate.

`main.py` renders each one as `{"error": {"kind", "message", "status"}}`.
"""

from __future__ import annotations


class AppError(RuntimeError):
    status_code = 500
    kind = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message, "status": self.status_code}


class BadRequestError(AppError):
    status_code = 400
    kind = "bad_request"

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.errors:
            data["errors"] = self.errors
        return data


class NotFoundError(AppError):
    status_code = 404
    kind = "not_found"


class UnauthorizedError(AppError):
    status_code = 401
    kind = "unauthorized"

    def __init__(self, message: str = "Unauthorized.") -> None:
        super().__init__(message)
