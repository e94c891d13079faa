"""Error taxonomy for the people registry.

Every error carries a stable `code` and the HTTP status an outer layer should
answer with. `to_problem()` renders the error body the original service used:
``{"status", "type", "title", "detail"}``.

None of these are fatal: the registry keeps serving after raising any of them.
"""
from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class FieldViolation:
    """One failed check on one input field (e.g. field="nickname")."""
    field: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class PeopleBaseError(Exception):
    """Base exception for everything the registry raises on purpose."""

    code: str = "Unexpected"
    title: str = "Internal Server Error"
    http_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_problem(self) -> dict:
        return {
            "status": int(self.http_status),
            "type": self.code,
            "title": self.title,
            "detail": self.detail,
        }


class ValidationError(PeopleBaseError):
    code = "UnprocessableEntity"
    title = "Invalid request payload"
    http_status = HTTPStatus.UNPROCESSABLE_ENTITY

    def __init__(self, violations: Sequence[FieldViolation]) -> None:
        self.violations: List[FieldViolation] = list(violations)
        detail = "; ".join(f"{v.field}: {v.message}" for v in self.violations) or "invalid input"
        super().__init__(detail)

    @property
    def fields(self) -> List[str]:
        return [v.field for v in self.violations]

    def to_problem(self) -> dict:
        body = super().to_problem()
        body["violations"] = [v.as_dict() for v in self.violations]
        return body


class ConflictError(PeopleBaseError):
    code = "Conflict"
    title = "Unprocessable entity"
    http_status = HTTPStatus.UNPROCESSABLE_ENTITY

    def __init__(self, nickname: str, reason: str = "nickname already taken") -> None:
        self.nickname = nickname
        self.reason = reason
        super().__init__(f"Conflict due to {reason}")


class NotFoundError(PeopleBaseError):
    code = "NotFound"
    title = "Resource not found"
    http_status = HTTPStatus.NOT_FOUND

    def __init__(self, resource: str, resource_id: object) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"Resource '{resource}' with id {resource_id} not found")


class StorageError(PeopleBaseError):
    """
    The database was unreachable or failed mid-operation. Transient from the
    caller's point of view; the registry itself never retries.
    """
    code = "Unexpected"
    title = "Internal Server Error"
    http_status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, operation: str, reason: Optional[str] = None) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Storage failure during {operation}")
