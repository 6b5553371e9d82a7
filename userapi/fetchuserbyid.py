"""Fetching one user by id."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Mapping

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from userapi.web import Context, HTTPError

NO_DOCUMENTS = "mongo: no documents in result"
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_ZERO_ID = ObjectId(b"\x00" * 12)


def _text(document: Mapping[str, Any], key: str) -> str:
    value = document.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, not {type(value).__name__}")
    return value


def _moment(document: Mapping[str, Any], key: str) -> datetime:
    value = document.get(key)
    if value is None:
        return _ZERO_TIME
    if not isinstance(value, datetime):
        raise ValueError(f"field {key!r} must be a date, not {type(value).__name__}")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class User:
    """A stored user."""

    id: ObjectId = _ZERO_ID
    name: str = ""
    email: str = ""
    password: str = ""
    created_at: datetime = field(default=_ZERO_TIME)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> User:
        """Build a user from a database document; raise ValueError on a field of the wrong type."""
        object_id = document.get("_id")
        if object_id is None:
            object_id = _ZERO_ID
        elif not isinstance(object_id, ObjectId):
            raise ValueError(f"field '_id' must be an ObjectId, not {type(object_id).__name__}")
        return cls(
            id=object_id,
            name=_text(document, "name"),
            email=_text(document, "email"),
            password=_text(document, "password"),
            created_at=_moment(document, "createdAt"),
        )

    def as_json(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "createdAt": self.created_at,
        }


class UserService:
    """Looks a user up by its id."""

    def fetch_user_by_id(self, ctx: Context | None, db: Any, id_str: str) -> User:
        try:
            object_id = ObjectId(id_str)
        except (InvalidId, TypeError) as exc:
            raise HTTPError(
                HTTPStatus.INTERNAL_SERVER_ERROR, f"invalid id format: {exc}"
            ) from exc

        try:
            document = db.find_one({"_id": object_id})
            if document is None:
                raise HTTPError(
                    HTTPStatus.INTERNAL_SERVER_ERROR, f"err when find by id: {NO_DOCUMENTS}"
                )
            return User.from_document(document)
        except (PyMongoError, ValueError) as exc:
            raise HTTPError(HTTPStatus.INTERNAL_SERVER_ERROR, "server error") from exc


@dataclass
class UserHandler:
    """Handles GET /user/:id."""

    service: Any

    def handle(self, ctx: Context, db: Any) -> None:
        id_str = ctx.param("id")
        if not id_str:
            raise HTTPError(HTTPStatus.INTERNAL_SERVER_ERROR, "id is null")
        user = self.service.fetch_user_by_id(ctx, db, id_str)
        ctx.json(HTTPStatus.OK, user)


def new_user_service() -> UserService:
    """Return the default fetch service."""
    return UserService()