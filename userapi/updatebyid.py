"""Updating a user's name and e-mail by id."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Mapping

import pymongo
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from userapi.web import Context, HTTPError

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _parse_time(data: Mapping[str, Any], key: str) -> datetime:
    value = data.get(key)
    if value is None:
        return _ZERO_TIME
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        raise ValueError(f"field {key!r} must carry a time zone offset")
    return moment


@dataclass
class User:
    """The fields sent to the update endpoint."""

    id: str = ""
    name: str = ""
    email: str = ""
    password: str = ""
    created_at: datetime = field(default=_ZERO_TIME)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> User:
        """Build a user from a decoded JSON object; raise ValueError on a bad field."""
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            email=_text(data, "email"),
            password=_text(data, "password"),
            created_at=_parse_time(data, "createdAt"),
        )

    def as_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.id:
            data["id"] = self.id
        data.update(
            name=self.name,
            email=self.email,
            password=self.password,
            createdAt=self.created_at,
        )
        return data


class UpdateUserByIDService:
    """Sets a user's name and e-mail, leaving empty values untouched."""

    def update_user_by_id(
        self, collection: Any, id: str, new_name: str, new_email: str
    ) -> None:
        try:
            object_id = ObjectId(id)
        except (InvalidId, TypeError) as exc:
            raise HTTPError(
                HTTPStatus.INTERNAL_SERVER_ERROR, f"invalid id format: {exc}"
            ) from exc

        changes: dict[str, str] = {}
        if new_name:
            changes["name"] = new_name
        if new_email:
            changes["email"] = new_email

        try:
            with pymongo.timeout(10):
                result = collection.update_one({"_id": object_id}, {"$set": changes})
        except PyMongoError as exc:
            raise HTTPError(
                HTTPStatus.INTERNAL_SERVER_ERROR, f"err when update: {exc}"
            ) from exc
        if result.matched_count == 0:
            raise HTTPError(HTTPStatus.INTERNAL_SERVER_ERROR, "no user found with the given id")


@dataclass
class UpdateUserByIDHandler:
    """Handles POST /update."""

    service: Any

    def handle(self, ctx: Context, db: Any) -> None:
        try:
            user = User.from_json(ctx.bind())
        except ValueError as exc:
            raise HTTPError(HTTPStatus.INTERNAL_SERVER_ERROR, f"Bind json Error: {exc}") from exc

        self.service.update_user_by_id(db, user.id, user.name, user.email)
        ctx.json(HTTPStatus.OK, "")


def new_update_user_by_id_service() -> UpdateUserByIDService:
    """Return the default update service."""
    return UpdateUserByIDService()