"""Deleting a user by id."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

import pymongo
from bson import ObjectId
from bson.errors import InvalidId

from userapi.web import Context, HTTPError

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


@dataclass
class User:
    """A stored user."""

    id: str = ""
    name: str = ""
    email: str = ""
    password: str = ""
    created_at: datetime = field(default=_ZERO_TIME)

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


class DeleteUserByIDService:
    """Removes one user document."""

    def delete_user_by_id(self, collection: Any, id: str) -> None:
        try:
            object_id = ObjectId(id)
        except (InvalidId, TypeError) as exc:
            raise HTTPError(
                HTTPStatus.INTERNAL_SERVER_ERROR, f"invalid id format: {exc}"
            ) from exc

        with pymongo.timeout(10):
            result = collection.delete_one({"_id": object_id})
        if result.deleted_count == 0:
            raise HTTPError(HTTPStatus.INTERNAL_SERVER_ERROR, "no user found with the given id")


@dataclass
class DeleteByIDHandler:
    """Handles DELETE /user/:id."""

    service: Any

    def handle(self, ctx: Context, db: Any) -> None:
        id_str = ctx.param("id")
        if not id_str:
            raise HTTPError(HTTPStatus.INTERNAL_SERVER_ERROR, "id is null")
        self.service.delete_user_by_id(db, id_str)
        ctx.json(HTTPStatus.OK, "")


def new_delete_user_by_id_service() -> DeleteUserByIDService:
    """Return the default delete service."""
    return DeleteUserByIDService()