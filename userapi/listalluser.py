"""Listing every user."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

import pymongo

from userapi.fetchuserbyid import User as _StoredUser
from userapi.web import Context


class User(_StoredUser):
    """A stored user as it appears in the listing."""


class ListAllUserService:
    """Reads every user document."""

    def list_all_user(self, ctx: Context | None, db: Any) -> list[User]:
        with pymongo.timeout(10):
            return [User.from_document(document) for document in db.find({})]


@dataclass
class ListAllUserHandler:
    """Handles GET /users."""

    service: Any

    def handle(self, ctx: Context, db: Any) -> None:
        users = self.service.list_all_user(ctx, db)
        # An empty listing is answered with null rather than an empty array.
        ctx.json(HTTPStatus.OK, users if users else None)


def new_list_all_user_service() -> ListAllUserService:
    """Return the default listing service."""
    return ListAllUserService()