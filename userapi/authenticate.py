"""Checking a user's password and issuing a signed token."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from http import HTTPStatus
from typing import Any, Mapping

import bcrypt
import jwt
import pymongo

from userapi.web import Context, HTTPError, unauthorized

SIGNING_KEY = "secret"
TOKEN_LIFETIME = timedelta(hours=72)
NO_DOCUMENTS = "mongo: no documents in result"


def _string_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


@dataclass
class User:
    """Credentials sent to the authenticate endpoint."""

    name: str = ""
    password: str = field(default_factory=str)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> User:
        name = _string_field(data, "name")
        password = _string_field(data, "password")
        return cls(name=name, password=password)


@dataclass
class Response:
    """The issued token."""

    token: str

    def as_json(self) -> dict[str, str]:
        return {"token": self.token}


class AuthenticateService:
    """Looks a user up by name and signs a token for a correct password."""

    def authenticate(self, ctx: Context | None, db: Any, name: str, password: str) -> Response:
        with pymongo.timeout(5):
            document = db.find_one({"name": name})
        if document is None:
            raise HTTPError(HTTPStatus.INTERNAL_SERVER_ERROR, f"Find Error: {NO_DOCUMENTS}")

        stored = document.get("password") or ""
        try:
            matches = bcrypt.checkpw(password.encode("utf-8"), str(stored).encode("utf-8"))
        except ValueError:
            matches = False
        if not matches:
            raise unauthorized()

        claims = {
            "name": name,
            "admin": True,
            "exp": datetime.now(timezone.utc) + TOKEN_LIFETIME,
        }
        signed = jwt.encode(claims, SIGNING_KEY, algorithm="HS256")
        return Response(token=signed)


@dataclass
class AuthenticateHandler:
    """Handles POST /Authenticate."""

    service: Any

    def handle(self, ctx: Context, db: Any) -> None:
        try:
            user = User.from_json(ctx.bind())
        except ValueError as exc:
            raise HTTPError(HTTPStatus.INTERNAL_SERVER_ERROR, f"Bind json Error: {exc}") from exc

        response = self.service.authenticate(ctx, db, user.name, user.password)
        ctx.json(HTTPStatus.OK, response)


def new_authenticate_service() -> AuthenticateService:
    """Return the default authentication service."""
    return AuthenticateService()