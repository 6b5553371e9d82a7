"""Request context, HTTP errors and JSON encoding shared by the handlers."""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from bson import ObjectId


class HTTPError(Exception):
    """An error that carries the HTTP status code to answer with."""

    def __init__(self, code: int, message: Any = None) -> None:
        if message is None:
            message = HTTPStatus(code).phrase
        super().__init__(message)
        self.code = int(code)
        self.message = message

    def __str__(self) -> str:
        return f"code={self.code}, message={self.message}"


def unauthorized() -> HTTPError:
    """Return the standard 401 error."""
    return HTTPError(HTTPStatus.UNAUTHORIZED)


def _format_time(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset()
    if not offset:
        return text + "Z"
    return text + moment.strftime("%z")[:3] + ":" + moment.strftime("%z")[3:]


def _encode(value: Any) -> Any:
    as_json = getattr(value, "as_json", None)
    if callable(as_json):
        return as_json()
    if isinstance(value, datetime):
        return _format_time(value)
    if isinstance(value, ObjectId):
        return str(value)
    raise TypeError(f"cannot encode {type(value).__name__} as JSON")


class Context:
    """One request: its body and path parameters, and the response written to it."""

    def __init__(
        self,
        body: bytes | str = b"",
        params: Mapping[str, str] | None = None,
    ) -> None:
        self.request_body = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        self.params = dict(params or {})
        self.response_status: int | None = None
        self.response_body = ""

    def bind(self) -> dict[str, Any]:
        """Decode the request body as a JSON object; raise ValueError if it is not one."""
        if not self.request_body.strip():
            return {}
        data = json.loads(self.request_body)
        if not isinstance(data, dict):
            raise ValueError("request body must be a JSON object")
        return data

    def param(self, name: str) -> str:
        """Return a path parameter, or an empty string when it is absent."""
        return self.params.get(name, "")

    def json(self, status: int, payload: Any) -> None:
        """Write payload as the JSON response with the given status."""
        self.response_status = int(status)
        self.response_body = json.dumps(payload, default=_encode, ensure_ascii=False) + "\n"