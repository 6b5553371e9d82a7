import json
from datetime import datetime, timezone

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from userapi.fetchuserbyid import (
    User,
    UserHandler,
    UserService,
    new_user_service,
)
from userapi.web import Context, HTTPError


class FakeService:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def fetch_user_by_id(self, ctx, db, id_str):
        self.calls.append(id_str)
        if self.error is not None:
            raise self.error
        return self.result


class FakeCollection:
    def __init__(self, documents=(), error=None):
        self.documents = list(documents)
        self.error = error

    def find_one(self, query):
        if self.error is not None:
            raise self.error
        return next((d for d in self.documents if d.get("_id") == query["_id"]), None)


def test_handler_success():
    valid_id = ObjectId()
    service = FakeService(result=User(id=valid_id, name="Test User"))
    ctx = Context(params={"id": str(valid_id)})

    UserHandler(service=service).handle(ctx, None)

    assert ctx.response_status == 200
    body = json.loads(ctx.response_body)
    assert body["name"] == "Test User"
    assert body["id"] == str(valid_id)
    assert service.calls == [str(valid_id)]


def test_handler_error_from_service():
    service = FakeService(error=ValueError("invalid ObjectID"))
    ctx = Context(params={"id": "invalidID"})

    with pytest.raises(ValueError, match="invalid ObjectID"):
        UserHandler(service=service).handle(ctx, None)
    assert service.calls == ["invalidID"]


def test_handler_empty_id_parameter():
    service = FakeService()
    with pytest.raises(HTTPError) as info:
        UserHandler(service=service).handle(Context(), None)
    assert info.value.code == 500
    assert info.value.message == "id is null"
    assert service.calls == []


def test_service_finds_user():
    object_id = ObjectId()
    created = datetime(2024, 5, 1, 12, 0)
    collection = FakeCollection(
        [{"_id": object_id, "name": "alice", "email": "alice@example.com", "createdAt": created}]
    )

    user = UserService().fetch_user_by_id(None, collection, str(object_id))

    assert user.id == object_id
    assert user.name == "alice"
    assert user.email == "alice@example.com"
    assert user.created_at == created.replace(tzinfo=timezone.utc)


def test_service_invalid_id():
    with pytest.raises(HTTPError) as info:
        UserService().fetch_user_by_id(None, FakeCollection(), "invalid-id")
    assert info.value.code == 500
    assert info.value.message.startswith("invalid id format")


def test_service_not_found():
    with pytest.raises(HTTPError) as info:
        UserService().fetch_user_by_id(None, FakeCollection(), str(ObjectId()))
    assert info.value.message == "err when find by id: mongo: no documents in result"


def test_service_database_error():
    collection = FakeCollection(error=PyMongoError("down"))
    with pytest.raises(HTTPError) as info:
        UserService().fetch_user_by_id(None, collection, str(ObjectId()))
    assert info.value.message == "server error"


def test_service_bad_document_is_server_error():
    object_id = ObjectId()
    collection = FakeCollection([{"_id": object_id, "name": 42}])
    with pytest.raises(HTTPError) as info:
        UserService().fetch_user_by_id(None, collection, str(object_id))
    assert info.value.message == "server error"


def test_new_user_service_fetches():
    object_id = ObjectId()
    collection = FakeCollection([{"_id": object_id, "name": "bob", "email": "bob@example.com"}])

    user = new_user_service().fetch_user_by_id(None, collection, str(object_id))

    assert user.id == object_id
    assert user.name == "bob"