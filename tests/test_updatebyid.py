import json
from types import SimpleNamespace

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from userapi.updatebyid import (
    UpdateUserByIDHandler,
    UpdateUserByIDService,
    User,
    new_update_user_by_id_service,
)
from userapi.web import Context, HTTPError


class FakeCollection:
    def __init__(self, matched=1, error=None):
        self.matched = matched
        self.error = error
        self.calls = []

    def update_one(self, query, update):
        self.calls.append((query, update))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(matched_count=self.matched)


class FakeService:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def update_user_by_id(self, collection, id, new_name, new_email):
        self.calls.append((collection, id, new_name, new_email))
        if self.error is not None:
            raise self.error


def test_update_name_only():
    object_id = ObjectId()
    collection = FakeCollection()

    UpdateUserByIDService().update_user_by_id(collection, str(object_id), "alice", "")

    assert collection.calls == [({"_id": object_id}, {"$set": {"name": "alice"}})]


def test_update_name_and_email():
    object_id = ObjectId()
    collection = FakeCollection()

    UpdateUserByIDService().update_user_by_id(
        collection, str(object_id), "alice", "alice@example.com"
    )

    query, update = collection.calls[0]
    assert query == {"_id": object_id}
    assert update == {"$set": {"name": "alice", "email": "alice@example.com"}}


def test_invalid_id_format():
    collection = FakeCollection()
    with pytest.raises(HTTPError) as info:
        UpdateUserByIDService().update_user_by_id(collection, "invalid-id", "a", "")
    assert info.value.code == 500
    assert info.value.message.startswith("invalid id format")
    assert collection.calls == []


def test_no_user_matched():
    with pytest.raises(HTTPError) as info:
        UpdateUserByIDService().update_user_by_id(
            FakeCollection(matched=0), str(ObjectId()), "alice", ""
        )
    assert info.value.message == "no user found with the given id"


def test_database_error():
    collection = FakeCollection(error=PyMongoError("boom"))
    with pytest.raises(HTTPError) as info:
        UpdateUserByIDService().update_user_by_id(collection, str(ObjectId()), "alice", "")
    assert info.value.message == "err when update: boom"


def test_handler_success():
    object_id = str(ObjectId())
    service = FakeService()
    body = json.dumps({"id": object_id, "name": "alice", "email": "alice@example.com"})
    ctx = Context(body)

    UpdateUserByIDHandler(service=service).handle(ctx, "db")

    assert service.calls == [("db", object_id, "alice", "alice@example.com")]
    assert ctx.response_status == 200
    assert ctx.response_body == '""\n'


def test_handler_bind_error():
    service = FakeService()
    with pytest.raises(HTTPError) as info:
        UpdateUserByIDHandler(service=service).handle(Context("invalid-json"), None)
    assert info.value.code == 500
    assert info.value.message.startswith("Bind json Error")
    assert service.calls == []


def test_handler_propagates_service_error():
    service = FakeService(error=RuntimeError("update failed"))
    with pytest.raises(RuntimeError, match="update failed"):
        UpdateUserByIDHandler(service=service).handle(Context('{"id": "x"}'), None)


def test_user_from_json_rejects_wrong_type():
    with pytest.raises(ValueError):
        User.from_json({"name": 5})


def test_user_from_json_reads_created_at():
    user = User.from_json({"createdAt": "2024-01-02T03:04:05Z"})
    assert user.created_at.isoformat() == "2024-01-02T03:04:05+00:00"


def test_new_update_user_by_id_service_updates():
    object_id = ObjectId()
    collection = FakeCollection()

    new_update_user_by_id_service().update_user_by_id(
        collection, str(object_id), "", "bob@example.com"
    )

    assert collection.calls == [({"_id": object_id}, {"$set": {"email": "bob@example.com"}})]