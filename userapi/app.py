"""The HTTP application, its database connection and the user counter."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
import time
from http import HTTPStatus
from typing import Any

import pymongo
from flask import Flask, Response, request
from pymongo.errors import PyMongoError

from userapi.authenticate import AuthenticateHandler, new_authenticate_service
from userapi.deletebyid import DeleteByIDHandler, new_delete_user_by_id_service
from userapi.fetchuserbyid import UserHandler, new_user_service
from userapi.listalluser import ListAllUserHandler, new_list_all_user_service
from userapi.updatebyid import UpdateUserByIDHandler, new_update_user_by_id_service
from userapi.web import Context, HTTPError

DEFAULT_MONGO_URI = "mongodb://localhost:27017"
DATABASE_NAME = "testdb"
USER_COLLECTION = "users"
DEFAULT_PORT = 1323

logger = logging.getLogger(__name__)


def _json_response(status: int, body: str) -> Response:
    return Response(body, status=status, mimetype="application/json")


def _error_response(status: int, message: Any) -> Response:
    body = json.dumps({"message": message}, default=str, ensure_ascii=False) + "\n"
    return _json_response(status, body)


def _view(handler: Any, collection: Any):
    def view(**params: str) -> Response:
        ctx = Context(request.get_data(), params)
        try:
            handler.handle(ctx, collection)
        except HTTPError as exc:
            return _error_response(exc.code, exc.message)
        except Exception:
            logger.exception("request failed")
            return _error_response(
                HTTPStatus.INTERNAL_SERVER_ERROR, HTTPStatus.INTERNAL_SERVER_ERROR.phrase
            )
        return _json_response(ctx.response_status or HTTPStatus.OK, ctx.response_body)

    return view


def create_app(collection: Any) -> Flask:
    """Build the application serving the user endpoints over the given collection."""
    app = Flask(__name__)
    routes = [
        ("/Authenticate", "authenticate", ["POST"],
         AuthenticateHandler(service=new_authenticate_service())),
        ("/update", "update", ["POST"],
         UpdateUserByIDHandler(service=new_update_user_by_id_service())),
        ("/users", "list_users", ["GET"],
         ListAllUserHandler(service=new_list_all_user_service())),
        ("/user/<id>", "fetch_user", ["GET"],
         UserHandler(service=new_user_service())),
        ("/user/<id>", "delete_user", ["DELETE"],
         DeleteByIDHandler(service=new_delete_user_by_id_service())),
    ]
    for rule, endpoint, methods, handler in routes:
        app.add_url_rule(rule, endpoint=endpoint, view_func=_view(handler, collection),
                         methods=methods)
    return app


def connect_mongo(uri: str = DEFAULT_MONGO_URI) -> pymongo.MongoClient:
    """Connect to the database and check it answers."""
    client: pymongo.MongoClient = pymongo.MongoClient(
        uri, serverSelectionTimeoutMS=10_000, connectTimeoutMS=10_000
    )
    try:
        client.admin.command("ping")
    except PyMongoError:
        client.close()
        raise
    print("✅ Connected to MongoDB!")
    return client


def create_unique_email_index(collection: Any) -> str:
    """Make e-mail addresses unique across users."""
    return collection.create_index([("email", pymongo.ASCENDING)], unique=True)


def count_users(collection: Any) -> int:
    """Return the number of stored users."""
    with pymongo.timeout(5):
        return collection.count_documents({})


def start_user_counter(collection: Any, interval: float = 10.0) -> None:
    """Report the number of users every interval seconds, forever."""
    while True:
        time.sleep(interval)
        try:
            count = count_users(collection)
        except PyMongoError as exc:
            print(f"❌ Error counting users: {exc}")
            continue
        print(f"📢 Number of users: {count}")


def main(argv: list[str] | None = None) -> int:
    """Connect to the database and serve the user endpoints."""
    parser = argparse.ArgumentParser(prog="userapi", description="Serve the user endpoints.")
    parser.add_argument("--mongo-uri", default=DEFAULT_MONGO_URI)
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    try:
        client = connect_mongo(args.mongo_uri)
        collection = client[DATABASE_NAME][USER_COLLECTION]
        create_unique_email_index(collection)
    except PyMongoError as exc:
        print(exc, file=sys.stderr)
        return 1

    threading.Thread(target=start_user_counter, args=(collection,), daemon=True).start()
    create_app(collection).run(host=args.host, port=args.port)
    return 0