from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from flask import current_app
from pymongo import ASCENDING, DESCENDING, MongoClient


def init_app(app, client: Optional[MongoClient] = None):
    """Attach a Mongo client to the app and make sure the indexes exist.

    Tests hand in a ``mongomock.MongoClient``; otherwise a real client is
    built from ``MONGO_URI``. The connection itself is lazy.
    """
    if client is None:
        client = MongoClient(app.config["MONGO_URI"], serverSelectionTimeoutMS=2000)
    app.extensions["mongo_client"] = client

    if app.config.get("MONGO_CREATE_INDEXES", True):
        ensure_indexes(client[app.config["MONGO_DB_NAME"]])


def get_db():
    client = current_app.extensions["mongo_client"]
    return client[current_app.config["MONGO_DB_NAME"]]


def ensure_indexes(db):
    db.users.create_index([("email", ASCENDING)], unique=True, name="uniq_users_email")
    db.tasks.create_index(
        [("user_id", ASCENDING), ("status", ASCENDING), ("created_at", DESCENDING)],
        name="idx_tasks_user_status_created",
    )
    db.tasks.create_index(
        [("user_id", ASCENDING), ("completed_at", ASCENDING)],
        name="idx_tasks_user_completed",
    )
    db.access_tokens.create_index([("jti", ASCENDING)], unique=True, name="uniq_tokens_jti")
    db.access_tokens.create_index([("user_id", ASCENDING)], name="idx_tokens_user")


def to_object_id(value) -> Optional[ObjectId]:
    """Parse a path/identity value into an ObjectId, or None if it isn't one."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def ping(db) -> bool:
    try:
        db.client.admin.command("ping")
    except Exception as exc:  # noqa: BLE001
        current_app.logger.warning("MongoDB ping failed: %s", exc)
        return False
    return True
