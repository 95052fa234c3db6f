from typing import Optional

from tasktrack.models.user_model import User
from tasktrack.utils.db import to_object_id


class UserRepository:
    def __init__(self, db):
        self.collection = db.users

    def find_by_id(self, user_id) -> Optional[User]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        doc = self.collection.find_one({"_id": oid})
        return User.from_doc(doc) if doc else None

    def find_by_email(self, email: str) -> Optional[User]:
        # exact match: emails are compared case-sensitively
        doc = self.collection.find_one({"email": email})
        return User.from_doc(doc) if doc else None

    def insert(self, user: User) -> User:
        res = self.collection.insert_one(user.to_doc())
        user.id = str(res.inserted_id)
        return user
