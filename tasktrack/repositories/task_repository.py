from typing import List, Optional

from pymongo import DESCENDING, ReturnDocument

from tasktrack.models.task_model import Task
from tasktrack.utils.db import to_object_id


class TaskRepository:
    """Owner-scoped access to the ``tasks`` collection.

    Every lookup filters on both ``_id`` and ``user_id``; a task owned by
    someone else is indistinguishable from one that does not exist.
    """

    def __init__(self, db):
        self.collection = db.tasks

    @staticmethod
    def _owner_filter(owner_id: str, task_id) -> Optional[dict]:
        oid = to_object_id(task_id)
        if oid is None:
            return None
        return {"_id": oid, "user_id": owner_id}

    def list_for_owner(self, owner_id: str) -> List[Task]:
        cursor = self.collection.find({"user_id": owner_id}).sort(
            [("created_at", DESCENDING), ("_id", DESCENDING)]
        )
        return [Task.from_doc(doc) for doc in cursor]

    def find_for_owner(self, owner_id: str, task_id) -> Optional[Task]:
        query = self._owner_filter(owner_id, task_id)
        if query is None:
            return None
        doc = self.collection.find_one(query)
        return Task.from_doc(doc) if doc else None

    def insert(self, task: Task) -> Task:
        res = self.collection.insert_one(task.to_doc())
        task.id = str(res.inserted_id)
        return task

    def update_for_owner(self, owner_id: str, task_id, fields: dict) -> Optional[Task]:
        query = self._owner_filter(owner_id, task_id)
        if query is None:
            return None
        doc = self.collection.find_one_and_update(
            query,
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        return Task.from_doc(doc) if doc else None

    def delete_for_owner(self, owner_id: str, task_id) -> bool:
        query = self._owner_filter(owner_id, task_id)
        if query is None:
            return False
        return self.collection.delete_one(query).deleted_count == 1
