"""Task Lifecycle Engine.

Every operation takes the owner id explicitly and goes through
:class:`TaskRepository`'s owner-scoped calls. ``completed_at`` is derived in
exactly one place, :func:`resolve_completed_at`, which both create and
update call.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from tasktrack.errors import NotFoundError
from tasktrack.models.task_model import Task, TaskStatus
from tasktrack.repositories.task_repository import TaskRepository
from tasktrack.schemas.task_schemas import TaskCreate, TaskUpdate
from tasktrack.utils.clock import utcnow

logger = logging.getLogger(__name__)


def resolve_completed_at(
    old_status: Optional[TaskStatus],
    new_status: TaskStatus,
    completed_at: Optional[datetime],
    now: datetime,
) -> Optional[datetime]:
    """Return the ``completed_at`` a task should have after a status write.

    ``old_status`` is None for a task being created.
    """
    was_completed = old_status is not None and old_status.is_completed
    if new_status.is_completed and not was_completed:
        return now
    if not new_status.is_completed and was_completed:
        return None
    return completed_at


class TaskService:
    def __init__(self, repository: TaskRepository, clock: Callable[[], datetime] = utcnow):
        self.repository = repository
        self.clock = clock

    def list_tasks(self, owner_id: str) -> List[Task]:
        return self.repository.list_for_owner(owner_id)

    def get_task(self, owner_id: str, task_id) -> Task:
        task = self.repository.find_for_owner(owner_id, task_id)
        if task is None:
            raise NotFoundError()
        return task

    def create_task(self, owner_id: str, data: TaskCreate) -> Task:
        now = self.clock()
        status = data.status or TaskStatus.PENDING
        task = Task(
            title=data.title,
            description=data.description,
            status=status,
            completed_at=resolve_completed_at(None, status, None, now),
            user_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        task = self.repository.insert(task)
        logger.debug("Task %s created for user %s", task.id, owner_id)
        return task

    def update_task(self, owner_id: str, task_id, data: TaskUpdate) -> Task:
        task = self.get_task(owner_id, task_id)
        changes = data.changes()

        fields = {}
        if "title" in changes and changes["title"] != task.title:
            fields["title"] = changes["title"]
        if "description" in changes and changes["description"] != task.description:
            fields["description"] = changes["description"]
        if "status" in changes and changes["status"] is not task.status:
            new_status = changes["status"]
            fields["status"] = new_status.value
            fields["completed_at"] = resolve_completed_at(
                task.status, new_status, task.completed_at, self.clock()
            )

        if not fields:
            return task

        fields["updated_at"] = self.clock()
        updated = self.repository.update_for_owner(owner_id, task_id, fields)
        if updated is None:
            # deleted between the read and the write
            raise NotFoundError()
        return updated

    def delete_task(self, owner_id: str, task_id) -> None:
        if not self.repository.delete_for_owner(owner_id, task_id):
            raise NotFoundError()
        logger.debug("Task %s deleted for user %s", task_id, owner_id)
