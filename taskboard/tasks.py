"""
Task access controller.

Every function takes the caller's id explicitly; a task is only ever read or
written through a query that includes its owner. A task that exists but
belongs to someone else is reported exactly like a missing one.
"""
import logging
from typing import Optional

from taskboard.errors import NotFoundError, ValidationError
from taskboard.models import DEFAULT_STATUS, is_valid_status
from taskboard.storage import TaskQuery, TaskStore

logger = logging.getLogger(__name__)


def build_task_query(owner_id: str, status: Optional[str] = None,
                     search: Optional[str] = None) -> TaskQuery:
    # an unknown status is the same as no status filter
    if not is_valid_status(status):
        status = None
    return TaskQuery(owner_id=owner_id, status=status, search=search or None)


def list_tasks(store: TaskStore, owner_id: str, status: Optional[str] = None,
               search: Optional[str] = None) -> list:
    return store.find_many(build_task_query(owner_id, status, search))


def create_task(store: TaskStore, owner_id: str, title: Optional[str],
                description: Optional[str] = None, status: Optional[str] = None) -> dict:
    if not title:
        raise ValidationError("Title is required")
    if status and not is_valid_status(status):
        # kept as-is on create (update is stricter), see DESIGN.md
        logger.warning("storing task with non-standard status %r for user %s", status, owner_id)
    task = store.insert(
        owner_id=owner_id,
        title=title,
        description=description or "",
        status=status or DEFAULT_STATUS,
    )
    logger.info("created task %s for user %s", task["id"], owner_id)
    return task


def _get_owned(store: TaskStore, owner_id: str, task_id: str) -> dict:
    task = store.find_one(task_id, owner_id)
    if task is None:
        raise NotFoundError("Task not found")
    return task


def update_task(store: TaskStore, owner_id: str, task_id: str, fields: dict) -> dict:
    task = _get_owned(store, owner_id, task_id)
    for key in ("title", "description"):
        if fields.get(key) is not None:
            task[key] = fields[key]
    status = fields.get("status")
    if status is not None and is_valid_status(status):
        task["status"] = status
    return store.save(task)


def delete_task(store: TaskStore, owner_id: str, task_id: str) -> None:
    task = _get_owned(store, owner_id, task_id)
    store.delete(task)
    logger.info("deleted task %s for user %s", task["id"], owner_id)
