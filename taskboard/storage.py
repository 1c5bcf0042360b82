import json
import logging
import uuid
from contextlib import contextmanager, suppress
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import redis

from taskboard.errors import ConflictError, InvalidIdentifier, NotFoundError, StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskQuery:
    """Filter for TaskStore.find_many. owner_id is mandatory, the rest optional."""
    owner_id: str
    status: Optional[str] = None
    search: Optional[str] = None

    def matches(self, doc: dict) -> bool:
        if doc.get("userId") != self.owner_id:
            return False
        if self.status is not None and doc.get("status") != self.status:
            return False
        if self.search is not None and self.search.lower() not in doc.get("title", "").lower():
            return False
        return True


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_id(value: str, label: str) -> str:
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise InvalidIdentifier(f"Invalid {label} id")


@contextmanager
def _redis_errors(op: str):
    try:
        yield
    except redis.RedisError as exc:
        logger.error("redis %s failed: %s", op, exc)
        raise StorageError(f"{op} failed") from exc


def task_key(task_id: str) -> str:
    return f"task:{task_id}"


def user_tasks_key(user_id: str) -> str:
    return f"user:{{{user_id}}}:tasks"


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def email_key(email: str) -> str:
    return f"email:{email}"


class TaskStore:
    """Tasks as JSON documents under task:<id>, plus one id set per owner."""

    def __init__(self, r: redis.Redis):
        self.r = r

    def find_many(self, query: TaskQuery) -> list:
        with _redis_errors("find tasks"):
            ids = sorted(self.r.smembers(user_tasks_key(query.owner_id)))
            if not ids:
                return []
            raw = self.r.mget([task_key(task_id) for task_id in ids])
        docs = []
        for item in raw:
            # index can briefly point at a task deleted by another request
            if item is None:
                continue
            doc = json.loads(item)
            if query.matches(doc):
                docs.append(doc)
        docs.sort(key=lambda d: (d["createdAt"], d["id"]), reverse=True)
        return docs

    def insert(self, owner_id: str, title: str, description: str, status: str) -> dict:
        task_id = str(uuid.uuid4())
        doc = {
            "id": task_id,
            "userId": owner_id,
            "title": title,
            "description": description,
            "status": status,
            "createdAt": _now(),
        }
        with _redis_errors("insert task"):
            with self.r.pipeline(transaction=True) as p:
                p.set(task_key(task_id), json.dumps(doc))
                p.sadd(user_tasks_key(owner_id), task_id)
                p.execute()
        return doc

    def find_one(self, task_id: str, owner_id: str) -> Optional[dict]:
        task_id = _check_id(task_id, "task")
        with _redis_errors("get task"):
            raw = self.r.get(task_key(task_id))
        if raw is None:
            return None
        doc = json.loads(raw)
        if doc.get("userId") != owner_id:
            return None
        return doc

    def save(self, doc: dict) -> dict:
        with _redis_errors("save task"):
            # XX: never recreate a task deleted since it was read
            saved = self.r.set(task_key(doc["id"]), json.dumps(doc), xx=True)
        if not saved:
            raise NotFoundError("Task not found")
        return doc

    def delete(self, doc: dict) -> None:
        with _redis_errors("delete task"):
            with self.r.pipeline(transaction=True) as p:
                p.delete(task_key(doc["id"]))
                p.srem(user_tasks_key(doc["userId"]), doc["id"])
                p.execute()


class UserStore:
    """Users under user:<id>; email:<address> maps an email to its user id."""

    def __init__(self, r: redis.Redis):
        self.r = r

    def insert(self, name: str, email: str, password: str) -> dict:
        user_id = str(uuid.uuid4())
        email = email.lower()
        with _redis_errors("insert user"):
            # claims the email atomically, the storage-level unique index
            if not self.r.set(email_key(email), user_id, nx=True):
                raise ConflictError("User already exists")
            doc = {
                "id": user_id,
                "name": name,
                "email": email,
                "password": password,
                "bio": "",
                "createdAt": _now(),
            }
            try:
                self.r.set(user_key(user_id), json.dumps(doc))
            except redis.RedisError:
                # release the email so a retry is not reported as a duplicate
                with suppress(redis.RedisError):
                    self.r.delete(email_key(email))
                raise
        return doc

    def get(self, user_id: str) -> Optional[dict]:
        user_id = _check_id(user_id, "user")
        with _redis_errors("get user"):
            raw = self.r.get(user_key(user_id))
        if raw is None:
            return None
        return json.loads(raw)

    def find_by_email(self, email: str) -> Optional[dict]:
        with _redis_errors("find user"):
            user_id = self.r.get(email_key(email.lower()))
        if user_id is None:
            return None
        return self.get(user_id)

    def save(self, doc: dict) -> dict:
        with _redis_errors("save user"):
            self.r.set(user_key(doc["id"]), json.dumps(doc))
        return doc
