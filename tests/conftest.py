# tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from taskboard import config, main
from taskboard.storage import TaskStore, UserStore

from .fakes import FakeRedis


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    # lowest cost bcrypt accepts, keeps the suite quick
    monkeypatch.setattr(config, "BCRYPT_ROUNDS", 4)


@pytest.fixture()
def fake_redis():
    return FakeRedis()


@pytest.fixture()
def task_store(fake_redis):
    return TaskStore(fake_redis)


@pytest.fixture()
def user_store(fake_redis):
    return UserStore(fake_redis)


@pytest.fixture()
def client(task_store, user_store):
    """
    TestClient wired to the in-memory redis. The module level redis client
    in taskboard.main is never used.
    """
    main.app.dependency_overrides[main.get_task_store] = lambda: task_store
    main.app.dependency_overrides[main.get_user_store] = lambda: user_store
    with TestClient(main.app) as c:
        yield c
    main.app.dependency_overrides.clear()


def _register(client, name, email, password="secret123"):
    res = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert res.status_code == 201, res.text
    return {"Authorization": f"Bearer {res.json()['token']}"}


@pytest.fixture()
def alice(client):
    return _register(client, "Alice", "alice@example.com")


@pytest.fixture()
def bob(client):
    return _register(client, "Bob", "bob@example.com")
