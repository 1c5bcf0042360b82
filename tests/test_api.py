# tests/test_api.py

from .fakes import BrokenRedis

from taskboard import main
from taskboard.storage import TaskStore


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json() == {"message": "API is running"}


def test_happy_path(client, alice):
    # Create a task
    t = client.post("/api/tasks", headers=alice, json={
        "title": "Buy milk",
        "description": "2% organic",
    })
    assert t.status_code == 201
    task = t.json()
    assert task["status"] == "pending"
    task_id = task["id"]

    # List tasks
    lst = client.get("/api/tasks", headers=alice)
    assert lst.status_code == 200
    assert [x["id"] for x in lst.json()] == [task_id]

    # Update task to completed
    upd = client.put(f"/api/tasks/{task_id}", headers=alice, json={"status": "completed"})
    assert upd.status_code == 200
    assert upd.json()["status"] == "completed"
    assert upd.json()["description"] == "2% organic"

    # Filter
    assert len(client.get("/api/tasks", headers=alice, params={"status": "completed"}).json()) == 1
    assert client.get("/api/tasks", headers=alice, params={"status": "pending"}).json() == []
    assert len(client.get("/api/tasks", headers=alice, params={"search": "MILK"}).json()) == 1

    # Delete task
    d = client.delete(f"/api/tasks/{task_id}", headers=alice)
    assert d.status_code == 200
    assert d.json() == {"message": "Task removed"}
    assert client.get("/api/tasks", headers=alice).json() == []


def test_create_without_title(client, alice):
    res = client.post("/api/tasks", headers=alice, json={"description": "no title"})
    assert res.status_code == 400
    assert res.json() == {"detail": "Title is required"}


def test_auth_required(client):
    assert client.get("/api/tasks").status_code == 401
    assert client.get("/api/tasks", headers={"Authorization": "Bearer nope"}).status_code == 401
    assert client.get("/api/users/me").status_code == 401


def test_other_users_tasks_are_invisible(client, alice, bob):
    task_id = client.post("/api/tasks", headers=bob, json={"title": "bob's"}).json()["id"]

    assert client.get("/api/tasks", headers=alice).json() == []
    upd = client.put(f"/api/tasks/{task_id}", headers=alice, json={"title": "mine"})
    assert upd.status_code == 404
    assert upd.json() == {"detail": "Task not found"}
    assert client.delete(f"/api/tasks/{task_id}", headers=alice).status_code == 404
    assert client.get("/api/tasks", headers=bob).json()[0]["title"] == "bob's"


def test_malformed_task_id(client, alice):
    res = client.put("/api/tasks/123", headers=alice, json={"title": "x"})
    assert res.status_code == 400
    assert res.json() == {"detail": "Invalid task id"}
    assert client.delete("/api/tasks/123", headers=alice).status_code == 400


def test_register_login_and_profile(client):
    reg = client.post("/api/auth/register", json={"name": "Carol", "email": "carol@example.com",
                                                  "password": "pw"})
    assert reg.status_code == 201
    assert "password" not in reg.json()["user"]

    dup = client.post("/api/auth/register", json={"name": "C", "email": "carol@example.com",
                                                  "password": "pw"})
    assert dup.status_code == 400

    assert client.post("/api/auth/login", json={"email": "carol@example.com",
                                                "password": "bad"}).status_code == 401
    login = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "pw"})
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.json()['token']}"}

    me = client.put("/api/users/me", headers=headers,
                    json={"bio": "hello", "email": "other@example.com"})
    assert me.status_code == 200
    assert me.json()["bio"] == "hello"
    assert me.json()["email"] == "carol@example.com"
    assert client.get("/api/users/me", headers=headers).json()["name"] == "Carol"


def test_storage_failure_is_500(client, alice):
    main.app.dependency_overrides[main.get_task_store] = lambda: TaskStore(BrokenRedis())
    res = client.get("/api/tasks", headers=alice)
    assert res.status_code == 500
    assert res.json() == {"detail": "Server error"}


def test_update_with_non_string_status_keeps_the_rest(client, alice):
    task_id = client.post("/api/tasks", headers=alice, json={"title": "Buy milk"}).json()["id"]

    upd = client.put(f"/api/tasks/{task_id}", headers=alice, json={"title": "renamed", "status": 5})
    assert upd.status_code == 200
    assert upd.json()["title"] == "renamed"
    assert upd.json()["status"] == "pending"


def test_malformed_body_is_400(client, alice):
    task_id = client.post("/api/tasks", headers=alice, json={"title": "Buy milk"}).json()["id"]

    res = client.put(f"/api/tasks/{task_id}", headers=alice, json={"title": ["not", "a", "string"]})
    assert res.status_code == 400
    assert "title" in res.json()["detail"]

    res = client.post("/api/auth/register", json={"name": "X", "email": "not-an-email", "password": "pw"})
    assert res.status_code == 400
