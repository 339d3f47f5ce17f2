"""
Shared fixtures: a fresh app + in-memory store per test and logged-in clients.

DEBUG must be set before ``caseconf.config`` is imported, otherwise the default
admin password is rejected.
"""
import os

os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from caseconf.config import Settings
from caseconf.main import create_app
from caseconf.models import Identity, RecordKind, UserRole
from caseconf.services.memory_store import InMemoryRecordStore

ADMIN_EMAIL = "admin@schools.org"
ADMIN_PASSWORD = "admin123"
TEACHER_PASSWORD = "teacher123"
PARENT_PASSWORD = "parent123"

ADMIN = Identity(user_id="A1001", role=UserRole.ADMIN)


@pytest.fixture
def config() -> Settings:
    return Settings(
        debug=True,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        allow_demo_provisioning=False,
        seed_demo_data=False,
        session_ttl_minutes=30,
    )


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def seeded_store(store) -> InMemoryRecordStore:
    """Store with the bootstrap admin (A1001); hashes are placeholders."""
    store.create(RecordKind.USERS, {"name": "Admin", "email": ADMIN_EMAIL, "password_hash": "x"}, None)
    return store


@pytest.fixture
def app(config, store):
    return create_app(config, store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def login(client: TestClient, email: str, password: str, role: str):
    return client.post("/api/login", json={"email": email, "password": password, "role": role})


@pytest.fixture
def admin_client(client):
    r = login(client, ADMIN_EMAIL, ADMIN_PASSWORD, "admin")
    assert r.status_code == 200, r.text
    return client


@pytest.fixture
def new_client(app):
    """Factory for extra clients (own cookie jar) against the same app."""
    clients = []

    def make() -> TestClient:
        c = TestClient(app)
        clients.append(c)
        return c

    yield make
    for c in clients:
        c.close()


@pytest.fixture
def world(admin_client):
    """School, two teachers, three students and a parent, created through the API."""
    school = admin_client.post("/api/schools", json={"name": "Lincoln Elementary", "type": "elementary"}).json()["school"]
    t1 = admin_client.post(
        "/api/teachers",
        json={"name": "Alice Teacher", "email": "alice@test.com", "password": TEACHER_PASSWORD, "assignedSchools": [school["id"]]},
    ).json()["teacher"]
    t2 = admin_client.post(
        "/api/teachers",
        json={"name": "Bob Teacher", "email": "bob@test.com", "password": TEACHER_PASSWORD},
    ).json()["teacher"]
    s1 = admin_client.post("/api/students", json={"name": "Emma", "assignedTeacher": t1["id"], "school": school["id"]}).json()["student"]
    s2 = admin_client.post("/api/students", json={"name": "Liam", "assignedTeacher": t1["id"]}).json()["student"]
    s3 = admin_client.post("/api/students", json={"name": "Noah", "assignedTeacher": t2["id"]}).json()["student"]
    parent = admin_client.post(
        "/api/parents",
        json={"name": "Pat Parent", "email": "pat@test.com", "password": PARENT_PASSWORD, "children": [s1["id"], s3["id"]]},
    ).json()["parent"]
    return {
        "school": school,
        "teacher": t1,
        "other_teacher": t2,
        "students": [s1, s2, s3],
        "parent": parent,
    }


@pytest.fixture
def teacher_client(world, new_client):
    c = new_client()
    assert login(c, "alice@test.com", TEACHER_PASSWORD, "teacher").status_code == 200
    return c


@pytest.fixture
def parent_client(world, new_client):
    c = new_client()
    assert login(c, "pat@test.com", PARENT_PASSWORD, "parent").status_code == 200
    return c
