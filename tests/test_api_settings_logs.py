"""Settings, activity logs and dashboard stats over HTTP."""
from datetime import datetime

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, login


def test_settings_put_is_shallow_merge(admin_client):
    before = admin_client.get("/api/settings").json()
    assert before["sessionTimeout"] == 30

    r = admin_client.put("/api/settings", json={"sessionTimeout": 45})
    assert r.status_code == 200
    again = admin_client.put("/api/settings", json={"sessionTimeout": 45}).json()

    after = admin_client.get("/api/settings").json()
    assert after == again
    assert after["sessionTimeout"] == 45
    assert {k: v for k, v in after.items() if k != "sessionTimeout"} == {
        k: v for k, v in before.items() if k != "sessionTimeout"
    }


def test_settings_invalid_value_is_400(admin_client):
    r = admin_client.put("/api/settings", json={"sessionTimeout": "later"})
    assert r.status_code == 400
    assert admin_client.get("/api/settings").json()["sessionTimeout"] == 30


def test_non_admins_read_but_cannot_change_settings(teacher_client, parent_client):
    assert teacher_client.get("/api/settings").status_code == 200
    assert parent_client.get("/api/settings").status_code == 200
    assert teacher_client.put("/api/settings", json={"sessionTimeout": 5}).status_code == 403
    assert parent_client.put("/api/settings", json={"sessionTimeout": 5}).status_code == 403


def test_logs_return_last_ten_newest_first(admin_client):
    for i in range(12):
        admin_client.post("/api/schools", json={"name": f"School {i}"})

    logs = admin_client.get("/api/logs").json()

    assert len(logs) == 10
    assert logs[0]["action"] == "Added school: School 11"
    assert logs[9]["action"] == "Added school: School 2"
    assert all(entry["user"] == "System Administrator" for entry in logs)
    timestamps = [datetime.fromisoformat(entry["timestamp"]) for entry in logs]
    assert timestamps == sorted(timestamps, reverse=True)


def test_logs_limit_parameter(admin_client):
    assert len(admin_client.get("/api/logs", params={"limit": 2}).json()) == 2
    assert admin_client.get("/api/logs", params={"limit": 0}).status_code == 400


def test_login_and_logout_are_logged(client):
    login(client, ADMIN_EMAIL, ADMIN_PASSWORD, "admin")
    client.post("/api/logout")
    login(client, ADMIN_EMAIL, ADMIN_PASSWORD, "admin")
    actions = [entry["action"] for entry in client.get("/api/logs").json()]
    assert actions[:3] == ["System Administrator logged in", "Logged out", "System Administrator logged in"]


def test_logs_are_admin_only(teacher_client):
    assert teacher_client.get("/api/logs").status_code == 403


def test_dashboard_stats_by_role(admin_client, teacher_client, parent_client, world):
    admin_stats = admin_client.get("/api/dashboard-stats").json()
    assert admin_stats["totalStudents"] == 3
    assert admin_stats["totalTeachers"] == 2
    assert admin_stats["totalSchools"] == 1
    assert admin_stats["totalParents"] == 1
    assert admin_stats["pendingForms"] == 9

    assert teacher_client.get("/api/dashboard-stats").json() == {
        "myStudents": 2,
        "pendingForms": 6,
        "inProgressForms": 0,
        "completedForms": 0,
        "assignedSchools": 1,
    }
    assert parent_client.get("/api/dashboard-stats").json() == {
        "myChildren": 2,
        "pendingForms": 6,
        "inProgressForms": 0,
        "completedForms": 0,
    }


def test_dashboard_stats_reflect_new_progress(admin_client, teacher_client, world):
    emma = world["students"][0]
    teacher_client.post(f"/api/students/{emma['id']}/progress", json={"notes": "done"})
    stats = teacher_client.get("/api/dashboard-stats").json()
    assert stats["completedForms"] == 1
    assert stats["pendingForms"] == 5
