from fastapi.testclient import TestClient

from remind_me.server.app import create_app
from remind_me.server.dependencies import reset_dependencies


def create_test_client(tmp_path, monkeypatch, extra_yaml: str = "") -> TestClient:
    config_path = tmp_path / "app_config.yaml"
    config_path.write_text(
        "storage:\n"
        "  backend: file\n"
        f"  data_dir: {tmp_path / 'data'}\n"
        "log:\n"
        "  level: WARNING\n"
        "  file: ''\n" + extra_yaml,
        encoding="utf-8",
    )
    monkeypatch.setenv("REMIND_ME_CONFIG", str(config_path))
    reset_dependencies()
    app = create_app()
    return TestClient(app)


def test_health(tmp_path, monkeypatch):
    client = create_test_client(tmp_path, monkeypatch)
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["storage_ok"] is True


def test_reminder_api_crud_flow(tmp_path, monkeypatch):
    client = create_test_client(tmp_path, monkeypatch)

    resp = client.get("/api/reminders")
    assert resp.status_code == 200
    assert resp.json() == []

    create_payload = {
        "title": "Prepare slides",
        "description": "For Friday meeting",
        "due_date": "2030-12-10T09:00:00Z",
    }
    resp = client.post("/api/reminders", json=create_payload)
    assert resp.status_code == 201
    reminder = resp.json()
    assert reminder["title"] == create_payload["title"]
    assert reminder["due_display"] == "2030-12-10 09:00"
    assert reminder["overdue"] is False
    reminder_id = reminder["id"]
    assert (tmp_path / "data" / "reminders_v2.json").exists()

    resp = client.patch(f"/api/reminders/{reminder_id}", json={"due_date": None, "title": "Slides"})
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["due_date"] == ""
    assert updated["title"] == "Slides"
    assert updated["description"] == "For Friday meeting"

    resp = client.post(f"/api/reminders/{reminder_id}/toggle")
    assert resp.status_code == 200
    assert resp.json()["completed"] is True

    resp = client.get("/api/reminders", params={"filter": "active"})
    assert resp.json() == []

    resp = client.delete(f"/api/reminders/{reminder_id}")
    assert resp.status_code == 200
    assert resp.json() == {"deleted": True}

    assert client.get(f"/api/reminders/{reminder_id}").status_code == 404
    assert client.delete(f"/api/reminders/{reminder_id}").status_code == 404
    assert client.post("/api/reminders/missing/toggle").status_code == 404


def test_reminder_validation(tmp_path, monkeypatch):
    client = create_test_client(tmp_path, monkeypatch)
    assert client.post("/api/reminders", json={"title": ""}).status_code == 422
    assert client.post("/api/reminders", json={"title": "   "}).status_code == 422


def test_stats_and_calendar(tmp_path, monkeypatch):
    client = create_test_client(tmp_path, monkeypatch)
    client.post("/api/reminders", json={"title": "Past", "due_date": "2000-01-01T12:00:00Z"})
    client.post("/api/reminders", json={"title": "Later", "due_date": "2030-03-15T12:00:00Z"})
    client.post("/api/reminders", json={"title": "Whenever"})

    resp = client.get("/api/reminders/stats")
    assert resp.status_code == 200
    assert resp.json() == {"total": 3, "active": 3, "completed": 0, "overdue": 1}

    resp = client.get("/api/reminders", params={"sort": "title"})
    assert [r["title"] for r in resp.json()] == ["Later", "Past", "Whenever"]

    resp = client.get("/api/reminders/calendar", params={"month": "2030-03"})
    assert resp.status_code == 200
    calendar = resp.json()
    assert calendar["label"] == "March 2030"
    assert list(calendar["reminders"]) == ["2030-03-15"]
    assert [r["title"] for r in calendar["unscheduled"]] == ["Whenever"]

    assert client.get("/api/reminders/calendar", params={"month": "March"}).status_code == 400


def test_tags_api(tmp_path, monkeypatch):
    client = create_test_client(tmp_path, monkeypatch)

    resp = client.post("/api/tags", json={"name": "Work"})
    assert resp.status_code == 201
    tag = resp.json()
    assert tag["color"] == "#FA8A59"

    assert client.post("/api/tags", json={"name": "Bad", "color": "red"}).status_code == 422

    resp = client.post("/api/reminders", json={"title": "Report", "tag_ids": [tag["id"]]})
    reminder = resp.json()
    assert [t["name"] for t in reminder["tags"]] == ["Work"]

    resp = client.patch(f"/api/tags/{tag['id']}", json={"color": "#123456"})
    assert resp.status_code == 200
    assert resp.json() == {"id": tag["id"], "name": "Work", "color": "#123456"}

    assert client.delete(f"/api/tags/{tag['id']}").json() == {"deleted": True}
    assert client.get("/api/tags").json() == []

    resp = client.get(f"/api/reminders/{reminder['id']}")
    assert resp.json()["tag_ids"] == [tag["id"]]
    assert resp.json()["tags"] == []


def test_locale_api(tmp_path, monkeypatch):
    client = create_test_client(tmp_path, monkeypatch)

    assert client.get("/api/i18n/locale").json()["locale"] == "en"

    resp = client.put("/api/i18n/locale", json={"locale": "zh-CN"})
    assert resp.status_code == 200
    assert resp.json() == {"locale": "zh-Hans", "saved": True}
    assert (tmp_path / "data" / "remind-me-locale.json").read_text(encoding="utf-8") == "zh-Hans"

    resp = client.get("/api/i18n/translate", params={"key": "nav.home"})
    assert resp.json() == {"key": "nav.home", "locale": "zh-Hans", "value": "首页"}

    resp = client.get("/api/i18n/translate", params={"key": "nav.home", "locale": "zh-Hant"})
    assert resp.json()["value"] == "首頁"

    resp = client.get("/api/i18n/translate", params={"key": "missing.key"})
    assert resp.json()["value"] == "missing.key"


def test_navigation_api(tmp_path, monkeypatch):
    client = create_test_client(
        tmp_path, monkeypatch, "routing:\n  base_path: /repo\n  hosting_mode: static\n"
    )

    resp = client.get("/api/navigation/parse", params={"path": "/repo/#/zh-Hant/app"})
    assert resp.json() == {"route": "app", "locale": "zh-Hant", "url": "/repo/#/zh-Hant/app"}

    resp = client.get("/api/navigation/build", params={"route": "terms", "locale": "zh-TW"})
    assert resp.json()["url"] == "/repo/#/zh-Hant/terms"

    resp = client.get(
        "/api/navigation/build", params={"route": "app", "locale": "en", "mode": "server", "base_path": ""}
    )
    assert resp.json()["url"] == "/en/app"

    assert client.get("/api/navigation/build", params={"route": "blog"}).status_code == 400


def test_navigation_api_detects_static_host(tmp_path, monkeypatch):
    client = create_test_client(tmp_path, monkeypatch)

    resp = client.get(
        "/api/navigation/parse", params={"path": "/remind-me/#/zh-Hans/app", "hostname": "someone.github.io"}
    )
    assert resp.json() == {"route": "app", "locale": "zh-Hans", "url": "/remind-me/#/zh-Hans/app"}

    resp = client.get("/api/navigation/build", params={"route": "privacy", "locale": "en"})
    assert resp.json()["url"] == "/en/privacy"

    resp = client.get(
        "/api/navigation/build",
        params={"route": "privacy", "locale": "en", "hostname": "someone.github.io", "pathname": "/remind-me/"},
    )
    assert resp.json()["url"] == "/remind-me/#/en/privacy"
