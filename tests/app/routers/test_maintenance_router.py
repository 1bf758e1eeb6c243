"""Tests for the maintenance API and health check."""


def test_ping(client):
    resp = client.get("/ping")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True
    assert resp.json()["ts"]


def test_sweep_without_configured_token(client, make_expired_chat_with_history):
    make_expired_chat_with_history()
    resp = client.post("/maintenance/sweep-ephemeral")
    assert resp.status_code == 200
    assert resp.json() == {"deletedCount": 1, "failedCount": 0}


def test_sweep_requires_configured_token(client, monkeypatch):
    monkeypatch.setenv("MAINTENANCE_TOKEN", "sweep-secret")

    assert client.post("/maintenance/sweep-ephemeral").status_code == 401
    wrong = client.post(
        "/maintenance/sweep-ephemeral", headers={"X-Maintenance-Token": "nope"}
    )
    assert wrong.status_code == 401

    ok = client.post(
        "/maintenance/sweep-ephemeral", headers={"X-Maintenance-Token": "sweep-secret"}
    )
    assert ok.status_code == 200
    assert ok.json()["deletedCount"] == 0
