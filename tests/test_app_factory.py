from __future__ import annotations

from src.construction_hr.construction_hr.main import socketio_run_options


def test_dev_server_is_not_forced_outside_debug(app, monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    app.config["DEBUG"] = False

    options = socketio_run_options(app)

    assert options["port"] == 8080
    assert options["debug"] is False
    assert "allow_unsafe_werkzeug" not in options


def test_dev_server_allowed_under_debug(app):
    app.config["DEBUG"] = True

    assert socketio_run_options(app)["allow_unsafe_werkzeug"] is True


def test_health(client):
    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}
