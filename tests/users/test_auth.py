from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.construction_hr.construction_hr.core.enums import Role
from src.construction_hr.construction_hr.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from src.construction_hr.construction_hr.users.tokens import TokenService


def test_login_returns_token_that_decodes_to_the_user(container, repos):
    user = repos.users.add("ravi", "pass123", Role.SUPERVISOR)

    result = container.auth_service.login("ravi", "pass123")
    decoded = container.auth_service.decode(result.token)

    assert decoded.user_id == user.user_id
    assert decoded.role == Role.SUPERVISOR
    assert result.to_dict()["user"] == {"_id": user.user_id, "username": "ravi", "role": "Supervisor"}


@pytest.mark.parametrize("username,password", [("ravi", "wrong"), ("nobody", "pass123")])
def test_login_rejects_bad_credentials(container, repos, username, password):
    repos.users.add("ravi", "pass123")

    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        container.auth_service.login(username, password)


def test_admin_portal_only_admits_admins(container, repos):
    repos.users.add("worker1", "pass123", Role.WORKER)
    repos.users.add("boss", "pass123", Role.ADMIN)

    with pytest.raises(AuthorizationError):
        container.auth_service.login("worker1", "pass123", requested_role="Admin")
    with pytest.raises(AuthorizationError):
        container.auth_service.login("boss", "pass123", requested_role="Worker")

    assert container.auth_service.login("boss", "pass123", requested_role="Admin").user.role == Role.ADMIN


def test_expired_and_foreign_tokens_are_rejected(repos):
    user = repos.users.add("ravi")
    tokens = TokenService("secret-a", expires_hours=1)

    stale = tokens.issue(user, now=datetime.now(timezone.utc) - timedelta(hours=2))
    with pytest.raises(AuthenticationError, match="expired"):
        tokens.decode(stale)

    foreign = TokenService("secret-b").issue(user)
    with pytest.raises(AuthenticationError, match="Invalid token"):
        tokens.decode(foreign)


def test_register_requires_admin_and_unique_username(container, repos):
    repos.users.add("taken")

    with pytest.raises(AuthorizationError):
        container.user_service.register(current_role=Role.MANAGER, username="x", password="pass123", role="Worker")
    with pytest.raises(ConflictError):
        container.user_service.register(current_role=Role.ADMIN, username="taken", password="pass123", role="Worker")
    with pytest.raises(ValidationError):
        container.user_service.register(current_role=Role.ADMIN, username="new", password="123", role="Worker")
    with pytest.raises(ValidationError):
        container.user_service.register(current_role=Role.ADMIN, username="new", password="pass123", role="Chief")

    user = container.user_service.register(current_role=Role.ADMIN, username="new", password="pass123", role="Manager")
    assert user.role == Role.MANAGER


def test_login_route_returns_401_for_wrong_password(client, repos):
    repos.users.add("ravi", "pass123")

    resp = client.post("/api/auth/login", json={"username": "ravi", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json() == {"message": "Invalid credentials"}


def test_protected_route_without_token_is_401(client):
    resp = client.get("/api/auth/me")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Access token missing"


def test_role_guard_returns_403(client, repos, auth_header):
    worker = repos.users.add("worker1")

    resp = client.get("/api/employees", headers=auth_header(worker))

    assert resp.status_code == 403


def test_me_and_change_role(client, repos, auth_header):
    admin = repos.users.add("boss", role=Role.ADMIN)
    worker = repos.users.add("worker1")

    me = client.get("/api/auth/me", headers=auth_header(worker))
    assert me.get_json() == {"_id": worker.user_id, "username": "worker1", "role": "Worker"}

    resp = client.patch(f"/api/users/{worker.user_id}/role", json={"role": "Supervisor"}, headers=auth_header(admin))
    assert resp.status_code == 200
    assert repos.users.get_by_id(worker.user_id).role == Role.SUPERVISOR


def test_health(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}
