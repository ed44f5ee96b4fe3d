# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""Tests for login / session handling, the navigation guard endpoint and the dashboard."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from main import app
from courtdesk.core import dependencies
from courtdesk.core.config import _parse_users, settings
from courtdesk.core.dependencies import (
    clear_resolvers,
    get_auth_service,
    get_session_repo,
    get_task_repo,
    get_project_repo,
    get_team_repo,
    get_team_service,
)
from courtdesk.repositories.session_repository import SessionRepository
from courtdesk.services.auth_service import AuthService

client = TestClient(app)

USERS = {
    "alice@firm.in": {"password": "s3cret", "name": "Alice Auth"},
    "bob@firm.in": {"password": "hunter2", "name": ""},
}


@pytest.fixture(autouse=True)
def reset_state():
    get_session_repo().clear()
    get_team_repo().clear()
    get_task_repo().clear()
    get_project_repo().clear()
    clear_resolvers()
    with patch.dict(settings.USER_CREDENTIALS, USERS, clear=True):
        yield


def _login(email="alice@firm.in", password="s3cret"):
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["token"]


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


# ============================================
# Credentials parsing
# ============================================
class TestParseUsers:
    def test_email_password_and_name(self):
        users = _parse_users("Alice@Firm.in:pw:Alice A, bob@firm.in:pw2 ,broken, :nope")
        assert users == {
            "alice@firm.in": {"password": "pw", "name": "Alice A"},
            "bob@firm.in": {"password": "pw2", "name": ""},
        }

    def test_name_keeps_colons(self):
        assert _parse_users("a@x.com:p:Name:With:Colons")["a@x.com"]["name"] == "Name:With:Colons"

    def test_empty(self):
        assert _parse_users("") == {}


# ============================================
# Login / logout / session
# ============================================
class TestLogin:
    def test_login_success(self):
        response = client.post(
            "/api/v1/auth/login", json={"email": " Alice@Firm.in ", "password": "s3cret"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert data["user"] == {"email": "alice@firm.in", "name": "Alice Auth"}
        assert data["message"] == "Login successful"
        assert get_session_repo().count() == 1

    def test_wrong_password(self):
        response = client.post(
            "/api/v1/auth/login", json={"email": "alice@firm.in", "password": "nope"}
        )
        assert response.status_code == 401

    def test_unknown_user(self):
        response = client.post(
            "/api/v1/auth/login", json={"email": "eve@firm.in", "password": "s3cret"}
        )
        assert response.status_code == 401

    def test_missing_fields_rejected(self):
        response = client.post("/api/v1/auth/login", json={"email": "alice@firm.in"})
        assert response.status_code == 422


class TestSession:
    def test_anonymous_session(self):
        data = client.get("/api/v1/auth/session").json()
        assert data == {"user": None, "is_authenticated": False, "is_loading": False}

    def test_bearer_session(self):
        token = _login()
        data = client.get("/api/v1/auth/session", headers=_auth(token)).json()
        assert data["is_authenticated"] is True
        assert data["user"]["email"] == "alice@firm.in"

    def test_session_header_alternative(self):
        token = _login()
        data = client.get("/api/v1/auth/session", headers={"X-Session-Token": token}).json()
        assert data["is_authenticated"] is True

    def test_user_without_name_has_null_name(self):
        token = _login("bob@firm.in", "hunter2")
        data = client.get("/api/v1/auth/session", headers=_auth(token)).json()
        assert data["user"] == {"email": "bob@firm.in", "name": None}

    def test_expired_session_is_anonymous(self):
        token = _login()
        session = get_session_repo().get(token)
        session["expires_at"] = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
        data = client.get("/api/v1/auth/session", headers=_auth(token)).json()
        assert data["is_authenticated"] is False
        assert get_session_repo().get(token) is None

    def test_logout_invalidates_token(self):
        token = _login()
        response = client.post("/api/v1/auth/logout", headers=_auth(token))
        assert response.json() == {"logged_out": True}
        data = client.get("/api/v1/auth/session", headers=_auth(token)).json()
        assert data["is_authenticated"] is False

    def test_logout_without_session(self):
        assert client.post("/api/v1/auth/logout").json() == {"logged_out": False}

    def test_purge_expired_on_login(self):
        token = _login()
        get_session_repo().get(token)["expires_at"] = "2000-01-01T00:00:00+00:00"
        _login("bob@firm.in", "hunter2")
        assert get_session_repo().get(token) is None
        assert get_session_repo().count() == 1


class TestAuthService:
    def test_require_user_rejects_anonymous(self):
        with pytest.raises(PermissionError):
            get_auth_service().require_user(None)

    def test_blank_credentials_are_invalid(self):
        with pytest.raises(ValueError):
            get_auth_service().login("  ", "")


# ============================================
# Navigation guard endpoint
# ============================================
class TestNavigationGuard:
    def test_anonymous_protected_redirects_to_login(self):
        data = client.get("/api/v1/navigation/guard", params={"path": "/dashboard"}).json()
        assert data == {
            "path": "/dashboard",
            "route_class": "protected",
            "render": "nothing",
            "redirect": "/login",
            "navigation": "replace",
        }

    def test_authenticated_login_redirects_home(self):
        token = _login()
        data = client.get(
            "/api/v1/navigation/guard", params={"path": "/login"}, headers=_auth(token)
        ).json()
        assert data["redirect"] == "/dashboard"

    @pytest.mark.parametrize("signed_in, target", [(True, "/dashboard"), (False, "/login")])
    def test_root_redirect(self, signed_in, target):
        headers = _auth(_login()) if signed_in else {}
        data = client.get("/api/v1/navigation/guard", params={"path": "/"}, headers=headers).json()
        assert data["redirect"] == target

    def test_loading_flag_suspends_decision(self):
        data = client.get(
            "/api/v1/navigation/guard", params={"path": "/dashboard", "loading": "true"}
        ).json()
        assert data["render"] == "loading"
        assert data["redirect"] is None

    def test_missing_path_is_unknown(self):
        data = client.get("/api/v1/navigation/guard").json()
        assert data["route_class"] == "unknown"
        assert data["redirect"] is None


# ============================================
# Dashboard
# ============================================
class TestDashboard:
    def test_requires_session(self):
        assert client.get("/api/v1/dashboard").status_code == 401

    def test_greeting_uses_roster_name(self):
        get_team_service().create_member(name="Alice Roster", email="ALICE@firm.in")
        token = _login()
        data = client.get("/api/v1/dashboard", headers=_auth(token)).json()
        assert data["display_name"] == "Alice Roster"
        assert data["display_initial"] == "A"
        assert data["greeting"] == "Welcome back, Alice Roster"

    def test_greeting_falls_back_to_auth_name(self):
        token = _login()
        data = client.get("/api/v1/dashboard", headers=_auth(token)).json()
        assert data["display_name"] == "Alice Auth"

    def test_greeting_falls_back_to_email(self):
        token = _login("bob@firm.in", "hunter2")
        data = client.get("/api/v1/dashboard", headers=_auth(token)).json()
        assert data["display_name"] == "bob@firm.in"
        assert data["display_initial"] == "B"

    def test_summary_counts(self):
        token = _login()
        client.post("/api/v1/tasks", json={"title": "Draft plaint"})
        client.post("/api/v1/tasks", json={"title": "File vakalat", "status": "done"})
        client.post("/api/v1/projects", json={"name": "Land dispute", "status": "active"})
        summary = client.get("/api/v1/dashboard", headers=_auth(token)).json()["summary"]
        assert summary["tasks"]["todo"] == 1
        assert summary["tasks"]["done"] == 1
        assert summary["open_tasks"] == 1
        assert summary["projects"]["active"] == 1
        assert summary["team_members"] == 0

    def test_logout_pushes_login(self):
        token = _login()
        data = client.post("/api/v1/dashboard/logout", headers=_auth(token)).json()
        assert data == {"redirect": "/login", "navigation": "push", "logged_out": True}
        assert client.get("/api/v1/dashboard", headers=_auth(token)).status_code == 401


# ============================================
# Per-session resolvers
# ============================================
def _expire(token):
    get_session_repo().get(token)["expires_at"] = "2000-01-01T00:00:00+00:00"


def _open_dashboard(token):
    assert client.get("/api/v1/dashboard", headers=_auth(token)).status_code == 200
    return dependencies._resolvers[token]


class TestResolverRelease:
    def test_dashboard_creates_one_resolver_per_session(self):
        token = _login()
        first = _open_dashboard(token)
        assert _open_dashboard(token) is first

    def test_logout_releases_resolver(self):
        token = _login()
        resolver = _open_dashboard(token)
        generation = resolver.generation
        client.post("/api/v1/auth/logout", headers=_auth(token))
        assert token not in dependencies._resolvers
        assert resolver.generation > generation

    def test_expired_session_releases_resolver(self):
        token = _login()
        _open_dashboard(token)
        _expire(token)
        data = client.get("/api/v1/auth/session", headers=_auth(token)).json()
        assert data["is_authenticated"] is False
        assert token not in dependencies._resolvers

    def test_purged_sessions_release_resolvers(self):
        stale = _login()
        _open_dashboard(stale)
        _expire(stale)
        fresh = _login("bob@firm.in", "hunter2")
        assert stale not in dependencies._resolvers
        _open_dashboard(fresh)
        assert list(dependencies._resolvers) == [fresh]

    def test_session_end_callback_receives_purged_tokens(self):
        ended = []
        repo = SessionRepository()
        service = AuthService(session_repo=repo, on_session_end=ended.append)
        token = service.login("alice@firm.in", "s3cret")["token"]
        repo.get(token)["expires_at"] = "2000-01-01T00:00:00+00:00"
        service.login("bob@firm.in", "hunter2")
        assert ended == [token]
