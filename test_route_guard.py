# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""Tests for route classification, guard decisions and the stateful RouteGuard."""

import pytest

from courtdesk.models.domain import ANONYMOUS, LOADING, AuthState, UserProfile
from courtdesk.services.route_guard import (
    PROTECTED_PREFIXES,
    RecordingNavigator,
    RenderState,
    RouteClass,
    RouteGuard,
    classify_route,
    decide,
    redirect_target,
    render_state,
)

SIGNED_IN = AuthState(user=UserProfile(email="a@x.com", name="Alice"), is_authenticated=True)


# ============================================
# Classification
# ============================================
class TestClassifyRoute:
    @pytest.mark.parametrize("prefix", PROTECTED_PREFIXES)
    def test_every_prefix_is_protected(self, prefix):
        assert classify_route(prefix) is RouteClass.PROTECTED
        assert classify_route(prefix + "/123") is RouteClass.PROTECTED

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/", RouteClass.ROOT),
            ("/login", RouteClass.LOGIN),
            ("/login/", RouteClass.PUBLIC),
            ("/login/x", RouteClass.PUBLIC),
            ("/firebase-test", RouteClass.PUBLIC),
            ("/firebase-test/deep", RouteClass.PUBLIC),
            ("/loginx", RouteClass.UNKNOWN),
            ("/teamwork", RouteClass.PROTECTED),
            ("/dashboard/", RouteClass.PROTECTED),
            ("/dashboardx", RouteClass.PROTECTED),
            ("/?q=1", RouteClass.UNKNOWN),
            ("/about", RouteClass.UNKNOWN),
            ("dashboard", RouteClass.UNKNOWN),
            ("/Dashboard", RouteClass.UNKNOWN),
        ],
    )
    def test_prefix_collisions(self, path, expected):
        assert classify_route(path) is expected

    @pytest.mark.parametrize("path", [None, "", 42, ["/dashboard"]])
    def test_malformed_paths_are_unknown(self, path):
        assert classify_route(path) is RouteClass.UNKNOWN


# ============================================
# Redirect rules
# ============================================
class TestRedirectTarget:
    @pytest.mark.parametrize("prefix", PROTECTED_PREFIXES)
    def test_protected_unauthenticated_goes_to_login(self, prefix):
        assert redirect_target(False, False, prefix + "/x") == "/login"

    @pytest.mark.parametrize("prefix", PROTECTED_PREFIXES)
    def test_protected_authenticated_stays(self, prefix):
        assert redirect_target(True, False, prefix) is None

    def test_login_when_authenticated_goes_to_dashboard(self):
        assert redirect_target(True, False, "/login") == "/dashboard"

    def test_login_when_anonymous_stays(self):
        assert redirect_target(False, False, "/login") is None

    def test_root_authenticated_goes_to_dashboard(self):
        assert redirect_target(True, False, "/") == "/dashboard"

    def test_root_anonymous_goes_to_login(self):
        assert redirect_target(False, False, "/") == "/login"

    def test_public_subpath_never_redirects(self):
        assert redirect_target(True, False, "/login/reset") is None
        assert redirect_target(False, False, "/firebase-test") is None

    @pytest.mark.parametrize("authenticated", [True, False])
    @pytest.mark.parametrize("path", ["/", "/login", "/dashboard", "/tasks/1", "/about", None])
    def test_loading_never_redirects(self, authenticated, path):
        assert redirect_target(authenticated, True, path) is None

    @pytest.mark.parametrize("authenticated", [True, False])
    def test_unknown_paths_never_redirect(self, authenticated):
        assert redirect_target(authenticated, False, "/about") is None
        assert redirect_target(authenticated, False, None) is None


class TestRenderState:
    def test_loading_shows_indicator(self):
        assert render_state(False, True, "/dashboard") is RenderState.LOADING

    def test_protected_anonymous_renders_nothing(self):
        assert render_state(False, False, "/cases") is RenderState.NOTHING

    def test_everything_else_renders_children(self):
        assert render_state(True, False, "/cases") is RenderState.CHILDREN
        assert render_state(False, False, "/login") is RenderState.CHILDREN
        assert render_state(False, False, "/") is RenderState.CHILDREN


class TestDecide:
    def test_decision_serialises(self):
        decision = decide(ANONYMOUS, "/tasks")
        assert decision.action == "redirect"
        assert decision.as_dict() == {
            "path": "/tasks",
            "route_class": "protected",
            "render": "nothing",
            "redirect": "/login",
            "navigation": "replace",
        }

    def test_loading_decision_waits(self):
        decision = decide(LOADING, "/tasks")
        assert decision.action == "wait"
        assert decision.as_dict()["navigation"] is None

    def test_settled_render(self):
        assert decide(SIGNED_IN, "/tasks").action == "render"


# ============================================
# Stateful guard
# ============================================
class TestRouteGuard:
    def test_redirect_issued_once_for_repeated_input(self):
        navigator = RecordingNavigator()
        guard = RouteGuard(navigator)
        for _ in range(3):
            guard.update(ANONYMOUS, "/dashboard")
        assert navigator.history == [("replace", "/login")]

    def test_loading_then_settled_issues_exactly_one_redirect(self):
        navigator = RecordingNavigator()
        guard = RouteGuard(navigator)
        guard.update(LOADING, "/dashboard")
        guard.update(LOADING, "/dashboard")
        assert navigator.history == []
        guard.update(ANONYMOUS, "/dashboard")
        guard.update(ANONYMOUS, "/dashboard")
        assert navigator.history == [("replace", "/login")]

    def test_each_transition_redirects_again(self):
        navigator = RecordingNavigator()
        guard = RouteGuard(navigator)
        guard.update(ANONYMOUS, "/dashboard")
        guard.update(ANONYMOUS, "/login")
        guard.update(ANONYMOUS, "/cases")
        assert navigator.history == [("replace", "/login"), ("replace", "/login")]

    def test_sign_in_on_login_page_goes_home(self):
        navigator = RecordingNavigator()
        guard = RouteGuard(navigator)
        guard.update(ANONYMOUS, "/login")
        guard.update(SIGNED_IN, "/login")
        assert navigator.last == ("replace", "/dashboard")

    def test_guard_only_uses_replace(self):
        navigator = RecordingNavigator()
        guard = RouteGuard(navigator)
        guard.update(ANONYMOUS, "/")
        guard.update(SIGNED_IN, "/")
        assert {mode for mode, _ in navigator.history} == {"replace"}

    def test_malformed_path_never_navigates(self):
        navigator = RecordingNavigator()
        guard = RouteGuard(navigator)
        decision = guard.update(ANONYMOUS, None)
        assert decision.route_class is RouteClass.UNKNOWN
        assert navigator.history == []
