# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Route guard - decides render / blank / redirect for a navigation.

Classification and decisions are pure functions of (auth state, pathname).
``RouteGuard`` wraps them with the re-evaluate-on-change behaviour of a
client-side guard and drives a ``Navigator``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from courtdesk.core.logging import get_logger
from courtdesk.metrics.prometheus import GUARD_DECISIONS
from courtdesk.models.domain import AuthState

logger = get_logger(__name__)

PROTECTED_PREFIXES: tuple[str, ...] = (
    "/dashboard",
    "/cases",
    "/tasks",
    "/projects",
    "/contacts",
    "/team",
    "/integrations",
    "/settings",
    "/my-work",
    "/cause-list",
)
PUBLIC_ROUTES: tuple[str, ...] = ("/", "/login", "/firebase-test")

LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"


class RouteClass(str, Enum):
    PROTECTED = "protected"
    ROOT = "root"
    LOGIN = "login"
    PUBLIC = "public"
    UNKNOWN = "unknown"


class RenderState(str, Enum):
    LOADING = "loading"
    CHILDREN = "children"
    NOTHING = "nothing"


def classify_route(pathname: Optional[str]) -> RouteClass:
    """
    Classify a path against the static route lists.

    Matching is plain string comparison: no trailing-slash or query-string
    normalisation, so ``/teamwork`` is protected and ``/?tab=1`` is unknown.
    Anything that is not a non-empty string is UNKNOWN.
    """
    if not isinstance(pathname, str) or not pathname:
        return RouteClass.UNKNOWN
    if pathname.startswith(PROTECTED_PREFIXES):
        return RouteClass.PROTECTED
    if pathname == "/":
        return RouteClass.ROOT
    if pathname == LOGIN_PATH:
        return RouteClass.LOGIN
    if any(pathname == route or pathname.startswith(route + "/") for route in PUBLIC_ROUTES):
        return RouteClass.PUBLIC
    return RouteClass.UNKNOWN


def redirect_target(
    is_authenticated: bool, is_loading: bool, pathname: Optional[str]
) -> Optional[str]:
    """Where the guard sends the user, or None. First matching rule wins."""
    if is_loading:
        return None
    route_class = classify_route(pathname)
    if route_class is RouteClass.PROTECTED and not is_authenticated:
        return LOGIN_PATH
    if is_authenticated and route_class in (RouteClass.LOGIN, RouteClass.ROOT):
        return HOME_PATH
    if not is_authenticated and route_class is RouteClass.ROOT:
        return LOGIN_PATH
    return None


def render_state(
    is_authenticated: bool, is_loading: bool, pathname: Optional[str]
) -> RenderState:
    """
    What to draw while the redirect (if any) is in flight.

    A protected page seen by an anonymous user renders nothing; the blank
    frame lasts until the asynchronous redirect completes.
    """
    if is_loading:
        return RenderState.LOADING
    if classify_route(pathname) is RouteClass.PROTECTED and not is_authenticated:
        return RenderState.NOTHING
    return RenderState.CHILDREN


@dataclass(frozen=True)
class GuardDecision:
    pathname: Optional[str]
    route_class: RouteClass
    render: RenderState
    redirect: Optional[str]

    @property
    def action(self) -> str:
        if self.render is RenderState.LOADING:
            return "wait"
        return "redirect" if self.redirect else "render"

    def as_dict(self) -> dict:
        return {
            "path": self.pathname,
            "route_class": self.route_class.value,
            "render": self.render.value,
            "redirect": self.redirect,
            "navigation": "replace" if self.redirect else None,
        }


def decide(state: AuthState, pathname: Optional[str]) -> GuardDecision:
    return GuardDecision(
        pathname=pathname,
        route_class=classify_route(pathname),
        render=render_state(state.is_authenticated, state.is_loading, pathname),
        redirect=redirect_target(state.is_authenticated, state.is_loading, pathname),
    )


class Navigator(Protocol):
    def replace(self, path: str) -> None: ...

    def push(self, path: str) -> None: ...


class RecordingNavigator:
    """Navigator that records calls instead of performing them."""

    def __init__(self) -> None:
        self.history: list[tuple[str, str]] = []

    def replace(self, path: str) -> None:
        self.history.append(("replace", path))

    def push(self, path: str) -> None:
        self.history.append(("push", path))

    @property
    def last(self) -> Optional[tuple[str, str]]:
        return self.history[-1] if self.history else None


class RouteGuard:
    """
    Stateful guard. ``update`` is called on every input change; the redirect
    side effect runs only when (authenticated, loading, pathname) differs from
    the previous evaluation, so a state is redirected out of exactly once.
    """

    def __init__(self, navigator: Navigator) -> None:
        self._navigator = navigator
        self._last_inputs: Optional[tuple[bool, bool, Optional[str]]] = None

    def update(self, state: AuthState, pathname: Optional[str]) -> GuardDecision:
        decision = decide(state, pathname)
        inputs = (state.is_authenticated, state.is_loading, pathname)
        if inputs == self._last_inputs:
            return decision
        self._last_inputs = inputs
        GUARD_DECISIONS.labels(action=decision.action).inc()
        if decision.redirect:
            logger.info("Guard redirect: %s -> %s", pathname, decision.redirect)
            self._navigator.replace(decision.redirect)
        return decision
