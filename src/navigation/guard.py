from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from session.store import SessionStore


logger = logging.getLogger(__name__)


class AuthState(Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"

    @classmethod
    def from_store(cls, store: SessionStore) -> "AuthState":
        """Derive the state from the store; a present user id is all it takes."""
        return cls.AUTHENTICATED if store.get().is_authenticated else cls.UNAUTHENTICATED


@dataclass(frozen=True)
class Route:
    name: str
    path: str
    requires_auth: bool = False


@dataclass(frozen=True)
class Decision:
    """Outcome of one guard evaluation.

    `redirect_to` is None when navigation may proceed to `route`.
    """

    route: Route
    redirect_to: Optional[Route] = None

    @property
    def allowed(self) -> bool:
        return self.redirect_to is None

    @property
    def destination(self) -> Route:
        return self.redirect_to or self.route


Target = Union[Route, str]


class NavigationGuard:
    """
    Pre-navigation access check.

    Rules:
    - If the target route requires auth and the session is unauthenticated,
      redirect to the login route. The target is never entered.
    - Otherwise, proceed.

    The guard only reads the session store. It is re-evaluated on every
    navigation; login/logout flows are what change its outcome.
    """

    def __init__(self, store: SessionStore, routes: Iterable[Route], *, login_route: str = "login") -> None:
        self._store = store
        self._routes = list(routes)
        self._by_name = {r.name: r for r in self._routes}
        self._by_path = {r.path: r for r in self._routes}
        if login_route not in self._by_name:
            raise ValueError(f"Login route {login_route!r} is not among the configured routes")
        self._login = self._by_name[login_route]

    @property
    def routes(self) -> list[Route]:
        return list(self._routes)

    @property
    def login_route(self) -> Route:
        return self._login

    def resolve(self, target: Target) -> Route:
        """Look a target up by Route, name, or path."""
        if isinstance(target, Route):
            return target
        route = self._by_name.get(target) or self._by_path.get(target)
        if route is None:
            raise LookupError(f"No route matches {target!r}")
        return route

    def state(self) -> AuthState:
        return AuthState.from_store(self._store)

    def before_each(self, target: Target) -> Decision:
        route = self.resolve(target)
        state = self.state()
        if route.requires_auth and state is AuthState.UNAUTHENTICATED:
            logger.debug("Redirecting %s -> %s (%s)", route.path, self._login.path, state.value)
            return Decision(route=route, redirect_to=self._login)
        logger.debug("Allowing %s (%s)", route.path, state.value)
        return Decision(route=route)

    def navigate(self, target: Target, views: Mapping[str, Callable[[], Any]]) -> Any:
        """Run the guard, then render the view of wherever navigation lands.

        `views` maps route names to zero-argument callables. The view of a
        route the guard redirected away from is never called.
        """
        decision = self.before_each(target)
        view = views.get(decision.destination.name)
        if view is None:
            raise LookupError(f"No view registered for route {decision.destination.name!r}")
        return view()
