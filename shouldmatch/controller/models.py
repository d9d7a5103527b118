"""
Typed data structures for controller matchers.

Controller matchers inspect what a controller did during a test request.
Whatever web layer is under test, its test client output is captured into
a ``ControllerResponse``. Routing matchers ask a ``Router`` to recognize a
request; ``RouteTable`` is a small router for apps that declare routes as
patterns.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


# ─────────────────────────────────────────────────────────────────────────────
# Responses
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ControllerResponse:
    """What a controller action produced."""
    status: int = 200
    location: str | None = None  # Redirect target, if any
    templates: list[str] = field(default_factory=list)  # Rendered templates, outermost first
    layout: str | None = None
    session: dict[str, Any] = field(default_factory=dict)
    flash: dict[str, Any] = field(default_factory=dict)
    flash_now: dict[str, Any] = field(default_factory=dict)  # Flash for the current request only
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.templates, str):
            self.templates = [self.templates]

    @property
    def redirect_location(self) -> str | None:
        """The redirect target: ``location``, else the Location header."""
        if self.location:
            return self.location
        for name, value in self.headers.items():
            if name.lower() == "location":
                return value
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Routing
# ─────────────────────────────────────────────────────────────────────────────

@runtime_checkable
class Router(Protocol):
    """Anything that can map a request to controller/action parameters."""

    def recognize(self, method: str, path: str) -> dict[str, Any] | None:
        """
        Recognize a request.

        Returns:
            Parameters including 'controller' and 'action', or None if no
            route matches.
        """
        ...


@dataclass
class Route:
    """A single route: METHOD /pattern/:segment -> controller#action."""
    method: str
    pattern: str
    controller: str
    action: str
    defaults: dict[str, Any] = field(default_factory=dict)

    SEGMENT_PATTERN = re.compile(r":(\w+)")

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        # split() alternates literal text and segment names
        parts = self.SEGMENT_PATTERN.split(self.pattern.rstrip("/"))
        regex = "".join(
            f"(?P<{part}>[^/]+)" if i % 2 else re.escape(part)
            for i, part in enumerate(parts)
        )
        self._regex = re.compile(f"^{regex}/?$")

    def match(self, method: str, path: str) -> dict[str, Any] | None:
        if method.upper() != self.method:
            return None
        found = self._regex.match(path.split("?", 1)[0])
        if not found:
            return None
        return {
            "controller": self.controller,
            "action": self.action,
            **self.defaults,
            **found.groupdict(),
        }


class RouteTable:
    """
    Ordered list of routes; the first match wins.

    Example:
        routes = RouteTable()
        routes.add("GET", "/users/:id", "users#show")
        routes.recognize("GET", "/users/5")
        # {"controller": "users", "action": "show", "id": "5"}
    """

    def __init__(self, routes: list[Route] | None = None):
        self.routes: list[Route] = list(routes or [])

    def add(self, method: str, pattern: str, endpoint: str, **defaults: Any) -> Route:
        """Add a route; ``endpoint`` is 'controller#action'."""
        controller, action = split_endpoint(endpoint)
        route = Route(method, pattern, controller, action, defaults)
        self.routes.append(route)
        return route

    def recognize(self, method: str, path: str) -> dict[str, Any] | None:
        for route in self.routes:
            params = route.match(method, path)
            if params is not None:
                return params
        return None

    def __len__(self) -> int:
        return len(self.routes)


def split_endpoint(endpoint: str) -> tuple[str, str]:
    """Split 'users#show' into ('users', 'show')."""
    controller, sep, action = endpoint.partition("#")
    if not sep or not controller or not action:
        raise ValueError(f"Endpoint must look like 'controller#action', got {endpoint!r}")
    return controller, action
