"""
The ``route`` matcher.

The subject is a ``Router`` (anything with ``recognize(method, path)``), or
an object exposing one as ``routes``.

    routes = RouteTable()
    routes.add("GET", "/users/:id", "users#show")

    assert_matches(routes, route("GET", "/users/5").to("users#show", id=5))
    assert_matches(routes, route("get", "/users/5").to(controller="users", action="show", id="5"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..matchers.base import Matcher, MatcherConfigurationError
from ..matchers.models import MatchResult
from .models import Router, split_endpoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteMatcher(Matcher):
    method: str
    path: str
    expected_params: dict[str, str] | None = None

    def to(self, endpoint: str | None = None, **params: Any) -> RouteMatcher:
        """
        Expect the request to be routed to ``endpoint`` with ``params``.

        Args:
            endpoint: 'controller#action', or pass controller= and action=
            **params: Path parameters; compared as strings
        """
        if endpoint is not None:
            try:
                controller, action = split_endpoint(endpoint)
            except ValueError as e:
                raise MatcherConfigurationError(str(e)) from e
            params = {"controller": controller, "action": action, **params}

        missing = {"controller", "action"} - params.keys()
        if missing:
            raise MatcherConfigurationError(
                f"route(...).to needs {', '.join(sorted(missing))}"
            )
        return self._with(expected_params={k: str(v) for k, v in params.items()})

    @property
    def description(self) -> str:
        text = f"route {self.method.upper()} {self.path}"
        if self.expected_params:
            params = dict(self.expected_params)
            endpoint = f"{params.pop('controller')}#{params.pop('action')}"
            text += f" to {endpoint}"
            if params:
                text += " with " + ", ".join(f"{k}={v!r}" for k, v in sorted(params.items()))
        return text

    def evaluate(self, subject: Any) -> MatchResult:
        if self.expected_params is None:
            raise MatcherConfigurationError("route needs a destination: call .to(...)")

        router = _router(subject)
        recognized = router.recognize(self.method.upper(), self.path)
        logger.debug("Recognized %s %s as %r", self.method.upper(), self.path, recognized)

        if recognized is None:
            return MatchResult.failure(
                message=f"No route matches {self.method.upper()} {self.path}",
                description=self.description,
                expected=self.expected_params,
                actual=None,
            )

        actual = {k: str(v) for k, v in recognized.items()}
        if actual == self.expected_params:
            return MatchResult.success(
                message=f"Routed {self.method.upper()} {self.path}",
                description=self.description,
                actual=actual,
            )

        differing = sorted(
            k for k in actual.keys() | self.expected_params.keys()
            if actual.get(k) != self.expected_params.get(k)
        )
        return MatchResult.failure(
            message=f"{self.method.upper()} {self.path} is routed differently",
            description=self.description,
            expected=self.expected_params,
            actual=actual,
            details={"differing": differing},
        )


def _router(subject: Any) -> Router:
    if isinstance(subject, Router):
        return subject
    routes = getattr(subject, "routes", None)
    if isinstance(routes, Router):
        return routes
    raise MatcherConfigurationError(
        f"route needs a router subject with recognize(method, path), got {type(subject).__name__}"
    )


def route(method: str, path: str) -> RouteMatcher:
    return RouteMatcher(method=method, path=path)
