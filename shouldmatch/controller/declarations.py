"""
Matchers for what a controller or application declares up front.

``rescue_from`` reads ``rescue_handlers`` from the subject: a mapping of
exception -> handler, or a list of such pairs. ``filter_param`` reads
``filter_parameters``: names or compiled patterns kept out of logs.

    class UsersController:
        rescue_handlers = {RecordNotFound: "render_404"}

    assert_matches(UsersController, rescue_from(RecordNotFound).with_handler("render_404"))
    assert_matches(app_config, filter_param("password"))
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..matchers.base import Matcher, MatcherConfigurationError
from ..matchers.models import MatchResult


def _exception_names(exception: Any) -> set[str]:
    if isinstance(exception, str):
        return {exception}
    if isinstance(exception, type):
        return {
            exception.__name__,
            exception.__qualname__,
            f"{exception.__module__}.{exception.__qualname__}",
        }
    raise MatcherConfigurationError(
        f"Expected an exception class or name, got {exception!r}"
    )


def _handler_name(handler: Any) -> str:
    if isinstance(handler, str):
        return handler
    return getattr(handler, "__name__", repr(handler))


def _rescue_handlers(subject: Any) -> list[tuple[Any, Any]]:
    handlers = getattr(subject, "rescue_handlers", None)
    if handlers is None:
        raise MatcherConfigurationError(
            f"{type(subject).__name__} has no rescue_handlers to inspect"
        )
    if isinstance(handlers, Mapping):
        return list(handlers.items())
    return [tuple(pair) for pair in handlers]


@dataclass(frozen=True)
class RescueFromMatcher(Matcher):
    exception: Any
    handler: str | None = None

    def with_handler(self, handler: Any) -> RescueFromMatcher:
        return self._with(handler=_handler_name(handler))

    @property
    def exception_name(self) -> str:
        if isinstance(self.exception, str):
            return self.exception
        return self.exception.__name__

    @property
    def description(self) -> str:
        text = f"rescue from {self.exception_name}"
        if self.handler:
            text += f" with {self.handler}"
        return text

    def evaluate(self, subject: Any) -> MatchResult:
        wanted = _exception_names(self.exception)
        declared = _rescue_handlers(subject)

        rescuers = [
            _handler_name(handler)
            for exception, handler in declared
            if _exception_names(exception) & wanted
        ]
        if not rescuers:
            return MatchResult.failure(
                message=f"Expected to {self.description}, but it is not rescued",
                description=self.description,
                expected=self.exception_name,
                actual=[_handler_name(e) for e, _ in declared],
            )

        if self.handler is not None and self.handler not in rescuers:
            return MatchResult.failure(
                message=f"Expected to {self.description}",
                description=self.description,
                expected=self.handler,
                actual=rescuers,
            )

        return MatchResult.success(
            message=f"Did {self.description}",
            description=self.description,
            actual=rescuers,
        )


def rescue_from(exception: Any) -> RescueFromMatcher:
    """Match a rescue declaration by exception class or (qualified) name."""
    _exception_names(exception)
    return RescueFromMatcher(exception=exception)


@dataclass(frozen=True)
class FilterParamMatcher(Matcher):
    name: str

    @property
    def description(self) -> str:
        return f"filter {self.name}"

    def evaluate(self, subject: Any) -> MatchResult:
        filters = list(getattr(subject, "filter_parameters", None) or [])
        for item in filters:
            if isinstance(item, re.Pattern):
                if item.search(self.name):
                    break
            elif str(item) == self.name:
                break
        else:
            return MatchResult.failure(
                message=f"Expected {self.name} to be filtered",
                description=self.description,
                expected=self.name,
                actual=[f.pattern if isinstance(f, re.Pattern) else f for f in filters],
            )

        return MatchResult.success(
            message=f"{self.name} is filtered",
            description=self.description,
        )


def filter_param(name: str) -> FilterParamMatcher:
    return FilterParamMatcher(name=name)
