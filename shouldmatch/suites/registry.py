"""
Matcher registry for suite files.

Maps each ``MatcherName`` to its factory, the number of positional
arguments it takes, and the qualifiers a suite may chain onto it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from ..controller import (
    filter_param,
    redirect_to,
    render_template,
    render_with_layout,
    rescue_from,
    respond_with,
    route,
    set_session,
    set_the_flash,
)
from ..matchers.base import Matcher, MatcherConfigurationError
from ..validation import allow_value, ensure_inclusion_of
from .models import Expectation, MatcherName

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatcherSpec:
    factory: Callable[..., Matcher]
    min_args: int
    max_args: int | None  # None for no upper bound
    qualifiers: frozenset[str] = field(default_factory=frozenset)

    def arity(self) -> str:
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.min_args == self.max_args:
            return f"exactly {self.min_args}"
        return f"{self.min_args} to {self.max_args}"

    def accepts(self, count: int) -> bool:
        return count >= self.min_args and (self.max_args is None or count <= self.max_args)


MATCHERS: dict[MatcherName, MatcherSpec] = {
    MatcherName.ENSURE_INCLUSION_OF: MatcherSpec(
        ensure_inclusion_of, 1, 1,
        frozenset({
            "in_array", "in_range", "allow_blank", "allow_nil", "with_message",
            "with_low_message", "with_high_message", "of_kind", "outside_value",
        }),
    ),
    MatcherName.ALLOW_VALUE: MatcherSpec(
        allow_value, 1, None, frozenset({"for_attribute", "with_message"})
    ),
    MatcherName.RESPOND_WITH: MatcherSpec(respond_with, 1, 1),
    MatcherName.REDIRECT_TO: MatcherSpec(redirect_to, 1, 1),
    MatcherName.RENDER_TEMPLATE: MatcherSpec(render_template, 1, 1),
    MatcherName.RENDER_WITH_LAYOUT: MatcherSpec(render_with_layout, 0, 1),
    MatcherName.SET_SESSION: MatcherSpec(set_session, 0, 1, frozenset({"to"})),
    MatcherName.SET_THE_FLASH: MatcherSpec(
        set_the_flash, 0, 0, frozenset({"for_key", "to", "now"})
    ),
    MatcherName.ROUTE: MatcherSpec(route, 2, 2, frozenset({"to"})),
    MatcherName.RESCUE_FROM: MatcherSpec(rescue_from, 1, 1, frozenset({"with_handler"})),
    MatcherName.FILTER_PARAM: MatcherSpec(filter_param, 1, 1),
}


def build_matcher(expectation: Expectation) -> Matcher:
    """
    Build the matcher an expectation describes.

    Raises:
        MatcherConfigurationError: If a qualifier is unknown or rejects its arguments
    """
    spec = MATCHERS[expectation.matcher]
    matcher: Any = spec.factory(*expectation.args)

    for qualifier in expectation.qualifiers:
        if qualifier.name not in spec.qualifiers:
            raise MatcherConfigurationError(
                f"{expectation.matcher.value} has no qualifier {qualifier.name!r}"
            )
        args, kwargs = qualifier.call_arguments()
        try:
            matcher = getattr(matcher, qualifier.name)(*args, **kwargs)
        except (TypeError, ValueError) as e:
            raise MatcherConfigurationError(
                f"{expectation.matcher.value}.{qualifier.name}: {e}"
            ) from e

    logger.debug("Built matcher for %s: %s", expectation.id, matcher.description)
    return matcher
