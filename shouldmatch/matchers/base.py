"""
Matcher base class, matcher errors and assertion helpers.

Every matcher is an immutable builder: qualifier methods return a modified
copy, and ``evaluate`` runs the checks against a subject supplied by the
caller. Test code usually goes through the assertion helpers:

    assert_matches(issue, ensure_inclusion_of("state").in_array(STATES))
    assert_does_not_match(response, respond_with("error"))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any

from .models import MatchResult


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


# Marks a qualifier that was never called, where None is a meaningful value
UNSET: Any = _Unset()


class MatcherConfigurationError(Exception):
    """Raised when a matcher is configured in a way that cannot be evaluated.

    This is a programmer error in the test, not a failed expectation, so it
    is raised instead of being reported as a failed ``MatchResult``.
    """


class CouldNotDetermineValueOutsideOfArray(MatcherConfigurationError):
    """Raised when the synthesized out-of-set probe is itself an allowed value."""

    def __init__(self, value: Any, allowed: Any):
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Could not determine a value outside of {allowed!r}: the probe "
            f"value {value!r} is in the allowed set. Pass an explicit value "
            f"with .outside_value(...)."
        )


class Matcher(ABC):
    """
    Abstract base class for matchers.

    Subclasses are frozen dataclasses. They implement ``evaluate`` and
    ``description``; qualifier methods use ``_with`` to return a copy.
    """

    @property
    @abstractmethod
    def description(self) -> str:
        """Describe what the matcher checks, e.g. 'respond with 200'."""

    @abstractmethod
    def evaluate(self, subject: Any) -> MatchResult:
        """
        Run the matcher against a subject.

        Args:
            subject: The object under test (owned by the caller)

        Returns:
            MatchResult indicating pass/fail

        Raises:
            MatcherConfigurationError: If the matcher cannot be evaluated
        """

    def matches(self, subject: Any) -> bool:
        """Return True if the matcher passes for the subject."""
        return self.evaluate(subject).passed

    def _with(self, **changes: Any):
        return replace(self, **changes)

    def __str__(self) -> str:
        return self.description


def assert_matches(subject: Any, matcher: Matcher) -> MatchResult:
    """
    Assert that a matcher passes for a subject.

    Raises:
        AssertionError: With the formatted result when the matcher fails
    """
    result = matcher.evaluate(subject)
    if not result.passed:
        raise AssertionError(result.failure_message)
    return result


def assert_does_not_match(subject: Any, matcher: Matcher) -> MatchResult:
    """
    Assert that a matcher does not pass for a subject.

    Raises:
        AssertionError: When the matcher passes
    """
    result = matcher.evaluate(subject)
    if result.passed:
        raise AssertionError(result.negated_failure_message)
    return result
