"""
Single-value probes and the ``allow_value`` matcher.

A probe writes one value into a subject's attribute, runs the subject's
validation and inspects the errors recorded for that attribute. Every
validation matcher is built out of probes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Pattern, Union

from ..matchers.base import Matcher, MatcherConfigurationError
from ..matchers.models import MatchResult
from .subject import Validatable, as_subject

logger = logging.getLogger(__name__)

# A literal message, a pattern searched in each message, or None for "any error"
Message = Union[str, Pattern[str], None]


@dataclass(frozen=True)
class ProbeOutcome:
    """What happened when one value was written into an attribute."""
    attribute: str
    value: Any
    expected_message: Message
    errors: list[str] = field(default_factory=list)

    @property
    def rejected(self) -> bool:
        """True if the recorded errors match the expected message."""
        return errors_match(self.errors, self.expected_message)

    @property
    def allowed(self) -> bool:
        return not self.rejected


def errors_match(errors: list[str], message: Message) -> bool:
    """Check recorded errors against an expected message."""
    if message is None:
        return len(errors) > 0
    if isinstance(message, re.Pattern):
        return any(message.search(error) for error in errors)
    return message in errors


def describe_message(message: Message) -> str:
    if message is None:
        return "any error"
    if isinstance(message, re.Pattern):
        return f"/{message.pattern}/"
    return repr(message)


def probe_value(
    subject: Validatable,
    attribute: str,
    value: Any,
    message: Message = None,
) -> ProbeOutcome:
    """Write ``value`` into ``attribute`` and collect the resulting errors."""
    subject.set_attribute(attribute, value)
    errors = list(subject.errors_for(attribute))
    outcome = ProbeOutcome(
        attribute=attribute,
        value=value,
        expected_message=message,
        errors=errors,
    )
    logger.debug(
        "Probed %s=%r: errors=%r, expected %s, rejected=%s",
        attribute, value, errors, describe_message(message), outcome.rejected,
    )
    return outcome


def allows_value_of(
    subject: Validatable, attribute: str, value: Any, message: Message = None
) -> bool:
    """True if no error matching ``message`` is recorded for ``value``."""
    return probe_value(subject, attribute, value, message).allowed


def disallows_value_of(
    subject: Validatable, attribute: str, value: Any, message: Message = None
) -> bool:
    """True if an error matching ``message`` is recorded for ``value``."""
    return probe_value(subject, attribute, value, message).rejected


@dataclass(frozen=True)
class AllowValueMatcher(Matcher):
    """
    Matcher asserting that an attribute accepts each of the given values.

    Example:
        assert_matches(user, allow_value("a@b.io").for_attribute("email"))
        assert_does_not_match(
            user,
            allow_value("nope").for_attribute("email").with_message("is invalid"),
        )
    """
    values: tuple[Any, ...] = ()
    attribute: str | None = None
    expected_message: Message = None

    def for_attribute(self, attribute: str) -> AllowValueMatcher:
        return self._with(attribute=attribute)

    def with_message(self, message: Message) -> AllowValueMatcher:
        return self._with(expected_message=message)

    @property
    def description(self) -> str:
        values = ", ".join(repr(v) for v in self.values)
        return f"allow {self.attribute} to be set to {values}"

    def evaluate(self, subject: Any) -> MatchResult:
        if self.attribute is None:
            raise MatcherConfigurationError(
                "allow_value needs an attribute: call .for_attribute(name)"
            )
        if not self.values:
            raise MatcherConfigurationError("allow_value needs at least one value")

        subject = as_subject(subject)
        for value in self.values:
            outcome = probe_value(subject, self.attribute, value, self.expected_message)
            if outcome.rejected:
                return MatchResult.failure(
                    message=(
                        f"Did not expect {describe_message(self.expected_message)} "
                        f"when {self.attribute} is set to {value!r}"
                    ),
                    description=self.description,
                    expected="no matching errors",
                    actual=outcome.errors,
                )

        return MatchResult.success(
            message=f"{self.attribute} accepts every value",
            description=self.description,
            actual=list(self.values),
        )


def allow_value(*values: Any) -> AllowValueMatcher:
    """Create a matcher asserting that an attribute accepts ``values``."""
    return AllowValueMatcher(values=values)
