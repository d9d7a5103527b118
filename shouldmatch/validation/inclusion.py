"""
The ``ensure_inclusion_of`` matcher.

Asserts that an attribute accepts an allow-list of values and rejects
values outside of it. The allow-list is either an explicit set
(``in_array``) or an inclusive numeric range (``in_range``).

    class Issue:
        STATES = ("open", "resolved", "unresolved")

        def validate(self):
            self.errors = {}
            if self.state not in self.STATES:
                self.errors["state"] = ["is not included in the list"]

    def test_state_is_restricted():
        assert_matches(
            Issue(),
            ensure_inclusion_of("state").in_array(Issue.STATES),
        )

    def test_priority_is_between_one_and_five():
        assert_matches(
            Issue(),
            ensure_inclusion_of("priority")
            .in_range(1, 5)
            .with_low_message("too low")
            .with_high_message("too high"),
        )

Qualifiers:

* ``allow_nil(flag=True)`` / ``allow_blank(flag=True)`` assert whether None
  and the blank strings (``"" " " "\\n" "\\r" "\\t" "\\f"``) are accepted.
  Leaving them out skips those probes.
* ``with_message``, ``with_low_message``, ``with_high_message`` set the
  message expected for rejections below the minimum and above the maximum.
* ``of_kind`` and ``outside_value`` control the value used to probe
  "outside of the array".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from ..config import MatcherSettings, get_settings
from ..matchers.base import (
    UNSET,
    CouldNotDetermineValueOutsideOfArray,
    Matcher,
    MatcherConfigurationError,
)
from ..matchers.models import MatchResult
from .allow_value import Message, ProbeOutcome, describe_message, probe_value
from .subject import Validatable, ValueKind, as_subject, infer_value_kind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InclusionMatcher(Matcher):
    """Matcher for allow-list validations. Build it with ``ensure_inclusion_of``."""
    attribute: str
    array: tuple[Any, ...] | None = None
    minimum: Any = None
    maximum: Any = None
    blank_allowed: bool | None = None
    nil_allowed: bool | None = None
    low_message: Message = None
    high_message: Message = None
    value_kind: ValueKind | None = None
    outside_probe: Any = UNSET

    # ── qualifiers ──────────────────────────────────────────────────────────

    def in_array(self, values: Iterable[Any]) -> InclusionMatcher:
        if self.has_range:
            raise MatcherConfigurationError(
                "ensure_inclusion_of takes either in_array or in_range, not both"
            )
        values = tuple(values)
        if not values:
            raise MatcherConfigurationError("in_array needs at least one value")
        return self._with(array=values)

    def in_range(self, minimum: Any, maximum: Any = None) -> InclusionMatcher:
        """
        Expect an inclusive range of values.

        Accepts ``in_range(1, 5)``, ``in_range(range(1, 6))`` or
        ``in_range([1, 5])``.
        """
        if self.array is not None:
            raise MatcherConfigurationError(
                "ensure_inclusion_of takes either in_array or in_range, not both"
            )

        if isinstance(minimum, range):
            if maximum is not None or minimum.step != 1 or len(minimum) == 0:
                raise MatcherConfigurationError(
                    f"in_range needs a non-empty range with step 1, got {minimum!r}"
                )
            minimum, maximum = minimum.start, minimum[-1]
        elif maximum is None and isinstance(minimum, (list, tuple)) and len(minimum) == 2:
            minimum, maximum = minimum

        if minimum is None or maximum is None:
            raise MatcherConfigurationError("in_range needs both a minimum and a maximum")
        if minimum > maximum:
            raise MatcherConfigurationError(
                f"in_range minimum {minimum!r} is greater than maximum {maximum!r}"
            )
        return self._with(minimum=minimum, maximum=maximum)

    def allow_blank(self, allow_blank: bool = True) -> InclusionMatcher:
        return self._with(blank_allowed=bool(allow_blank))

    def allow_nil(self, allow_nil: bool = True) -> InclusionMatcher:
        return self._with(nil_allowed=bool(allow_nil))

    def with_message(self, message: Message) -> InclusionMatcher:
        if message is None:
            return self
        return self._with(low_message=message, high_message=message)

    def with_low_message(self, message: Message) -> InclusionMatcher:
        if message is None:
            return self
        return self._with(low_message=message)

    def with_high_message(self, message: Message) -> InclusionMatcher:
        if message is None:
            return self
        return self._with(high_message=message)

    def of_kind(self, kind: ValueKind | str) -> InclusionMatcher:
        """Declare the attribute's value kind instead of inferring it."""
        return self._with(value_kind=ValueKind(kind))

    def outside_value(self, value: Any) -> InclusionMatcher:
        """Probe with ``value`` instead of a synthesized outside value."""
        return self._with(outside_probe=value)

    # ── evaluation ──────────────────────────────────────────────────────────

    @property
    def has_range(self) -> bool:
        return self.minimum is not None

    @property
    def description(self) -> str:
        return f"ensure inclusion of {self.attribute} in {self._inspect_allowed()}"

    def evaluate(self, subject: Any) -> MatchResult:
        if self.array is None and not self.has_range:
            raise MatcherConfigurationError(
                "ensure_inclusion_of needs in_array(...) or in_range(...)"
            )

        subject = as_subject(subject)
        settings = get_settings()
        logger.debug("Evaluating: %s", self.description)

        if self.has_range:
            return self._evaluate_range(subject, settings)
        return self._evaluate_array(subject, settings)

    def _evaluate_range(self, subject: Validatable, settings: MatcherSettings) -> MatchResult:
        default = settings.message("inclusion")
        low = self.low_message if self.low_message is not None else default
        high = self.high_message if self.high_message is not None else default

        probes = []
        if self.minimum != 0:
            probes.append(("lower boundary", self.minimum - 1, low, True))
        probes.extend([
            ("minimum", self.minimum, low, False),
            ("upper boundary", self.maximum + 1, high, True),
            ("maximum", self.maximum, high, False),
        ])

        for boundary, value, message, expect_rejection in probes:
            outcome = probe_value(subject, self.attribute, value, message)
            if outcome.rejected != expect_rejection:
                return self._probe_failure(boundary, outcome, expect_rejection)

        return MatchResult.success(
            message=f"{self.attribute} is restricted to {self._inspect_allowed()}",
            description=self.description,
        )

    def _evaluate_array(self, subject: Validatable, settings: MatcherSettings) -> MatchResult:
        kind = self.value_kind or self._infer_kind(subject)

        for value in self.array:
            outcome = probe_value(subject, self.attribute, value, self.low_message)
            if outcome.rejected:
                return self._probe_failure("allowed value", outcome, expect_rejection=False)

        if self.blank_allowed is not None:
            for value in settings.blank_values:
                outcome = probe_value(subject, self.attribute, value)
                if outcome.allowed != self.blank_allowed:
                    return self._probe_failure(
                        "blank value", outcome, expect_rejection=not self.blank_allowed
                    )

        if self.nil_allowed is not None:
            outcome = probe_value(subject, self.attribute, None)
            if outcome.allowed != self.nil_allowed:
                return self._probe_failure(
                    "nil value", outcome, expect_rejection=not self.nil_allowed
                )

        outside = self._value_outside_of_array(kind, settings)
        outcome = probe_value(subject, self.attribute, outside)
        if not outcome.rejected:
            return self._probe_failure("outside value", outcome, expect_rejection=True)

        return MatchResult.success(
            message=f"{self.attribute} is restricted to {self._inspect_allowed()}",
            description=self.description,
        )

    def _infer_kind(self, subject: Validatable) -> ValueKind:
        current = subject.get_attribute(self.attribute)
        if current is None:
            # fresh subject: fall back to the kind of the allowed values
            current = self.array[0]
        return infer_value_kind(current)

    def _value_outside_of_array(self, kind: ValueKind, settings: MatcherSettings) -> Any:
        if self.outside_probe is not UNSET:
            value = self.outside_probe
        else:
            value = self.find_outside_value(kind, settings)

        if value in self.array:
            raise CouldNotDetermineValueOutsideOfArray(value, list(self.array))
        return value

    def find_outside_value(self, kind: ValueKind, settings: MatcherSettings) -> Any:
        """Pick the sentinel used to probe a value outside of the array."""
        return settings.outside_value(kind.value)

    def _probe_failure(
        self, boundary: str, outcome: ProbeOutcome, expect_rejection: bool
    ) -> MatchResult:
        expected_message = describe_message(outcome.expected_message)
        if expect_rejection:
            message = (
                f"{boundary}: expected {self.attribute}={outcome.value!r} "
                f"to be rejected with {expected_message}"
            )
            expected = f"errors including {expected_message}"
        else:
            message = (
                f"{boundary}: expected {self.attribute}={outcome.value!r} to be allowed"
            )
            expected = f"no errors matching {expected_message}"

        return MatchResult.failure(
            message=message,
            description=self.description,
            expected=expected,
            actual=outcome.errors,
            details={"boundary": boundary, "value": outcome.value},
        )

    def _inspect_allowed(self) -> str:
        if self.has_range:
            return f"{self.minimum!r}..{self.maximum!r}"
        return repr(list(self.array)) if self.array is not None else "<nothing>"


def ensure_inclusion_of(attribute: str) -> InclusionMatcher:
    """Create a matcher for an allow-list validation on ``attribute``."""
    return InclusionMatcher(attribute=attribute)
