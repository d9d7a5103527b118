"""
Match result models.

A matcher answers one question about one subject. The answer carries both
failure messages a test might need: the one shown when a positive
assertion fails, and the one shown when a negated assertion fails.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Long probe values and error lists are cut to this width in messages
INSPECT_WIDTH = 80


class MatchStatus(str, Enum):
    """Outcome of evaluating a matcher."""
    PASSED = "passed"
    FAILED = "failed"


@dataclass(frozen=True)
class MatchResult:
    """
    Result of evaluating one matcher against one subject.

    ``message`` says what the matcher observed, whether it passed or not
    ("Responded with 200", "outside value: expected state='...' to be
    rejected"). ``expected`` and ``actual`` are filled in where the matcher
    compared two concrete things; ``details`` holds anything else a test
    may want to assert on, such as the probe boundary that failed.
    """
    status: MatchStatus
    description: str
    message: str
    expected: Any = None
    actual: Any = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.status == MatchStatus.PASSED

    def __bool__(self) -> bool:
        return self.passed

    @property
    def failure_message(self) -> str:
        """Message for ``assert_matches`` when the matcher did not pass."""
        lines = [f"Expected to {self.description}", f"  {self.message}"]
        if self.expected is not None:
            lines.append(f"  expected: {inspect_value(self.expected)}")
        if self.actual is not None:
            lines.append(f"  actual:   {inspect_value(self.actual)}")
        lines.extend(f"  {key}: {inspect_value(value)}" for key, value in self.details.items())
        return "\n".join(lines)

    @property
    def negated_failure_message(self) -> str:
        """Message for ``assert_does_not_match`` when the matcher passed."""
        return f"Expected not to {self.description}"

    def __str__(self) -> str:
        return self.message if self.passed else self.failure_message

    @classmethod
    def success(cls, message: str, *, description: str, actual: Any = None) -> MatchResult:
        return cls(MatchStatus.PASSED, description, message, actual=actual)

    @classmethod
    def failure(
        cls,
        message: str,
        *,
        description: str,
        expected: Any = None,
        actual: Any = None,
        details: dict[str, Any] | None = None,
    ) -> MatchResult:
        return cls(
            MatchStatus.FAILED,
            description,
            message,
            expected=expected,
            actual=actual,
            details=details or {},
        )


def inspect_value(value: Any, width: int = INSPECT_WIDTH) -> str:
    """repr() a value for a failure message, shortened to ``width``."""
    text = repr(value)
    if len(text) > width:
        return text[: width - 3] + "..."
    return text
