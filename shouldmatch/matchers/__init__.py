"""
Matcher core.

This package provides the matcher base class, the result models every
matcher returns, and the helpers test code uses to assert on them.

Usage:
    from shouldmatch.matchers import assert_matches
    from shouldmatch.validation import ensure_inclusion_of

    matcher = ensure_inclusion_of("state").in_array(["open", "closed"])
    result = matcher.evaluate(issue)

    if result.passed:
        print("✅ Matcher passed")
    else:
        print(result)  # Detailed failure message

    # Or raise AssertionError on failure
    assert_matches(issue, matcher)
"""

# Models
from .models import MatchResult, MatchStatus

# Base
from .base import (
    CouldNotDetermineValueOutsideOfArray,
    Matcher,
    MatcherConfigurationError,
    assert_does_not_match,
    assert_matches,
)

__all__ = [
    # Models
    "MatchResult",
    "MatchStatus",
    # Base
    "Matcher",
    "MatcherConfigurationError",
    "CouldNotDetermineValueOutsideOfArray",
    # Assertion helpers
    "assert_matches",
    "assert_does_not_match",
]
