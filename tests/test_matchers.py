"""Unit tests for match results and the assertion helpers."""

import pytest

from shouldmatch.controller import ControllerResponse, respond_with
from shouldmatch.matchers import (
    MatchResult,
    MatchStatus,
    assert_does_not_match,
    assert_matches,
)
from shouldmatch.matchers.models import inspect_value


class TestMatchResult:
    """Tests for MatchResult."""

    def test_only_two_outcomes(self):
        """A matcher either passes or fails; misconfiguration is raised."""
        assert {status.value for status in MatchStatus} == {"passed", "failed"}

    def test_success_is_truthy(self):
        """A passing result is truthy and prints its message."""
        result = MatchResult.success("Responded with 200", description="respond with 200")
        assert result
        assert result.status == MatchStatus.PASSED
        assert str(result) == "Responded with 200"

    def test_failure_message(self):
        """A failing result explains what was expected and what happened."""
        result = MatchResult.failure(
            "Expected response to be 200, but was 404",
            description="respond with 200",
            expected=200,
            actual=404,
            details={"status": 404},
        )

        assert not result
        assert result.failure_message.splitlines() == [
            "Expected to respond with 200",
            "  Expected response to be 200, but was 404",
            "  expected: 200",
            "  actual:   404",
            "  status: 404",
        ]
        assert str(result) == result.failure_message

    def test_negated_failure_message(self):
        """The negated message names the matcher that unexpectedly passed."""
        result = MatchResult.success("Responded with 200", description="respond with 200")
        assert result.negated_failure_message == "Expected not to respond with 200"

    def test_long_values_are_shortened(self):
        """Long values are cut in failure messages."""
        text = inspect_value("x" * 200)
        assert len(text) == 80
        assert text.endswith("...")


class TestAssertionHelpers:
    """Tests for assert_matches and assert_does_not_match."""

    def test_assert_matches_returns_result(self):
        """A passing matcher returns its result."""
        result = assert_matches(ControllerResponse(status=200), respond_with(200))
        assert result.actual == 200

    def test_assert_matches_raises_failure_message(self):
        """A failing matcher raises with its failure message."""
        with pytest.raises(AssertionError, match="Expected to respond with 200"):
            assert_matches(ControllerResponse(status=404), respond_with(200))

    def test_assert_does_not_match_raises_negated_message(self):
        """A matcher that passes fails a negated assertion."""
        with pytest.raises(AssertionError, match="Expected not to respond with 200"):
            assert_does_not_match(ControllerResponse(status=200), respond_with(200))

    def test_assert_does_not_match_returns_failed_result(self):
        """A failing matcher satisfies a negated assertion."""
        result = assert_does_not_match(ControllerResponse(status=500), respond_with(200))
        assert result.status == MatchStatus.FAILED
