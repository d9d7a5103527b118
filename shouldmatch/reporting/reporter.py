"""
Reporter for building and managing suite reports.

This module provides the Reporter class which helps construct
run reports from suite executions.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from .models import (
    ExpectationRecord,
    ExpectationStatus,
    SuiteReport,
    compute_suite_hash,
)

if TYPE_CHECKING:
    from ..suites.models import Suite


class Reporter:
    """
    Builds and manages suite reports.

    Example:
        suite, _ = load_suite("suites/issue.yaml")
        reporter = Reporter.from_suite(suite)

        reporter.start_run()

        reporter.start_expectation("state_whitelist")
        reporter.complete_success("state_whitelist", description="ensure inclusion of state in [...]")

        reporter.start_expectation("priority_range")
        reporter.complete_failure("priority_range", failure_message="lower boundary: ...")

        report = reporter.finish_run()
        print(report.summary())
    """

    def __init__(self, report: SuiteReport):
        """
        Initialize with a SuiteReport.

        Use Reporter.from_suite() for the typical case.
        """
        self.report = report

    @classmethod
    def from_suite(cls, suite: Suite, run_id: str | None = None) -> Reporter:
        """
        Create a Reporter from a parsed Suite.

        Args:
            suite: The parsed suite to create a report for
            run_id: Optional custom run ID (auto-generated if not provided)

        Returns:
            Reporter instance ready to record expectation results
        """
        report = SuiteReport(
            suite_name=suite.name,
            suite_version=suite.version,
            suite_hash=compute_suite_hash(_suite_to_dict(suite)),
        )
        if run_id:
            report.run_id = run_id

        # Pre-populate records so unrun expectations still show up
        for expectation in suite.expectations:
            report.add_expectation(ExpectationRecord(
                expectation_id=expectation.id,
                matcher=expectation.matcher.value,
                subject=expectation.subject,
                negate=expectation.negate,
            ))

        return cls(report)

    def start_run(self) -> None:
        self.report.start()

    def finish_run(self) -> SuiteReport:
        """
        Mark the run as completed and return the final report.

        Returns:
            The completed SuiteReport with summary stats
        """
        self.report.complete()
        return self.report

    def start_expectation(self, expectation_id: str) -> ExpectationRecord | None:
        record = self.report.get_expectation(expectation_id)
        if record:
            record.start()
        return record

    def complete_success(
        self,
        expectation_id: str,
        description: str | None = None,
        actual_value: Any = None,
    ) -> ExpectationRecord | None:
        """Mark an expectation as passed."""
        record = self.report.get_expectation(expectation_id)
        if record:
            record.description = description or record.description
            record.actual_value = actual_value
            record.complete(ExpectationStatus.PASSED)
        return record

    def complete_failure(
        self,
        expectation_id: str,
        failure_message: str,
        description: str | None = None,
        expected_value: Any = None,
        actual_value: Any = None,
    ) -> ExpectationRecord | None:
        """
        Mark an expectation as failed.

        Args:
            expectation_id: The ID of the expectation
            failure_message: Human-readable failure description
            description: Description of the matcher
            expected_value: What was expected
            actual_value: What was actually found
        """
        record = self.report.get_expectation(expectation_id)
        if record:
            record.description = description or record.description
            record.expected_value = expected_value
            record.actual_value = actual_value
            record.failure_message = failure_message
            record.complete(ExpectationStatus.FAILED)
        return record

    def complete_error(
        self,
        expectation_id: str,
        error_message: str,
        error_details: dict[str, Any] | None = None,
    ) -> ExpectationRecord | None:
        """Mark an expectation as errored (the matcher could not be evaluated)."""
        record = self.report.get_expectation(expectation_id)
        if record:
            record.error_message = error_message
            record.error_details = error_details
            record.complete(ExpectationStatus.ERROR)
        return record

    def skip(self, expectation_id: str, reason: str | None = None) -> ExpectationRecord | None:
        record = self.report.get_expectation(expectation_id)
        if record:
            if reason:
                record.failure_message = f"Skipped: {reason}"
            record.complete(ExpectationStatus.SKIPPED)
        return record

    def save_json(self, path: str | Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.report.to_json())

    def get_summary(self) -> str:
        return self.report.summary()


def _suite_to_dict(suite: Suite) -> dict[str, Any]:
    """Convert a Suite to a dict for hashing."""
    return {
        "version": suite.version,
        "name": suite.name,
        "settings": suite.settings,
        "subjects": {
            name: {
                "factory": spec.factory,
                "args": spec.args,
                "kwargs": spec.kwargs,
                "validate": spec.validate,
            }
            for name, spec in suite.subjects.items()
        },
        "expectations": [
            {
                "id": e.id,
                "subject": e.subject,
                "matcher": e.matcher.value,
                "args": e.args,
                "qualifiers": [[q.name, q.value] for q in e.qualifiers],
                "negate": e.negate,
                "skip": e.skip,
            }
            for e in suite.expectations
        ],
    }
