"""
Reporting for suite runs.

This package provides reporting capabilities for capturing complete
records of expectation suite runs.

Features:
    - Run metadata (ID, timestamp, suite info)
    - Per-expectation records with timing
    - Expected/actual capture
    - Failure and error messages
    - JSON serialization
    - Human-readable summaries

Usage:
    from shouldmatch.reporting import Reporter
    from shouldmatch.suites import load_suite

    suite, _ = load_suite("suites/issue.yaml")
    reporter = Reporter.from_suite(suite)
    reporter.start_run()

    reporter.start_expectation("state_whitelist")
    reporter.complete_success("state_whitelist")

    report = reporter.finish_run()
    print(report.summary())
    reporter.save_json("reports/issue.json")
"""

# Models
from .models import (
    ExpectationRecord,
    ExpectationStatus,
    RunStatus,
    SuiteReport,
    compute_suite_hash,
)

# Reporter
from .reporter import Reporter

__all__ = [
    # Models
    "ExpectationRecord",
    "ExpectationStatus",
    "RunStatus",
    "SuiteReport",
    "compute_suite_hash",
    # Reporter
    "Reporter",
]
