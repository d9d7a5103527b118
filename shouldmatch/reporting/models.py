"""
Report data models for suite runs.

This module defines the data structures for capturing complete
run records including metadata, expectation results, and timing.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ExpectationStatus(str, Enum):
    """Status of an individual expectation."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


class RunStatus(str, Enum):
    """Overall status of a suite run."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class ExpectationRecord:
    """
    Record of a single expectation.

    Captures which matcher ran against which subject, how long it took,
    and what was expected versus observed.
    """
    expectation_id: str
    matcher: str
    subject: str
    negate: bool = False
    status: ExpectationStatus = ExpectationStatus.PENDING

    # Timing
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # Outcome
    description: str | None = None
    expected_value: Any = None
    actual_value: Any = None

    # Errors and messages
    failure_message: str | None = None
    error_message: str | None = None
    error_details: dict[str, Any] | None = None

    def start(self) -> None:
        """Mark the expectation as started."""
        self.status = ExpectationStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self, status: ExpectationStatus) -> None:
        """Mark the expectation as completed with given status."""
        self.status = status
        self.ended_at = datetime.now(timezone.utc)
        if self.started_at:
            delta = self.ended_at - self.started_at
            self.duration_ms = delta.total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "expectation_id": self.expectation_id,
            "matcher": self.matcher,
            "subject": self.subject,
            "negate": self.negate,
            "status": self.status.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "description": self.description,
            "expected_value": _safe_serialize(self.expected_value),
            "actual_value": _safe_serialize(self.actual_value),
            "failure_message": self.failure_message,
            "error_message": self.error_message,
            "error_details": self.error_details,
        }


@dataclass
class SuiteReport:
    """
    Complete record of a suite run.

    Contains metadata about the run, the suite being run,
    and detailed records for each expectation.
    """
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # Timing
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # Suite info
    suite_name: str = ""
    suite_version: int = 1
    suite_hash: str = ""

    status: RunStatus = RunStatus.PENDING
    expectations: list[ExpectationRecord] = field(default_factory=list)

    # Summary stats
    total: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0
    skipped: int = 0

    def start(self) -> None:
        """Mark the run as started."""
        self.status = RunStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self) -> None:
        """Mark the run as completed and calculate final status."""
        self.ended_at = datetime.now(timezone.utc)
        delta = self.ended_at - self.started_at
        self.duration_ms = delta.total_seconds() * 1000

        statuses = [e.status for e in self.expectations]
        self.total = len(statuses)
        self.passed = statuses.count(ExpectationStatus.PASSED)
        self.failed = statuses.count(ExpectationStatus.FAILED)
        self.errors = statuses.count(ExpectationStatus.ERROR)
        self.skipped = statuses.count(ExpectationStatus.SKIPPED)

        if self.errors > 0:
            self.status = RunStatus.ERROR
        elif self.failed > 0:
            self.status = RunStatus.FAILED
        else:
            self.status = RunStatus.PASSED

    def add_expectation(self, record: ExpectationRecord) -> None:
        self.expectations.append(record)

    def get_expectation(self, expectation_id: str) -> ExpectationRecord | None:
        for record in self.expectations:
            if record.expectation_id == expectation_id:
                return record
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "suite_name": self.suite_name,
            "suite_version": self.suite_version,
            "suite_hash": self.suite_hash,
            "status": self.status.value,
            "summary": {
                "total": self.total,
                "passed": self.passed,
                "failed": self.failed,
                "errors": self.errors,
                "skipped": self.skipped,
            },
            "expectations": [record.to_dict() for record in self.expectations],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def summary(self) -> str:
        """Generate a human-readable summary."""
        rule = "═" * 59
        thin = "─" * 59
        lines = [
            rule,
            f"  Suite Report: {self.suite_name}",
            rule,
            f"  Run ID:     {self.run_id}",
            f"  Status:     {_status_icon(self.status)} {self.status.value.upper()}",
            f"  Duration:   {self.duration_ms:.0f}ms" if self.duration_ms is not None else "  Duration:   N/A",
            f"  Started:    {self.started_at.strftime('%Y-%m-%d %H:%M:%S UTC')}",
            thin,
            f"  Expectations: {self.passed} passed, {self.failed} failed, "
            f"{self.errors} errors, {self.skipped} skipped",
            thin,
        ]

        for record in self.expectations:
            icon = _status_icon(record.status)
            text = record.description or record.matcher
            if record.negate:
                text = f"not {text}"
            lines.append(f"  {icon} [{record.expectation_id}] {record.subject}: {text}")

            if record.failure_message:
                lines.append(f"      └─ {record.failure_message}")
            elif record.error_message:
                lines.append(f"      └─ Error: {record.error_message}")

        lines.append(rule)
        return "\n".join(lines)


def compute_suite_hash(suite_dict: dict[str, Any]) -> str:
    """
    Compute a hash of the suite for tracking/versioning.

    Returns:
        SHA-256 hash (first 12 chars)
    """
    serialized = json.dumps(suite_dict, sort_keys=True, default=str)
    return hashlib.sha256(serialized.encode()).hexdigest()[:12]


def _safe_serialize(value: Any) -> Any:
    """Safely serialize a value, handling non-JSON types."""
    if value is None:
        return None
    try:
        json.dumps(value)
        return value
    except (TypeError, ValueError):
        return str(value)


def _status_icon(status: RunStatus | ExpectationStatus) -> str:
    return {
        "pending": "⏳",
        "running": "🔄",
        "passed": "✅",
        "failed": "❌",
        "error": "⚠️",
        "skipped": "⏭️",
    }.get(status.value, "❓")
