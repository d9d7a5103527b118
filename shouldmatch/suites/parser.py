"""
Suite parser.

This module converts validated YAML data into typed Suite structures.
"""

from __future__ import annotations

import re
from typing import Any

from .models import Expectation, MatcherName, Qualifier, Suite, SubjectSpec


class SuiteParser:
    """Parses and converts validated YAML to typed Suite structure."""

    # {regex: "..."} in a suite file stands for a compiled pattern
    REGEX_KEY = "regex"

    def __init__(self, data: dict[str, Any]):
        self.data = data

    def parse(self) -> Suite:
        """Convert validated data to typed Suite."""
        return Suite(
            version=self.data["version"],
            name=self.data["name"],
            subjects=self._parse_subjects(),
            expectations=self._parse_expectations(),
            settings=self.data.get("settings") or {},
        )

    def _parse_subjects(self) -> dict[str, SubjectSpec]:
        subjects = {}
        for name, subject in self.data["subjects"].items():
            name = str(name)
            if subject is None:
                subject = {}
            elif isinstance(subject, str):
                subject = {"factory": subject}

            subjects[name] = SubjectSpec(
                name=name,
                factory=subject.get("factory"),
                args=subject.get("args", []),
                kwargs=subject.get("kwargs", {}),
                validate=subject.get("validate"),
            )
        return subjects

    def _parse_expectations(self) -> list[Expectation]:
        return [self._parse_expectation(e) for e in self.data["expectations"]]

    def _parse_expectation(self, data: dict) -> Expectation:
        skip = data.get("skip")
        if skip is True:
            skip = "skipped in suite"
        elif skip is False:
            skip = None

        return Expectation(
            id=data["id"],
            subject=str(data["subject"]),
            matcher=MatcherName(data["matcher"]),
            args=[self._coerce(arg) for arg in data.get("args", [])],
            qualifiers=[self._parse_qualifier(q) for q in data.get("qualifiers", [])],
            negate=data.get("negate", False),
            skip=skip,
        )

    def _parse_qualifier(self, data: str | dict) -> Qualifier:
        if isinstance(data, str):
            return Qualifier(name=data)
        name, value = next(iter(data.items()))
        return Qualifier(name=name, value=self._coerce(value))

    def _coerce(self, value: Any) -> Any:
        if isinstance(value, dict):
            if set(value) == {self.REGEX_KEY}:
                return re.compile(value[self.REGEX_KEY])
            return {k: self._coerce(v) for k, v in value.items()}
        if isinstance(value, list):
            return [self._coerce(v) for v in value]
        return value
