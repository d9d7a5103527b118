"""
Schema validation for expectation suites.

This module contains the validation logic that checks raw parsed YAML
against the suite schema and reports errors with helpful messages.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from .models import MatcherName


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """Represents a single validation error with context."""
    path: str  # e.g., "expectations[0].qualifiers[1]"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"   Got: {repr(self.value)}")
        if self.suggestion:
            parts.append(f"   💡 {self.suggestion}")
        return "\n".join(parts)


@dataclass
class ValidationResult:
    """Result of schema validation."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def extend(self, other: ValidationResult) -> None:
        self.errors.extend(other.errors)

    def __str__(self) -> str:
        if self.is_valid:
            return "✅ Schema validation passed"
        lines = [f"Schema validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Suite Validator
# ─────────────────────────────────────────────────────────────────────────────

class SuiteValidator:
    """Validates raw parsed YAML against the suite schema."""

    REQUIRED_TOP_LEVEL = {"version", "name", "subjects", "expectations"}
    OPTIONAL_TOP_LEVEL = {"settings"}
    VALID_MATCHERS = {m.value for m in MatcherName}
    SUBJECT_FIELDS = {"factory", "args", "kwargs", "validate"}
    EXPECTATION_FIELDS = {"id", "subject", "matcher", "args", "qualifiers", "negate", "skip"}
    FACTORY_PATTERN = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$")

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()
        self.subject_names: set[str] = set()
        self.expectation_ids: set[str] = set()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_top_level()
        if not self.result.is_valid:
            return self.result

        self._validate_version()
        self._validate_name()
        self._validate_settings()
        self._validate_subjects()
        self._validate_expectations()

        return self.result

    def _validate_top_level(self) -> None:
        """Check required and unknown top-level keys."""
        keys = set(self.data.keys())
        missing = self.REQUIRED_TOP_LEVEL - keys
        unknown = keys - self.REQUIRED_TOP_LEVEL - self.OPTIONAL_TOP_LEVEL

        for key in sorted(missing):
            self.result.add_error(
                key,
                f"Required field '{key}' is missing",
                suggestion=f"Add '{key}:' to your suite file"
            )

        for key in sorted(unknown):
            self.result.add_error(
                key,
                f"Unknown top-level field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.REQUIRED_TOP_LEVEL | self.OPTIONAL_TOP_LEVEL))}"
            )

    def _validate_version(self) -> None:
        version = self.data.get("version")
        if not isinstance(version, int) or isinstance(version, bool):
            self.result.add_error(
                "version",
                "Must be an integer",
                value=version,
                suggestion="Use 'version: 1'"
            )
        elif version < 1:
            self.result.add_error(
                "version",
                "Must be >= 1",
                value=version
            )

    def _validate_name(self) -> None:
        name = self.data.get("name")
        if not isinstance(name, str):
            self.result.add_error(
                "name",
                "Must be a string",
                value=name
            )
        elif not name.strip():
            self.result.add_error(
                "name",
                "Cannot be empty",
                suggestion="Provide a descriptive name for your suite"
            )

    def _validate_settings(self) -> None:
        from ..config import validate_settings_data

        settings = self.data.get("settings")
        if settings is None:
            return
        self.result.extend(validate_settings_data(settings, prefix="settings"))

    def _validate_subjects(self) -> None:
        subjects = self.data.get("subjects")
        if not isinstance(subjects, dict):
            self.result.add_error(
                "subjects",
                "Must be an object (subject name -> factory)",
                value=subjects
            )
            return

        for name, subject in subjects.items():
            path = f"subjects.{name}"
            self.subject_names.add(str(name))

            if subject is None:
                # Factory supplied in code when the suite runs
                continue
            if isinstance(subject, str):
                subject = {"factory": subject}
            if not isinstance(subject, dict):
                self.result.add_error(
                    path,
                    "Subject must be a factory string or an object",
                    value=subject
                )
                continue

            for key in sorted(subject.keys() - self.SUBJECT_FIELDS):
                self.result.add_error(
                    f"{path}.{key}",
                    f"Unknown subject field '{key}'",
                    suggestion=f"Valid fields are: {', '.join(sorted(self.SUBJECT_FIELDS))}"
                )

            factory = subject.get("factory")
            if factory is not None and (
                not isinstance(factory, str) or not self.FACTORY_PATTERN.match(factory)
            ):
                self.result.add_error(
                    f"{path}.factory",
                    "Factory must look like 'package.module:attribute'",
                    value=factory
                )

            if not isinstance(subject.get("args", []), list):
                self.result.add_error(f"{path}.args", "Must be a list", value=subject["args"])

            if not isinstance(subject.get("kwargs", {}), dict):
                self.result.add_error(f"{path}.kwargs", "Must be an object", value=subject["kwargs"])

            validate = subject.get("validate")
            if validate is not None and not isinstance(validate, str):
                self.result.add_error(
                    f"{path}.validate",
                    "Must be the name of the validation method",
                    value=validate
                )

    def _validate_expectations(self) -> None:
        expectations = self.data.get("expectations")
        if not isinstance(expectations, list):
            self.result.add_error(
                "expectations",
                "Must be a list",
                value=expectations
            )
            return

        if len(expectations) == 0:
            self.result.add_error(
                "expectations",
                "Must contain at least one expectation",
                suggestion="Add at least one matcher to run"
            )
            return

        for i, expectation in enumerate(expectations):
            self._validate_expectation(i, expectation)

    def _validate_expectation(self, index: int, expectation: Any) -> None:
        from .registry import MATCHERS

        path = f"expectations[{index}]"

        if not isinstance(expectation, dict):
            self.result.add_error(
                path,
                "Expectation must be an object",
                value=expectation
            )
            return

        for key in sorted(expectation.keys() - self.EXPECTATION_FIELDS):
            self.result.add_error(
                f"{path}.{key}",
                f"Unknown expectation field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.EXPECTATION_FIELDS))}"
            )

        expectation_id = expectation.get("id")
        if not expectation_id:
            self.result.add_error(
                f"{path}.id",
                "Expectation must have an 'id' field",
                suggestion="Add a unique identifier like 'id: state_whitelist'"
            )
        elif not isinstance(expectation_id, str):
            self.result.add_error(
                f"{path}.id",
                "Expectation id must be a string",
                value=expectation_id
            )
        elif expectation_id in self.expectation_ids:
            self.result.add_error(
                f"{path}.id",
                "Duplicate expectation id",
                value=expectation_id,
                suggestion="Each expectation must have a unique id"
            )
        else:
            self.expectation_ids.add(expectation_id)

        subject = expectation.get("subject")
        if subject not in self.subject_names:
            self.result.add_error(
                f"{path}.subject",
                "References unknown subject",
                value=subject,
                suggestion=f"Available subjects: {', '.join(sorted(self.subject_names)) or '(none)'}"
            )

        negate = expectation.get("negate", False)
        if not isinstance(negate, bool):
            self.result.add_error(f"{path}.negate", "Must be true or false", value=negate)

        skip = expectation.get("skip")
        if skip is not None and not isinstance(skip, (bool, str)):
            self.result.add_error(
                f"{path}.skip",
                "Must be true or a reason string",
                value=skip
            )

        matcher = expectation.get("matcher")
        if matcher not in self.VALID_MATCHERS:
            self.result.add_error(
                f"{path}.matcher",
                "Unknown matcher",
                value=matcher,
                suggestion=f"Valid matchers: {', '.join(sorted(self.VALID_MATCHERS))}"
            )
            return

        spec = MATCHERS[MatcherName(matcher)]

        args = expectation.get("args", [])
        if not isinstance(args, list):
            self.result.add_error(f"{path}.args", "Must be a list", value=args)
        elif not spec.accepts(len(args)):
            self.result.add_error(
                f"{path}.args",
                f"{matcher} takes {spec.arity()} argument(s), got {len(args)}",
                value=args
            )

        self._validate_patterns(f"{path}.args", args)
        self._validate_qualifiers(path, matcher, expectation.get("qualifiers", []), spec.qualifiers)
        self._validate_patterns(f"{path}.qualifiers", expectation.get("qualifiers", []))

    def _validate_qualifiers(
        self, path: str, matcher: str, qualifiers: Any, allowed: frozenset[str]
    ) -> None:
        if not isinstance(qualifiers, list):
            self.result.add_error(
                f"{path}.qualifiers",
                "Must be a list of single-key objects",
                value=qualifiers,
                suggestion="Use '- allow_nil: true' entries, in the order to apply them"
            )
            return

        for i, qualifier in enumerate(qualifiers):
            qpath = f"{path}.qualifiers[{i}]"
            if isinstance(qualifier, str):
                name = qualifier
            elif isinstance(qualifier, dict) and len(qualifier) == 1:
                name = next(iter(qualifier))
            else:
                self.result.add_error(
                    qpath,
                    "Qualifier must be a name or a single-key object",
                    value=qualifier
                )
                continue

            if name not in allowed:
                self.result.add_error(
                    qpath,
                    f"Unknown qualifier for {matcher}",
                    value=name,
                    suggestion=f"Valid qualifiers: {', '.join(sorted(allowed)) or '(none)'}"
                )

    def _validate_patterns(self, path: str, value: Any) -> None:
        """Check every {regex: ...} value compiles."""
        if isinstance(value, dict):
            if set(value) == {"regex"}:
                try:
                    re.compile(value["regex"])
                except (re.error, TypeError) as e:
                    self.result.add_error(path, f"Invalid regex: {e}", value=value["regex"])
                return
            for key, item in value.items():
                self._validate_patterns(f"{path}.{key}", item)
        elif isinstance(value, list):
            for i, item in enumerate(value):
                self._validate_patterns(f"{path}[{i}]", item)
