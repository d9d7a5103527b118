"""
Typed data structures for expectation suites.

This module contains the enums and dataclasses that represent
the internal typed structure of a parsed suite file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────

class MatcherName(str, Enum):
    """Matchers available to suite files."""
    ENSURE_INCLUSION_OF = "ensure_inclusion_of"
    ALLOW_VALUE = "allow_value"
    RESPOND_WITH = "respond_with"
    REDIRECT_TO = "redirect_to"
    RENDER_TEMPLATE = "render_template"
    RENDER_WITH_LAYOUT = "render_with_layout"
    SET_SESSION = "set_session"
    SET_THE_FLASH = "set_the_flash"
    ROUTE = "route"
    RESCUE_FROM = "rescue_from"
    FILTER_PARAM = "filter_param"


# ─────────────────────────────────────────────────────────────────────────────
# Subjects
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class SubjectSpec:
    """How to build a fresh subject for each expectation."""
    name: str
    factory: str | None = None  # "package.module:attribute"; may be supplied in code instead
    args: list[Any] = field(default_factory=list)
    kwargs: dict[str, Any] = field(default_factory=dict)
    validate: str | None = None  # Validation method for plain model objects


# ─────────────────────────────────────────────────────────────────────────────
# Expectations
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Qualifier:
    """
    One chained qualifier call.

    ``value`` None calls the qualifier without arguments, a dict is passed
    as keyword arguments, anything else as a single positional argument.
    """
    name: str
    value: Any = None

    def call_arguments(self) -> tuple[tuple[Any, ...], dict[str, Any]]:
        if self.value is None:
            return (), {}
        if isinstance(self.value, dict):
            return (), dict(self.value)
        return (self.value,), {}


@dataclass
class Expectation:
    """A matcher applied to a subject."""
    id: str
    subject: str
    matcher: MatcherName
    args: list[Any] = field(default_factory=list)
    qualifiers: list[Qualifier] = field(default_factory=list)
    negate: bool = False  # Expect the matcher NOT to pass
    skip: str | None = None  # Reason for skipping, if skipped


# ─────────────────────────────────────────────────────────────────────────────
# Suite
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Suite:
    """Fully parsed and validated suite."""
    version: int
    name: str
    subjects: dict[str, SubjectSpec] = field(default_factory=dict)
    expectations: list[Expectation] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)
