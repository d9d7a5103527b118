"""
Validation matchers.

This package provides matchers for model validations. Subjects are reached
through the ``Validatable`` contract; plain objects with a ``validate``
method and an ``errors`` mapping are adapted automatically.

Supported matchers:
    - ensure_inclusion_of: attribute is restricted to an allow-list
    - allow_value: attribute accepts the given values

Usage:
    from shouldmatch.matchers import assert_matches
    from shouldmatch.validation import allow_value, ensure_inclusion_of

    assert_matches(issue, ensure_inclusion_of("priority").in_range(1, 5))
    assert_matches(issue, allow_value("open").for_attribute("state"))
"""

# Subjects
from .subject import (
    ModelSubject,
    Validatable,
    ValueKind,
    as_subject,
    infer_value_kind,
)

# Probes
from .allow_value import (
    AllowValueMatcher,
    ProbeOutcome,
    allow_value,
    allows_value_of,
    disallows_value_of,
    probe_value,
)

# Inclusion
from .inclusion import InclusionMatcher, ensure_inclusion_of

__all__ = [
    # Subjects
    "Validatable",
    "ModelSubject",
    "ValueKind",
    "as_subject",
    "infer_value_kind",
    # Probes
    "ProbeOutcome",
    "probe_value",
    "allows_value_of",
    "disallows_value_of",
    # Matchers
    "AllowValueMatcher",
    "allow_value",
    "InclusionMatcher",
    "ensure_inclusion_of",
]
