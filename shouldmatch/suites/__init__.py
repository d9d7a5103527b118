"""
Expectation suites.

This package handles loading, validating, and running declarative YAML
suites of matcher expectations.

Usage:
    from shouldmatch.suites import load_suite, run_suite

    suite, result = load_suite("suites/issue.yaml")

    if not result.is_valid:
        print(result)  # Shows all validation errors
    else:
        reporter = run_suite(suite)
        print(reporter.get_summary())
"""

# Models
from .models import (
    MatcherName,
    SubjectSpec,
    Qualifier,
    Expectation,
    Suite,
)

# Validation
from .validation import (
    ValidationError,
    ValidationResult,
    SuiteValidator,
)

# Parser
from .parser import SuiteParser

# Loader functions
from .loader import (
    load_suite,
    validate_suite_yaml,
)

# Registry and runner
from .registry import MATCHERS, MatcherSpec, build_matcher
from .runner import build_subject, resolve_factory, run_suite

__all__ = [
    # Loader functions (main API)
    "load_suite",
    "validate_suite_yaml",
    "run_suite",
    # Models
    "MatcherName",
    "SubjectSpec",
    "Qualifier",
    "Expectation",
    "Suite",
    # Validation
    "ValidationError",
    "ValidationResult",
    "SuiteValidator",
    # Parser
    "SuiteParser",
    # Registry and runner
    "MATCHERS",
    "MatcherSpec",
    "build_matcher",
    "build_subject",
    "resolve_factory",
]
