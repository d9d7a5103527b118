"""
shouldmatch - declarative test matchers for models and controllers

This package provides matchers that check framework-level behavior without
hand-written assertions.

Subpackages:
    - matchers: Matcher base class, results, assertion helpers
    - validation: Model validation matchers (inclusion, allow_value)
    - controller: Response, session/flash, routing and declaration matchers
    - suites: Load, validate and run YAML expectation suites
    - reporting: Run reports and result tracking

Usage:
    from shouldmatch import assert_matches, ensure_inclusion_of

    assert_matches(issue, ensure_inclusion_of("state").in_array(["open", "closed"]))
    assert_matches(issue, ensure_inclusion_of("priority").in_range(1, 5))

    # Or run a whole suite
    from shouldmatch import load_suite, run_suite

    suite, result = load_suite("suites/issue.yaml")
    reporter = run_suite(suite)
    print(reporter.get_summary())
"""

__version__ = "0.1.0"

# Re-export matcher core for convenience
from .matchers import (
    MatchResult,
    MatchStatus,
    Matcher,
    MatcherConfigurationError,
    CouldNotDetermineValueOutsideOfArray,
    assert_matches,
    assert_does_not_match,
)

# Re-export validation matchers
from .validation import (
    Validatable,
    ModelSubject,
    ValueKind,
    allow_value,
    ensure_inclusion_of,
)

# Re-export controller matchers
from .controller import (
    ControllerResponse,
    RouteTable,
    respond_with,
    redirect_to,
    render_template,
    render_with_layout,
    set_session,
    set_the_flash,
    route,
    rescue_from,
    filter_param,
)

# Re-export settings
from .config import (
    MatcherSettings,
    configure,
    get_settings,
    load_settings,
    reset_settings,
)

# Re-export suites and reporting
from .suites import load_suite, validate_suite_yaml, run_suite
from .reporting import Reporter, SuiteReport

__all__ = [
    "__version__",
    # Matcher core
    "MatchResult",
    "MatchStatus",
    "Matcher",
    "MatcherConfigurationError",
    "CouldNotDetermineValueOutsideOfArray",
    "assert_matches",
    "assert_does_not_match",
    # Validation
    "Validatable",
    "ModelSubject",
    "ValueKind",
    "allow_value",
    "ensure_inclusion_of",
    # Controller
    "ControllerResponse",
    "RouteTable",
    "respond_with",
    "redirect_to",
    "render_template",
    "render_with_layout",
    "set_session",
    "set_the_flash",
    "route",
    "rescue_from",
    "filter_param",
    # Settings
    "MatcherSettings",
    "configure",
    "get_settings",
    "load_settings",
    "reset_settings",
    # Suites and reporting
    "load_suite",
    "validate_suite_yaml",
    "run_suite",
    "Reporter",
    "SuiteReport",
]
