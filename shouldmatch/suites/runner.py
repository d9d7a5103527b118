"""
Suite runner.

Builds a fresh subject for every expectation, evaluates the expectation's
matcher against it and records the outcome in a Reporter. Problems with a
single expectation are recorded as errors and never stop the run.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Callable, Mapping

from ..config import get_settings, use_settings
from ..matchers.base import MatcherConfigurationError
from ..reporting import ExpectationRecord, Reporter
from ..validation.subject import ModelSubject
from .models import Expectation, SubjectSpec, Suite
from .registry import build_matcher

logger = logging.getLogger(__name__)

ResultCallback = Callable[[Expectation, ExpectationRecord], None]


def resolve_factory(path: str) -> Callable[..., Any]:
    """
    Import the object named by a ``package.module:attribute`` string.

    The attribute part may be dotted, e.g. ``app.models:Issue.build``.
    """
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"Factory must look like 'package.module:attribute', got {path!r}")

    target: Any = importlib.import_module(module_name)
    for part in attribute.split("."):
        target = getattr(target, part)

    if not callable(target):
        raise TypeError(f"Factory {path!r} is not callable")
    return target


def build_subject(
    spec: SubjectSpec,
    factories: Mapping[str, Callable[..., Any]] | None = None,
) -> Any:
    """
    Build a fresh subject from its spec.

    A factory passed in code under the subject's name wins over the one
    named in the suite file.
    """
    factory = (factories or {}).get(spec.name)
    if factory is None:
        if spec.factory is None:
            raise LookupError(
                f"No factory for subject '{spec.name}': name one in the suite "
                f"or pass it to run_suite"
            )
        factory = resolve_factory(spec.factory)

    subject = factory(*spec.args, **spec.kwargs)
    if spec.validate is not None:
        subject = ModelSubject(subject, validate=spec.validate)
    return subject


def run_suite(
    suite: Suite,
    factories: Mapping[str, Callable[..., Any]] | None = None,
    on_result: ResultCallback | None = None,
) -> Reporter:
    """
    Execute every expectation of a suite.

    Args:
        suite: The parsed suite
        factories: Optional subject factories by subject name
        on_result: Called with each expectation and its completed record

    Returns:
        Reporter holding the finished run report
    """
    reporter = Reporter.from_suite(suite)
    reporter.start_run()

    settings = get_settings().merged(suite.settings)
    with use_settings(settings):
        for expectation in suite.expectations:
            record = _run_expectation(reporter, suite, expectation, factories)
            if on_result is not None and record is not None:
                on_result(expectation, record)

    report = reporter.finish_run()
    logger.info(
        "Suite '%s' finished: %s (%d passed, %d failed, %d errors, %d skipped)",
        suite.name, report.status.value,
        report.passed, report.failed, report.errors, report.skipped,
    )
    return reporter


def _run_expectation(
    reporter: Reporter,
    suite: Suite,
    expectation: Expectation,
    factories: Mapping[str, Callable[..., Any]] | None,
) -> ExpectationRecord | None:
    if expectation.skip:
        logger.debug("Skipping %s: %s", expectation.id, expectation.skip)
        return reporter.skip(expectation.id, expectation.skip)

    reporter.start_expectation(expectation.id)
    logger.debug("Running %s against %s", expectation.id, expectation.subject)

    try:
        matcher = build_matcher(expectation)
        subject = build_subject(suite.subjects[expectation.subject], factories)
        result = matcher.evaluate(subject)
    except MatcherConfigurationError as e:
        return reporter.complete_error(expectation.id, f"Matcher misconfigured: {e}")
    except Exception as e:
        logger.debug("Expectation %s raised", expectation.id, exc_info=True)
        return reporter.complete_error(
            expectation.id,
            f"{type(e).__name__}: {e}",
            error_details={"exception": type(e).__name__},
        )

    if expectation.negate:
        if result.passed:
            return reporter.complete_failure(
                expectation.id,
                failure_message=result.negated_failure_message,
                description=matcher.description,
                actual_value=result.actual,
            )
        return reporter.complete_success(
            expectation.id,
            description=matcher.description,
            actual_value=result.actual,
        )

    if result.passed:
        return reporter.complete_success(
            expectation.id,
            description=matcher.description,
            actual_value=result.actual,
        )
    return reporter.complete_failure(
        expectation.id,
        failure_message=result.message,
        description=matcher.description,
        expected_value=result.expected,
        actual_value=result.actual,
    )
