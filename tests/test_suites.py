"""Unit tests for expectation suites.

Tests schema validation, parsing, matcher building and running.
"""

import re
from textwrap import dedent

import pytest

from fixture_models import Issue, Record, inclusion_rule
from shouldmatch.matchers import MatcherConfigurationError
from shouldmatch.reporting import ExpectationStatus, RunStatus
from shouldmatch.suites import (
    Expectation,
    MatcherName,
    Qualifier,
    build_matcher,
    build_subject,
    load_suite,
    resolve_factory,
    run_suite,
    validate_suite_yaml,
)
from shouldmatch.suites.models import SubjectSpec
from shouldmatch.validation import InclusionMatcher

VALID_SUITE = dedent("""
    version: 1
    name: Issue model
    subjects:
      issue:
      response:
        factory: "shouldmatch.controller.models:ControllerResponse"
        kwargs: {status: 204, session: {user: {id: 7}}}
    expectations:
      - id: state_whitelist
        subject: issue
        matcher: ensure_inclusion_of
        args: [state]
        qualifiers:
          - in_array: [open, resolved, unresolved]
          - allow_nil: false
      - id: priority_range
        subject: issue
        matcher: ensure_inclusion_of
        args: [priority]
        qualifiers:
          - in_range: [1, 5]
          - with_low_message: {regex: "low$"}
          - with_high_message: too high
      - id: no_content
        subject: response
        matcher: respond_with
        args: [success]
      - id: user_in_session
        subject: response
        matcher: set_session
        args: ["$.user.id"]
        qualifiers:
          - to: 7
      - id: not_redirected
        subject: response
        matcher: respond_with
        args: [redirect]
        negate: true
      - id: later
        subject: response
        matcher: render_with_layout
        skip: layouts are not captured yet
""")


def errors_at(yaml_text: str) -> list[str]:
    suite, result = validate_suite_yaml(yaml_text)
    assert suite is None
    return [error.path for error in result.errors]


class TestValidation:
    """Tests for SuiteValidator through validate_suite_yaml."""

    def test_valid_suite(self):
        """A well-formed suite validates and parses."""
        suite, result = validate_suite_yaml(VALID_SUITE)

        assert result.is_valid, str(result)
        assert suite.name == "Issue model"
        assert len(suite.expectations) == 6

    def test_missing_and_unknown_top_level(self):
        """Missing and unknown top-level fields are reported."""
        paths = errors_at("version: 1\nname: x\nextras: 1\n")
        assert paths == ["expectations", "subjects", "extras"]

    def test_non_mapping_content(self):
        """Content must be a mapping."""
        assert errors_at("- 1\n- 2\n") == ["yaml"]

    def test_yaml_syntax_error(self):
        """Broken YAML is reported."""
        suite, result = validate_suite_yaml("name: [unclosed\n")
        assert suite is None
        assert "Invalid YAML syntax" in str(result)

    def test_expectation_errors(self):
        """Problems in expectations are all reported with paths."""
        paths = errors_at(dedent("""
            version: 1
            name: Broken
            subjects:
              issue:
            expectations:
              - id: a
                subject: issue
                matcher: ensure_inclusion_of
                args: []
              - id: a
                subject: ghost
                matcher: ensure_inclusion_of
                args: [state]
                qualifiers:
                  - in_array: [open]
                  - shout: true
                negate: maybe
              - id: b
                subject: issue
                matcher: be_awesome
              - id: c
                subject: issue
                matcher: allow_value
                args: [{regex: "("}]
                color: red
        """))

        assert paths == [
            "expectations[0].args",
            "expectations[1].id",
            "expectations[1].subject",
            "expectations[1].negate",
            "expectations[1].qualifiers[1]",
            "expectations[2].matcher",
            "expectations[3].color",
            "expectations[3].args[0]",
        ]

    def test_subject_errors(self):
        """Subject factories, args and kwargs are checked."""
        paths = errors_at(dedent("""
            version: 1
            name: Subjects
            subjects:
              a: not a factory
              b: {factory: "pkg.mod:Thing", args: 1, kwargs: [], validate: 3, extra: 1}
              c: 42
            expectations:
              - {id: one, subject: a, matcher: filter_param, args: [password]}
        """))

        assert paths == [
            "subjects.a.factory",
            "subjects.b.extra",
            "subjects.b.args",
            "subjects.b.kwargs",
            "subjects.b.validate",
            "subjects.c",
        ]

    def test_settings_errors(self):
        """An inline settings block is validated."""
        paths = errors_at(dedent("""
            version: 1
            name: Settings
            settings: {messages: {inclusion: 1}}
            subjects: {a: null}
            expectations:
              - {id: one, subject: a, matcher: filter_param, args: [password]}
        """))
        assert paths == ["settings.messages.inclusion"]

    def test_empty_expectations(self):
        """At least one expectation is required."""
        assert errors_at("version: 1\nname: x\nsubjects: {}\nexpectations: []\n") == ["expectations"]

    def test_load_suite_from_file(self, tmp_path):
        """load_suite reads files and reports missing ones."""
        path = tmp_path / "issue.yaml"
        path.write_text(VALID_SUITE)

        suite, result = load_suite(path)
        assert result.is_valid
        assert suite.subjects["response"].kwargs["status"] == 204

        suite, result = load_suite(tmp_path / "missing.yaml")
        assert suite is None
        assert "File not found" in str(result)


class TestParsing:
    """Tests for SuiteParser output."""

    @pytest.fixture
    def suite(self):
        suite, result = validate_suite_yaml(VALID_SUITE)
        assert result.is_valid
        return suite

    def test_subjects(self, suite):
        """Null subjects have no factory; mappings keep their arguments."""
        assert suite.subjects["issue"] == SubjectSpec(name="issue")
        assert suite.subjects["response"].factory == "shouldmatch.controller.models:ControllerResponse"

    def test_qualifiers_in_order(self, suite):
        """Qualifiers keep their order; {regex: ...} becomes a pattern."""
        expectation = suite.expectations[1]
        assert [q.name for q in expectation.qualifiers] == [
            "in_range", "with_low_message", "with_high_message",
        ]
        assert expectation.qualifiers[1].value == re.compile("low$")

    def test_negate_and_skip(self, suite):
        """negate and skip are carried over."""
        assert suite.expectations[4].negate is True
        assert suite.expectations[5].skip == "layouts are not captured yet"
        assert suite.expectations[0].skip is None

    def test_qualifier_call_arguments(self):
        """Null means no arguments, mappings keyword arguments, else one positional."""
        assert Qualifier("allow_nil").call_arguments() == ((), {})
        assert Qualifier("to", {"id": 5}).call_arguments() == ((), {"id": 5})
        assert Qualifier("in_range", [1, 5]).call_arguments() == (([1, 5],), {})


class TestBuildMatcher:
    """Tests for build_matcher."""

    def test_builds_configured_matcher(self):
        """Qualifiers are applied in order."""
        expectation = Expectation(
            id="state",
            subject="issue",
            matcher=MatcherName.ENSURE_INCLUSION_OF,
            args=["state"],
            qualifiers=[Qualifier("in_array", ["open", "closed"]), Qualifier("allow_nil")],
        )

        matcher = build_matcher(expectation)

        assert isinstance(matcher, InclusionMatcher)
        assert matcher.array == ("open", "closed")
        assert matcher.nil_allowed is True

    def test_unknown_qualifier_raises(self):
        """A qualifier the matcher does not take raises."""
        expectation = Expectation(
            id="x", subject="s", matcher=MatcherName.FILTER_PARAM,
            args=["password"], qualifiers=[Qualifier("to", 1)],
        )
        with pytest.raises(MatcherConfigurationError, match="no qualifier 'to'"):
            build_matcher(expectation)

    def test_bad_qualifier_arguments_raise(self):
        """Qualifier errors become configuration errors."""
        expectation = Expectation(
            id="x", subject="s", matcher=MatcherName.ENSURE_INCLUSION_OF,
            args=["state"], qualifiers=[Qualifier("of_kind", "boolean")],
        )
        with pytest.raises(MatcherConfigurationError, match="of_kind"):
            build_matcher(expectation)


class TestSubjects:
    """Tests for resolving subject factories."""

    def test_resolve_factory(self):
        """Factories are imported from 'module:attribute'."""
        factory = resolve_factory("shouldmatch.controller.models:RouteTable")
        assert factory.__name__ == "RouteTable"

    def test_resolve_dotted_attribute(self):
        """The attribute part may be dotted."""
        factory = resolve_factory("shouldmatch.controller.models:RouteTable.add")
        assert factory.__name__ == "add"

    def test_resolve_errors(self):
        """Malformed, missing and non-callable factories raise."""
        with pytest.raises(ValueError):
            resolve_factory("no_colon")
        with pytest.raises(ModuleNotFoundError):
            resolve_factory("not_a_module_anywhere:thing")
        with pytest.raises(TypeError):
            resolve_factory("shouldmatch.config:CONFIG_ENV_VAR")

    def test_code_factories_win(self):
        """A factory passed in code is used over the suite's."""
        spec = SubjectSpec(name="issue", factory="shouldmatch.controller.models:RouteTable")
        assert isinstance(build_subject(spec, {"issue": Issue}), Issue)

    def test_missing_factory(self):
        """A subject without any factory raises LookupError."""
        with pytest.raises(LookupError, match="No factory"):
            build_subject(SubjectSpec(name="issue"))

    def test_validate_wraps_subject(self):
        """A validate method name wraps the subject in ModelSubject."""
        spec = SubjectSpec(name="record", validate="check")
        subject = build_subject(spec, {"record": Record})
        assert subject.instance.__class__ is Record


class TestRunSuite:
    """Tests for run_suite."""

    def test_full_suite(self):
        """Passing, negated and skipped expectations are all recorded."""
        suite, _ = validate_suite_yaml(VALID_SUITE)
        seen = []

        reporter = run_suite(
            suite,
            factories={"issue": Issue},
            on_result=lambda expectation, record: seen.append(expectation.id),
        )
        report = reporter.report

        statuses = {r.expectation_id: r.status for r in report.expectations}
        assert statuses == {
            "state_whitelist": ExpectationStatus.PASSED,
            "priority_range": ExpectationStatus.PASSED,
            "no_content": ExpectationStatus.PASSED,
            "user_in_session": ExpectationStatus.PASSED,
            "not_redirected": ExpectationStatus.PASSED,
            "later": ExpectationStatus.SKIPPED,
        }
        assert report.status == RunStatus.PASSED
        assert seen == [e.id for e in suite.expectations]

    def test_pass_fail_and_misconfigured(self):
        """One of each outcome gives 1/1/1 and status ERROR."""
        suite, result = validate_suite_yaml(dedent("""
            version: 1
            name: Mixed
            subjects:
              issue:
            expectations:
              - id: passes
                subject: issue
                matcher: ensure_inclusion_of
                args: [state]
                qualifiers:
                  - in_array: [open, resolved, unresolved]
              - id: fails
                subject: issue
                matcher: ensure_inclusion_of
                args: [priority]
                qualifiers:
                  - in_range: [0, 5]
              - id: misconfigured
                subject: issue
                matcher: ensure_inclusion_of
                args: [state]
        """))
        assert result.is_valid

        report = run_suite(suite, factories={"issue": Issue}).report

        assert (report.passed, report.failed, report.errors) == (1, 1, 1)
        assert report.status == RunStatus.ERROR

        failed = report.get_expectation("fails")
        assert failed.failure_message.startswith("upper boundary")
        errored = report.get_expectation("misconfigured")
        assert errored.error_message.startswith("Matcher misconfigured")

    def test_negated_pass_is_failure(self):
        """A negated expectation fails when its matcher passes."""
        suite, _ = validate_suite_yaml(dedent("""
            version: 1
            name: Negated
            subjects:
              response: "shouldmatch.controller.models:ControllerResponse"
            expectations:
              - {id: ok, subject: response, matcher: respond_with, args: [200], negate: true}
        """))

        report = run_suite(suite).report

        record = report.get_expectation("ok")
        assert record.status == ExpectationStatus.FAILED
        assert record.failure_message == "Expected not to respond with 200"

    def test_subject_errors_are_recorded(self):
        """Exceptions while building subjects become ERROR records."""
        suite, _ = validate_suite_yaml(dedent("""
            version: 1
            name: Broken subjects
            subjects:
              missing:
              crashing: {factory: "shouldmatch.controller.models:split_endpoint", args: [nope]}
            expectations:
              - {id: one, subject: missing, matcher: filter_param, args: [password]}
              - {id: two, subject: crashing, matcher: filter_param, args: [password]}
        """))

        report = run_suite(suite).report

        assert report.get_expectation("one").error_message.startswith("LookupError")
        assert report.get_expectation("two").error_message.startswith("ValueError")
        assert report.errors == 2

    def test_suite_settings_apply_during_run(self):
        """An inline settings block is active while the suite runs."""
        suite, _ = validate_suite_yaml(dedent("""
            version: 1
            name: Settings
            settings:
              messages: {inclusion: must be listed}
            subjects:
              record:
            expectations:
              - id: rank
                subject: record
                matcher: ensure_inclusion_of
                args: [rank]
                qualifiers:
                  - in_range: [1, 3]
        """))

        def factory():
            def rule(value):
                return [] if value is None or 1 <= value <= 3 else ["must be listed"]
            return Record(rules={"rank": rule})

        report = run_suite(suite, factories={"record": factory}).report
        assert report.status == RunStatus.PASSED

    def test_empty_settings_sections_keep_defaults(self):
        """Settings sections left empty in YAML fall back to the defaults."""
        suite, result = validate_suite_yaml(dedent("""
            version: 1
            name: Empty settings
            settings:
              messages:
              outside_values:
              blank_values:
            subjects:
              record:
            expectations:
              - id: rank
                subject: record
                matcher: ensure_inclusion_of
                args: [rank]
                qualifiers:
                  - in_range: [1, 3]
        """))
        assert result.is_valid, str(result)

        def factory():
            def rule(value):
                if value is None or 1 <= value <= 3:
                    return []
                return ["is not included in the list"]
            return Record(rules={"rank": rule})

        report = run_suite(suite, factories={"record": factory}).report
        assert report.status == RunStatus.PASSED

    def test_fresh_subject_per_expectation(self):
        """Each expectation gets its own subject instance."""
        suite, _ = validate_suite_yaml(dedent("""
            version: 1
            name: Fresh
            subjects:
              record:
            expectations:
              - {id: one, subject: record, matcher: allow_value, args: [open], qualifiers: [{for_attribute: state}]}
              - {id: two, subject: record, matcher: allow_value, args: [open], qualifiers: [{for_attribute: state}]}
        """))
        built = []

        def factory():
            record = Record(rules={"state": inclusion_rule(["open"])})
            built.append(record)
            return record

        run_suite(suite, factories={"record": factory})
        assert len(built) == 2
        assert built[0] is not built[1]


class TestExampleSuite:
    """Tests for the example suite shipped with the tests."""

    def test_example_suite_passes(self, suite_dir):
        """The example suite validates and every expectation passes."""
        suite, result = load_suite(suite_dir / "issue.yaml")
        assert result.is_valid, str(result)

        report = run_suite(suite).report

        failures = [r.failure_message or r.error_message for r in report.expectations if r.status != ExpectationStatus.PASSED]
        assert failures == []
        assert report.status == RunStatus.PASSED
