"""
Matchers for what a controller action responded with.

All of these take a ``ControllerResponse`` (or any object with the same
attributes) as their subject.

    assert_matches(response, respond_with("success"))
    assert_matches(response, redirect_to("/users/42"))
    assert_matches(response, render_template("users/new"))
    assert_does_not_match(response, render_with_layout())
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any
from urllib.parse import urlsplit

from ..matchers.base import Matcher, MatcherConfigurationError
from ..matchers.models import MatchResult

# Symbolic names covering a family of status codes
STATUS_GROUPS = {
    "success": range(200, 300),
    "redirect": range(300, 400),
    "missing": range(404, 405),
    "error": range(500, 600),
}


def resolve_status(status: int | str) -> range:
    """Turn an expected status (code or symbol) into the codes it accepts."""
    if isinstance(status, bool):
        raise MatcherConfigurationError(f"Invalid status: {status!r}")
    if isinstance(status, str) and status.isdigit():
        status = int(status)
    if isinstance(status, int):
        return range(status, status + 1)
    if isinstance(status, str):
        name = status.lower()
        if name in STATUS_GROUPS:
            return STATUS_GROUPS[name]
        try:
            code = HTTPStatus[name.upper()].value
        except KeyError:
            raise MatcherConfigurationError(
                f"Unknown status {status!r}. Use a code, one of "
                f"{', '.join(STATUS_GROUPS)} or an HTTPStatus name like 'not_found'"
            ) from None
        return range(code, code + 1)
    raise MatcherConfigurationError(f"Invalid status: {status!r}")


@dataclass(frozen=True)
class RespondWithMatcher(Matcher):
    expected: int | str
    codes: range

    @property
    def description(self) -> str:
        return f"respond with {self.expected}"

    def evaluate(self, subject: Any) -> MatchResult:
        actual = subject.status
        if actual in self.codes:
            return MatchResult.success(
                message=f"Responded with {actual}",
                description=self.description,
                actual=actual,
            )
        return MatchResult.failure(
            message=f"Expected response to be {self.expected}, but was {actual}",
            description=self.description,
            expected=self.expected,
            actual=actual,
        )


def respond_with(status: int | str) -> RespondWithMatcher:
    """Match the response status against a code or a symbol like 'success'."""
    return RespondWithMatcher(expected=status, codes=resolve_status(status))


@dataclass(frozen=True)
class RedirectToMatcher(Matcher):
    url: str

    @property
    def description(self) -> str:
        return f"redirect to {self.url}"

    def evaluate(self, subject: Any) -> MatchResult:
        location = _redirect_location(subject)
        if subject.status not in STATUS_GROUPS["redirect"] or not location:
            return MatchResult.failure(
                message=f"Expected a redirect to {self.url}, but response was {subject.status}",
                description=self.description,
                expected=self.url,
                actual=location,
                details={"status": subject.status},
            )

        if _same_location(location, self.url):
            return MatchResult.success(
                message=f"Redirected to {location}",
                description=self.description,
                actual=location,
            )
        return MatchResult.failure(
            message=f"Expected redirect to {self.url}, got redirect to {location}",
            description=self.description,
            expected=self.url,
            actual=location,
        )


def redirect_to(url: str) -> RedirectToMatcher:
    """Match a redirect; a path-only URL ignores the scheme and host."""
    return RedirectToMatcher(url=url)


def _redirect_location(subject: Any) -> str | None:
    # Lookalike subjects may only carry ``location``
    location = getattr(subject, "redirect_location", None)
    return location if location is not None else subject.location


def _same_location(actual: str, expected: str) -> bool:
    if actual == expected:
        return True
    want = urlsplit(expected)
    got = urlsplit(actual)
    if want.netloc:
        return False
    if want.query:
        return (got.path, got.query) == (want.path, want.query)
    return got.path == want.path


def _same_template(actual: str | None, expected: str) -> bool:
    # "users/new" also matches "users/new.html"
    return actual is not None and (actual == expected or actual.startswith(f"{expected}."))


@dataclass(frozen=True)
class RenderTemplateMatcher(Matcher):
    template: str

    @property
    def description(self) -> str:
        return f"render template {self.template}"

    def evaluate(self, subject: Any) -> MatchResult:
        rendered = list(subject.templates)
        if any(_same_template(t, self.template) for t in rendered):
            return MatchResult.success(
                message=f"Rendered {self.template}",
                description=self.description,
                actual=rendered,
            )
        return MatchResult.failure(
            message=f"Expected {self.template} to be rendered",
            description=self.description,
            expected=self.template,
            actual=rendered or "<nothing rendered>",
        )


def render_template(template: str) -> RenderTemplateMatcher:
    return RenderTemplateMatcher(template=template)


@dataclass(frozen=True)
class RenderWithLayoutMatcher(Matcher):
    layout: str | None = None

    @property
    def description(self) -> str:
        if self.layout is None:
            return "render with a layout"
        return f"render with the {self.layout} layout"

    def evaluate(self, subject: Any) -> MatchResult:
        actual = subject.layout
        if self.layout is None:
            rendered = actual is not None
        else:
            rendered = _same_template(actual, self.layout)

        if rendered:
            return MatchResult.success(
                message=f"Rendered with layout {actual}",
                description=self.description,
                actual=actual,
            )
        return MatchResult.failure(
            message=f"Expected to {self.description}, but "
                    + (f"rendered with {actual}" if actual else "rendered without a layout"),
            description=self.description,
            expected=self.layout or "any layout",
            actual=actual,
        )


def render_with_layout(layout: str | None = None) -> RenderWithLayoutMatcher:
    """Match any layout, or the named one."""
    return RenderWithLayoutMatcher(layout=layout)
