"""
Matchers for session and flash state left behind by a controller action.

Keys are plain dictionary keys, or JSONPath expressions when they start
with ``$``:

    assert_matches(response, set_session("user_id").to(42))
    assert_matches(response, set_session("$.cart.items[0].sku").to("A-1"))
    assert_matches(response, set_the_flash()["notice"].to(re.compile("saved")))
    assert_matches(response, set_the_flash().now())
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from ..matchers.base import UNSET, Matcher, MatcherConfigurationError
from ..matchers.models import MatchResult


def lookup(store: dict[str, Any], key: str) -> tuple[bool, Any]:
    """
    Find a key in a session or flash store.

    Returns:
        Tuple of (found, value)
    """
    if not key.startswith("$"):
        if key in store:
            return True, store[key]
        return False, None

    try:
        expression = parse_jsonpath(key)
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise MatcherConfigurationError(f"Invalid JSONPath expression {key!r}: {e}") from e

    matches = expression.find(store)
    if not matches:
        return False, None
    return True, matches[0].value


def value_matches(actual: Any, expected: Any) -> bool:
    if isinstance(expected, re.Pattern):
        return actual is not None and expected.search(str(actual)) is not None
    return actual == expected


def _describe_value(value: Any) -> str:
    if isinstance(value, re.Pattern):
        return f"/{value.pattern}/"
    return repr(value)


@dataclass(frozen=True)
class _StoreMatcher(Matcher):
    key: str | None = None
    expected: Any = UNSET

    store_name = "store"

    def to(self, value: Any):
        """Expect the stored value to equal ``value`` (or match a regex)."""
        return self._with(expected=value)

    def _store(self, subject: Any) -> dict[str, Any]:
        return getattr(subject, self.store_name)

    @property
    def description(self) -> str:
        text = f"set {self.store_name}"
        if self.key is not None:
            text += f"[{self.key!r}]"
        if self.expected is not UNSET:
            text += f" to {_describe_value(self.expected)}"
        return text

    def evaluate(self, subject: Any) -> MatchResult:
        store = dict(self._store(subject) or {})

        if self.key is None:
            if self.expected is UNSET:
                passed = bool(store)
            else:
                passed = any(value_matches(v, self.expected) for v in store.values())
            actual: Any = store
        else:
            found, actual = lookup(store, self.key)
            if not found:
                return MatchResult.failure(
                    message=f"Expected {self.store_name} to contain {self.key!r}",
                    description=self.description,
                    expected=self.key,
                    actual=sorted(store),
                )
            passed = self.expected is UNSET or value_matches(actual, self.expected)

        if passed:
            return MatchResult.success(
                message=f"Did {self.description}",
                description=self.description,
                actual=actual,
            )
        return MatchResult.failure(
            message=f"Expected to {self.description}",
            description=self.description,
            expected=None if self.expected is UNSET else _describe_value(self.expected),
            actual=actual,
        )


@dataclass(frozen=True)
class SetSessionMatcher(_StoreMatcher):
    store_name = "session"


@dataclass(frozen=True)
class SetTheFlashMatcher(_StoreMatcher):
    current_request: bool = False

    @property
    def store_name(self) -> str:
        return "flash_now" if self.current_request else "flash"

    def for_key(self, key: str) -> SetTheFlashMatcher:
        return self._with(key=key)

    def __getitem__(self, key: str) -> SetTheFlashMatcher:
        return self.for_key(key)

    def now(self) -> SetTheFlashMatcher:
        """Inspect the flash for the current request only."""
        return self._with(current_request=True)


def set_session(key: str | None = None) -> SetSessionMatcher:
    """Match a session entry; without a key, any session value."""
    return SetSessionMatcher(key=key)


def set_the_flash() -> SetTheFlashMatcher:
    """Match flash contents; narrow with ``["key"]`` and ``.to(...)``."""
    return SetTheFlashMatcher()
