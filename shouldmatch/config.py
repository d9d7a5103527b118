"""
Matcher settings.

Holds the values matchers fall back on when a test does not spell them out:
default validation messages, the blank-string variants probed by
``allow_blank``, and the sentinel values used to probe "outside the allowed
set". Settings can be changed in code with ``configure`` or loaded from a
YAML file, either explicitly or through the ``SHOULDMATCH_CONFIG``
environment variable.

Example settings file:

    messages:
      inclusion: "must be one of the listed values"
    outside_values:
      string: "definitely-not-allowed"
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

import yaml

if TYPE_CHECKING:
    from .suites.validation import ValidationResult

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SHOULDMATCH_CONFIG"

DEFAULT_MESSAGES = {
    "inclusion": "is not included in the list",
    "invalid": "is invalid",
    "blank": "can't be blank",
}

BLANK_VALUES = ("", " ", "\n", "\r", "\t", "\f")

OUTSIDE_VALUES = {
    "integer": 123456789,
    "decimal": Decimal("0.123456789"),
    "float": 0.123456789,
    "string": "shouldamatchersteststring",
}


@dataclass(frozen=True)
class MatcherSettings:
    """Defaults consulted by matchers at evaluation time."""
    messages: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_MESSAGES))
    blank_values: tuple[str, ...] = BLANK_VALUES
    outside_values: dict[str, Any] = field(default_factory=lambda: dict(OUTSIDE_VALUES))

    def message(self, key: str) -> str:
        """Look up a default message by key, e.g. 'inclusion'."""
        try:
            return self.messages[key]
        except KeyError:
            raise KeyError(f"No default message configured for {key!r}") from None

    def outside_value(self, kind: str) -> Any:
        return self.outside_values[kind]

    def merged(self, data: dict[str, Any]) -> MatcherSettings:
        """Return a copy with the overrides from a (validated) settings mapping."""
        messages = {**self.messages, **(data.get("messages") or {})}
        outside_values = dict(self.outside_values)
        for kind, value in (data.get("outside_values") or {}).items():
            if kind == "decimal":
                value = Decimal(str(value))
            elif kind == "float":
                value = float(value)
            outside_values[kind] = value
        blank_values = data.get("blank_values")
        blank_values = self.blank_values if blank_values is None else tuple(blank_values)
        return replace(
            self,
            messages=messages,
            outside_values=outside_values,
            blank_values=blank_values,
        )


_settings: MatcherSettings | None = None


def get_settings() -> MatcherSettings:
    """
    Return the active settings.

    On first use, loads the file named by ``SHOULDMATCH_CONFIG`` when set.
    An invalid file is logged and ignored in favour of the defaults.
    """
    global _settings
    if _settings is None:
        _settings = _settings_from_environment()
    return _settings


def configure(**overrides: Any) -> MatcherSettings:
    """
    Override settings in code.

    Accepts the same keys as a settings file: ``messages``,
    ``outside_values`` and ``blank_values``.

    Example:
        configure(messages={"inclusion": "is not allowed"})
    """
    global _settings
    result = validate_settings_data(overrides)
    if not result.is_valid:
        raise ValueError(str(result))
    _settings = get_settings().merged(overrides)
    return _settings


def reset_settings() -> None:
    """Drop any overrides; the next ``get_settings`` call starts from scratch."""
    global _settings
    _settings = None


@contextmanager
def use_settings(settings: MatcherSettings) -> Iterator[MatcherSettings]:
    """Temporarily activate the given settings."""
    global _settings
    previous = _settings
    _settings = settings
    try:
        yield settings
    finally:
        _settings = previous


def load_settings(path: str | Path) -> tuple[MatcherSettings | None, ValidationResult]:
    """
    Load and validate a settings file.

    Returns:
        Tuple of (MatcherSettings or None, ValidationResult)
        If validation fails, MatcherSettings will be None.
    """
    from .suites.validation import ValidationResult

    path = Path(path)
    result = ValidationResult()

    if not path.exists():
        result.add_error(
            str(path),
            "File not found",
            suggestion="Check the file path is correct"
        )
        return None, result

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        result.add_error(
            str(path),
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)"
        )
        return None, result

    if data is None:
        return MatcherSettings(), result

    result = validate_settings_data(data)
    if not result.is_valid:
        return None, result

    return MatcherSettings().merged(data), result


def validate_settings_data(data: Any, prefix: str = "") -> ValidationResult:
    """Check a raw settings mapping and report every problem found."""
    from .suites.validation import ValidationResult

    result = ValidationResult()
    path = prefix or "settings"

    if not isinstance(data, dict):
        result.add_error(path, "Must be an object", value=data)
        return result

    known = {"messages", "outside_values", "blank_values"}
    for key in data.keys() - known:
        result.add_error(
            _join(prefix, key),
            f"Unknown settings field '{key}'",
            suggestion=f"Valid fields are: {', '.join(sorted(known))}"
        )

    messages = data.get("messages")
    if messages is not None:
        if not isinstance(messages, dict):
            result.add_error(_join(prefix, "messages"), "Must be an object", value=messages)
        else:
            for key, text in messages.items():
                if not isinstance(text, str):
                    result.add_error(
                        _join(prefix, f"messages.{key}"),
                        "Message must be a string",
                        value=text
                    )

    outside_values = data.get("outside_values")
    if outside_values is not None:
        if not isinstance(outside_values, dict):
            result.add_error(
                _join(prefix, "outside_values"), "Must be an object", value=outside_values
            )
        else:
            _validate_outside_values(result, prefix, outside_values)

    blank_values = data.get("blank_values")
    if blank_values is not None:
        if not isinstance(blank_values, (list, tuple)) or not all(
            isinstance(v, str) for v in blank_values
        ):
            result.add_error(
                _join(prefix, "blank_values"),
                "Must be a list of strings",
                value=blank_values
            )

    return result


def _validate_outside_values(result: ValidationResult, prefix: str, values: dict) -> None:
    for kind, value in values.items():
        path = _join(prefix, f"outside_values.{kind}")
        if kind not in OUTSIDE_VALUES:
            result.add_error(
                path,
                "Unknown value kind",
                value=kind,
                suggestion=f"Valid kinds: {', '.join(sorted(OUTSIDE_VALUES))}"
            )
        elif kind == "integer" and (isinstance(value, bool) or not isinstance(value, int)):
            result.add_error(path, "Must be an integer", value=value)
        elif kind == "decimal":
            try:
                Decimal(str(value))
            except InvalidOperation:
                result.add_error(path, "Must be a decimal number", value=value)
        elif kind == "float" and (isinstance(value, bool) or not isinstance(value, (int, float))):
            result.add_error(path, "Must be a number", value=value)
        elif kind == "string" and not isinstance(value, str):
            result.add_error(path, "Must be a string", value=value)


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _settings_from_environment() -> MatcherSettings:
    path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return MatcherSettings()

    settings, result = load_settings(path)
    if settings is None:
        logger.warning("Ignoring %s=%s:\n%s", CONFIG_ENV_VAR, path, result)
        return MatcherSettings()

    logger.debug("Loaded matcher settings from %s", path)
    return settings
