"""
Subjects for validation matchers.

Validation matchers never talk to a model layer directly. They go through
the ``Validatable`` contract, which any model can implement, or through
``ModelSubject``, which adapts plain objects that expose a validation method
and an ``errors`` mapping.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Protocol, runtime_checkable


class ValueKind(str, Enum):
    """Closed set of attribute value kinds used to pick an outside value."""
    INTEGER = "integer"
    DECIMAL = "decimal"
    FLOAT = "float"
    STRING = "string"


def infer_value_kind(value: Any) -> ValueKind:
    """Classify an attribute's current value."""
    # bool is an int subclass but never an integer attribute
    if isinstance(value, int) and not isinstance(value, bool):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, Decimal):
        return ValueKind.DECIMAL
    return ValueKind.STRING


@runtime_checkable
class Validatable(Protocol):
    """Capability a subject must offer to validation matchers."""

    def set_attribute(self, name: str, value: Any) -> None:
        ...

    def get_attribute(self, name: str) -> Any:
        ...

    def errors_for(self, name: str) -> list[str]:
        """Run validation and return the messages recorded for one attribute."""
        ...


class ModelSubject:
    """
    Adapt a plain object to ``Validatable``.

    Attributes are written with ``setattr``. Validation calls ``validate``
    (a method name on the instance, or a callable taking the instance).
    Errors come from the validation's return value when it is a mapping of
    attribute -> messages, otherwise from ``instance.errors``.

    Example:
        class Issue:
            def __init__(self):
                self.state = None
                self.errors = {}

            def validate(self):
                self.errors = {}
                if self.state not in ("open", "closed"):
                    self.errors["state"] = ["is not included in the list"]

        subject = ModelSubject(Issue())
    """

    def __init__(
        self,
        instance: Any,
        validate: str | Callable[[Any], Any] = "validate",
        errors_attribute: str = "errors",
    ):
        self.instance = instance
        self._validate = validate
        self._errors_attribute = errors_attribute

    def set_attribute(self, name: str, value: Any) -> None:
        setattr(self.instance, name, value)

    def get_attribute(self, name: str) -> Any:
        return getattr(self.instance, name, None)

    def errors_for(self, name: str) -> list[str]:
        if callable(self._validate):
            outcome = self._validate(self.instance)
        else:
            outcome = getattr(self.instance, self._validate)()

        if isinstance(outcome, Mapping):
            errors = outcome
        else:
            errors = getattr(self.instance, self._errors_attribute, None) or {}

        messages = errors.get(name) or []
        if isinstance(messages, str):
            return [messages]
        return [str(m) for m in messages]

    def __repr__(self) -> str:
        return f"ModelSubject({self.instance!r})"


def as_subject(obj: Any) -> Validatable:
    """Return ``obj`` if it already implements ``Validatable``, else wrap it."""
    if isinstance(obj, Validatable):
        return obj
    return ModelSubject(obj)
