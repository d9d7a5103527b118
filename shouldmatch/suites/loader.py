"""
Suite loader.

This module provides the public API for loading and validating
suite files from disk or YAML strings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .models import Suite
from .parser import SuiteParser
from .validation import SuiteValidator, ValidationResult

logger = logging.getLogger(__name__)


def load_suite(path: str | Path) -> tuple[Suite | None, ValidationResult]:
    """
    Load and validate a suite from a YAML file.

    Args:
        path: Path to the YAML suite file

    Returns:
        Tuple of (Suite or None, ValidationResult)
        If validation fails, Suite will be None.

    Example:
        suite, result = load_suite("suites/issue.yaml")
        if not result.is_valid:
            print(result)
            sys.exit(1)
        # Use suite...
    """
    path = Path(path)

    if not path.exists():
        result = ValidationResult()
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
        result = ValidationResult()
        result.add_error(
            str(path),
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)"
        )
        return None, result

    return _validate_and_parse(data, str(path))


def validate_suite_yaml(yaml_string: str) -> tuple[Suite | None, ValidationResult]:
    """
    Validate a suite from a YAML string (useful for testing).

    Args:
        yaml_string: YAML content as a string

    Returns:
        Tuple of (Suite or None, ValidationResult)
    """
    try:
        data = yaml.safe_load(yaml_string)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error("yaml", f"Invalid YAML syntax: {e}")
        return None, result

    return _validate_and_parse(data, "yaml")


def _validate_and_parse(data: Any, source: str) -> tuple[Suite | None, ValidationResult]:
    if not isinstance(data, dict):
        result = ValidationResult()
        result.add_error(
            source,
            "Content must be a YAML object (not a list or scalar)",
            value=type(data).__name__
        )
        return None, result

    result = SuiteValidator(data).validate()
    if not result.is_valid:
        logger.warning("Suite %s failed validation with %d error(s)", source, len(result.errors))
        return None, result

    return SuiteParser(data).parse(), result
