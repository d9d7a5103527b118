"""Unit tests for matcher settings.

Tests defaults, in-code overrides, settings files and the environment
variable.
"""

import logging
from decimal import Decimal

import pytest

from shouldmatch.config import (
    BLANK_VALUES,
    CONFIG_ENV_VAR,
    DEFAULT_MESSAGES,
    MatcherSettings,
    configure,
    get_settings,
    load_settings,
    reset_settings,
    use_settings,
    validate_settings_data,
)


class TestDefaults:
    """Tests for the default settings."""

    def test_default_messages(self):
        """The inclusion default is the framework's standard message."""
        settings = get_settings()
        assert settings.message("inclusion") == "is not included in the list"
        assert settings.messages == DEFAULT_MESSAGES

    def test_default_blank_values(self):
        """Blank probes cover the empty string and single whitespace chars."""
        assert get_settings().blank_values == ("", " ", "\n", "\r", "\t", "\f")
        assert BLANK_VALUES == get_settings().blank_values

    def test_default_outside_values(self):
        """Sentinels exist for every value kind."""
        settings = get_settings()
        assert settings.outside_value("string") == "shouldamatchersteststring"
        assert settings.outside_value("integer") == 123456789
        assert settings.outside_value("decimal") == Decimal("0.123456789")
        assert settings.outside_value("float") == 0.123456789

    def test_unknown_message_key(self):
        """Looking up an unconfigured message raises KeyError."""
        with pytest.raises(KeyError, match="nonsense"):
            get_settings().message("nonsense")


class TestConfigure:
    """Tests for configure, reset_settings and use_settings."""

    def test_overrides_are_merged(self):
        """configure replaces only the keys given."""
        configure(messages={"inclusion": "must be listed"})

        settings = get_settings()
        assert settings.message("inclusion") == "must be listed"
        assert settings.message("blank") == "can't be blank"

    def test_decimal_override_is_coerced(self):
        """Decimal sentinels given as numbers become Decimals."""
        configure(outside_values={"decimal": 0.5})
        assert get_settings().outside_value("decimal") == Decimal("0.5")

    def test_float_override(self):
        """Float sentinels accept any number and are stored as floats."""
        configure(outside_values={"float": 2})
        assert get_settings().outside_value("float") == 2.0
        assert isinstance(get_settings().outside_value("float"), float)

        with pytest.raises(ValueError, match="outside_values.float"):
            configure(outside_values={"float": "half"})

    def test_invalid_overrides_raise(self):
        """Invalid overrides raise ValueError listing the problems."""
        with pytest.raises(ValueError, match="outside_values.integer"):
            configure(outside_values={"integer": "many"})
        with pytest.raises(ValueError, match="Unknown settings field"):
            configure(colors=True)

    def test_reset(self):
        """reset_settings drops overrides."""
        configure(blank_values=[""])
        reset_settings()
        assert get_settings().blank_values == BLANK_VALUES

    def test_use_settings_restores(self):
        """use_settings is temporary."""
        custom = MatcherSettings().merged({"messages": {"inclusion": "nope"}})
        with use_settings(custom):
            assert get_settings().message("inclusion") == "nope"
        assert get_settings().message("inclusion") == "is not included in the list"


class TestSettingsFiles:
    """Tests for load_settings and SHOULDMATCH_CONFIG."""

    def test_load_valid_file(self, tmp_path):
        """A valid file is merged over the defaults."""
        path = tmp_path / "settings.yaml"
        path.write_text(
            "messages:\n"
            "  inclusion: must be one of the listed values\n"
            "outside_values:\n"
            "  string: definitely-not-allowed\n"
        )

        settings, result = load_settings(path)

        assert result.is_valid
        assert settings.message("inclusion") == "must be one of the listed values"
        assert settings.outside_value("string") == "definitely-not-allowed"
        assert settings.outside_value("integer") == 123456789

    def test_empty_file_gives_defaults(self, tmp_path):
        """An empty file means default settings."""
        path = tmp_path / "settings.yaml"
        path.write_text("")
        settings, result = load_settings(path)
        assert result.is_valid
        assert settings == MatcherSettings()

    def test_empty_sections_give_defaults(self, tmp_path):
        """Sections present but left empty keep their defaults."""
        path = tmp_path / "settings.yaml"
        path.write_text("messages:\noutside_values:\nblank_values:\n")

        settings, result = load_settings(path)

        assert result.is_valid
        assert settings == MatcherSettings()

    def test_empty_blank_values_list_is_kept(self):
        """An explicit empty list disables blank probes."""
        settings = MatcherSettings().merged({"blank_values": []})
        assert settings.blank_values == ()

    def test_missing_file(self, tmp_path):
        """A missing file is reported, not raised."""
        settings, result = load_settings(tmp_path / "missing.yaml")
        assert settings is None
        assert "File not found" in str(result)

    def test_invalid_yaml(self, tmp_path):
        """Broken YAML is reported."""
        path = tmp_path / "settings.yaml"
        path.write_text("messages: [unclosed\n")
        settings, result = load_settings(path)
        assert settings is None
        assert "Invalid YAML syntax" in str(result)

    def test_invalid_values_all_reported(self, tmp_path):
        """Every problem in a file is reported."""
        path = tmp_path / "settings.yaml"
        path.write_text(
            "messages:\n"
            "  inclusion: 3\n"
            "outside_values:\n"
            "  boolean: true\n"
            "  decimal: abc\n"
            "blank_values: nope\n"
        )

        settings, result = load_settings(path)

        assert settings is None
        paths = sorted(error.path for error in result.errors)
        assert paths == [
            "blank_values",
            "messages.inclusion",
            "outside_values.boolean",
            "outside_values.decimal",
        ]

    def test_environment_variable(self, tmp_path, monkeypatch):
        """SHOULDMATCH_CONFIG is loaded on first use."""
        path = tmp_path / "settings.yaml"
        path.write_text("messages:\n  inclusion: is not allowed\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        reset_settings()

        assert get_settings().message("inclusion") == "is not allowed"

    def test_invalid_environment_file_falls_back(self, tmp_path, monkeypatch, caplog):
        """An invalid file named in the environment is logged and ignored."""
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.yaml"))
        reset_settings()

        with caplog.at_level(logging.WARNING, logger="shouldmatch.config"):
            settings = get_settings()

        assert settings == MatcherSettings()
        assert CONFIG_ENV_VAR in caplog.text

    def test_validate_with_prefix(self):
        """Paths are prefixed when settings are nested in a suite."""
        result = validate_settings_data({"messages": []}, prefix="settings")
        assert [error.path for error in result.errors] == ["settings.messages"]

        result = validate_settings_data(["not", "a", "mapping"], prefix="settings")
        assert result.errors[0].message == "Must be an object"
