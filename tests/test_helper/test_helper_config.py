"""Tests for environment-backed configuration."""

import pytest


def test_string_value_and_default(monkeypatch, helper_config):
    monkeypatch.setenv("SOME_KEY", "  value ")
    monkeypatch.delenv("OTHER_KEY", raising=False)

    assert helper_config.get_string_val("some_key") == "value"
    assert helper_config.get_string_val("OTHER_KEY", default="") == ""
    with pytest.raises(ValueError):
        helper_config.get_string_val("OTHER_KEY")


def test_number_value(monkeypatch, helper_config):
    monkeypatch.setenv("PAGE_SIZE", "25")
    monkeypatch.setenv("TIMEOUT", "2.5")
    monkeypatch.setenv("BROKEN", "ten")

    assert helper_config.get_number_val("PAGE_SIZE") == 25
    assert helper_config.get_number_val("TIMEOUT") == 2.5
    with pytest.raises(ValueError):
        helper_config.get_number_val("BROKEN")


def test_bool_value(monkeypatch, helper_config):
    monkeypatch.setenv("FLAG_ON", "Yes")
    monkeypatch.setenv("FLAG_OFF", "0")
    monkeypatch.delenv("FLAG_UNSET", raising=False)

    assert helper_config.get_bool_val("FLAG_ON") is True
    assert helper_config.get_bool_val("FLAG_OFF") is False
    assert helper_config.get_bool_val("FLAG_UNSET", default=True) is True


def test_list_value(monkeypatch, helper_config):
    monkeypatch.setenv("ENGINES", "[elasticsearch, opensearch ,]")
    monkeypatch.setenv("EMPTY", "[]")
    monkeypatch.setenv("BAD", "elasticsearch")
    monkeypatch.delenv("MISSING", raising=False)

    assert helper_config.get_list_val("ENGINES") == ["elasticsearch", "opensearch"]
    assert helper_config.get_list_val("EMPTY") == []
    assert helper_config.get_list_val("MISSING", default=["x"]) == ["x"]
    with pytest.raises(ValueError):
        helper_config.get_list_val("BAD")
    with pytest.raises(ValueError):
        helper_config.get_list_val("MISSING")


def test_blank_value_falls_back_to_default(monkeypatch, helper_config):
    monkeypatch.setenv("BLANK", "   ")

    assert helper_config.get_string_val("BLANK", default="fallback") == "fallback"
    assert helper_config.get_number_val("BLANK", default=7) == 7
    with pytest.raises(ValueError):
        helper_config.get_bool_val("BLANK")
