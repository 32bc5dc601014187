"""Test configuration validation."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config.settings import Settings, redact_api_key


def test_missing_key_and_bad_strategy_reported(monkeypatch):
    monkeypatch.setattr(Settings, "GEMINI_KEY", "")
    monkeypatch.setattr(Settings, "GENERATION_STRATEGY", "three_stage")

    errors = Settings.validate()

    assert any("GEMINI_KEY" in e for e in errors)
    assert any("GENERATION_STRATEGY" in e for e in errors)


def test_valid_configuration(monkeypatch):
    monkeypatch.setattr(Settings, "GEMINI_KEY", "AIzaSy-test-key")
    monkeypatch.setattr(Settings, "GENERATION_STRATEGY", "single_stage")
    monkeypatch.setattr(Settings, "GEMINI_TEMPERATURE", 0.7)
    monkeypatch.setattr(Settings, "PORT", 8000)

    assert Settings.validate() == []


def test_redact_api_key():
    assert redact_api_key("AIzaSy-test-key-9f3c") == "***...9f3c"
    assert redact_api_key("short") == "***INVALID***"
    assert redact_api_key("") == "***INVALID***"
