"""Tests for src/config/settings.py — Settings and allowed_origins_list."""

import pytest
from pydantic import ValidationError


class TestSettings:

    def test_defaults(self, override_settings):
        s = override_settings()
        assert s.client_map == ""
        assert s.client_id == ""
        assert s.client_secret == ""
        assert s.allowed_origins_list == []
        assert s.log_level == "INFO"
        assert s.audit_log_file == ""

    def test_env_override(self, override_settings):
        s = override_settings(
            CLIENT_MAP='{"abc":"secret1"}',
            CLIENT_ID="abc",
            CLIENT_SECRET="secret1",
        )
        assert s.client_map == '{"abc":"secret1"}'
        assert s.client_id == "abc"
        assert s.client_secret == "secret1"

    def test_allowed_origins_single(self, override_settings):
        s = override_settings(ALLOWED_ORIGINS="https://a.example.com")
        assert s.allowed_origins_list == ["https://a.example.com"]

    def test_allowed_origins_multiple(self, override_settings):
        s = override_settings(ALLOWED_ORIGINS="https://a.example.com , https://b.example.com")
        assert s.allowed_origins_list == ["https://a.example.com", "https://b.example.com"]

    def test_allowed_origins_strips_empty(self, override_settings):
        s = override_settings(ALLOWED_ORIGINS=",https://a.example.com,, ,")
        assert s.allowed_origins_list == ["https://a.example.com"]

    def test_settings_are_immutable(self, override_settings):
        s = override_settings(CLIENT_ID="abc")
        with pytest.raises(ValidationError):
            s.client_id = "other"
