from __future__ import annotations

import logging

from eastwest.config import EmailConfig, SiteConfig, check_session_config


class TestCheckSessionConfig:
    def test_strong_secret(self):
        assert check_session_config(SiteConfig(session_secret="k" * 40)) is True

    def test_empty_secret(self, caplog):
        with caplog.at_level(logging.ERROR):
            assert check_session_config(SiteConfig(session_secret="")) is False
        assert "not configured" in caplog.text

    def test_placeholder_secret(self, caplog):
        for secret in (
            "eastwest-secret-change-in-production",
            "your_session_secret_goes_here_please_0000",
            "placeholder-placeholder-placeholder-00",
        ):
            assert check_session_config(SiteConfig(session_secret=secret)) is False
        assert "placeholder" in caplog.text

    def test_short_secret(self, caplog):
        with caplog.at_level(logging.ERROR):
            assert check_session_config(SiteConfig(session_secret="short")) is False
        assert "32" in caplog.text


def test_email_provider_flags():
    assert EmailConfig(resend_api_key="re_x").resend_configured
    assert not EmailConfig(resend_api_key="").resend_configured
    smtp = EmailConfig(smtp_host="h", smtp_port=587, smtp_user="u", smtp_password="p")
    assert smtp.smtp_configured
    assert not EmailConfig(smtp_host="h", smtp_user="", smtp_password="p").smtp_configured


def test_site_defaults():
    config = SiteConfig()
    assert config.protected_prefix == "/protected"
    assert config.login_path == "/login"
    assert config.dashboard_path == "/dashboard"
    assert config.content_paths == ("gallery", "reservations", "menu")
    assert config.data_fetch_param == "_rsc"
