"""Tests for configuration loading and validation."""

import pytest

from beautybird.config import AppConfig, BookingConfig, MessagingConfig, _validate_config


def _config(**sections) -> AppConfig:
    return AppConfig(
        messaging=sections.get("messaging", MessagingConfig()),
        booking=sections.get("booking", BookingConfig(timezone="")),
    )


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        _validate_config(_config())  # should not raise

    def test_defaults_match_reference_behavior(self):
        config = _config()
        assert config.booking.reminder_lead_minutes == 180
        assert config.booking.slack_minutes == 5
        assert config.messaging.originator == "BeautyBird"

    def test_invalid_timeout(self):
        with pytest.raises(ValueError, match="PROVIDER_TIMEOUT_SECONDS"):
            _validate_config(_config(messaging=MessagingConfig(timeout_sec=0)))

    @pytest.mark.parametrize("country_code", ["NLD", "3", "N1"])
    def test_invalid_country_code(self, country_code):
        with pytest.raises(ValueError, match="COUNTRY_CODE"):
            _validate_config(_config(messaging=MessagingConfig(country_code=country_code)))

    def test_empty_country_code_allowed(self):
        _validate_config(_config(messaging=MessagingConfig(country_code="")))  # should not raise

    def test_empty_originator(self):
        with pytest.raises(ValueError, match="REMINDER_ORIGINATOR"):
            _validate_config(_config(messaging=MessagingConfig(originator="")))

    def test_invalid_reminder_lead(self):
        booking = BookingConfig(timezone="", reminder_lead_minutes=0)
        with pytest.raises(ValueError, match="REMINDER_LEAD_MINUTES"):
            _validate_config(_config(booking=booking))

    def test_negative_slack(self):
        booking = BookingConfig(timezone="", slack_minutes=-1)
        with pytest.raises(ValueError, match="BOOKING_SLACK_MINUTES"):
            _validate_config(_config(booking=booking))

    def test_form_offset_below_earliest(self):
        booking = BookingConfig(
            timezone="", reminder_lead_minutes=180, slack_minutes=5,
            default_form_offset_minutes=184,
        )
        with pytest.raises(ValueError, match="DEFAULT_FORM_OFFSET_MINUTES"):
            _validate_config(_config(booking=booking))

    def test_unknown_timezone(self):
        booking = BookingConfig(timezone="Mars/Olympus_Mons")
        with pytest.raises(ValueError, match="TIMEZONE"):
            _validate_config(_config(booking=booking))

    def test_safe_int_parsing(self):
        from beautybird.config import _safe_int

        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_bad_value(self, monkeypatch):
        from beautybird.config import _safe_int

        monkeypatch.setenv("BEAUTYBIRD_TEST_INT", "three")
        with pytest.raises(ValueError, match="BEAUTYBIRD_TEST_INT"):
            _safe_int("BEAUTYBIRD_TEST_INT", "1")

    def test_safe_float_parsing(self):
        from beautybird.config import _safe_float

        assert _safe_float("NONEXISTENT_VAR_12345", "2.5") == pytest.approx(2.5)
