"""
Centralized configuration with environment variable overrides.

Provider credentials, the default country hint for phone lookups and the
booking lead-time rules are all configurable here. Nothing is hardcoded
in pipeline or tool logic.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class MessagingConfig:
    """MessageBird credentials and outbound messaging settings."""

    api_key: str = os.getenv("MESSAGEBIRD_API_KEY", "")
    base_url: str = os.getenv("MESSAGEBIRD_BASE_URL", "https://rest.messagebird.com")
    country_code: str = os.getenv("COUNTRY_CODE", "NL")
    originator: str = os.getenv("REMINDER_ORIGINATOR", "BeautyBird")
    timeout_sec: float = _safe_float("PROVIDER_TIMEOUT_SECONDS", "10.0")


@dataclass(frozen=True)
class BookingConfig:
    """Lead-time rules and the time zone appointments are booked in."""

    timezone: str = os.getenv("TIMEZONE", "")
    reminder_lead_minutes: int = _safe_int("REMINDER_LEAD_MINUTES", "180")
    slack_minutes: int = _safe_int("BOOKING_SLACK_MINUTES", "5")
    default_form_offset_minutes: int = _safe_int("DEFAULT_FORM_OFFSET_MINUTES", "190")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    messaging: MessagingConfig = field(default_factory=MessagingConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "beautybird-booking")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.messaging.timeout_sec <= 0:
        raise ValueError(
            f"PROVIDER_TIMEOUT_SECONDS must be > 0, got {config.messaging.timeout_sec}"
        )
    if config.messaging.country_code and not re.fullmatch(
        r"[A-Za-z]{2}", config.messaging.country_code
    ):
        raise ValueError(
            "COUNTRY_CODE must be empty or a two-letter country code, "
            f"got {config.messaging.country_code!r}"
        )
    if not config.messaging.originator:
        raise ValueError("REMINDER_ORIGINATOR must not be empty")
    if config.booking.reminder_lead_minutes < 1:
        raise ValueError(
            f"REMINDER_LEAD_MINUTES must be >= 1, got {config.booking.reminder_lead_minutes}"
        )
    if config.booking.slack_minutes < 0:
        raise ValueError(
            f"BOOKING_SLACK_MINUTES must be >= 0, got {config.booking.slack_minutes}"
        )

    earliest = config.booking.reminder_lead_minutes + config.booking.slack_minutes
    if config.booking.default_form_offset_minutes < earliest:
        raise ValueError(
            "DEFAULT_FORM_OFFSET_MINUTES must be >= REMINDER_LEAD_MINUTES + "
            f"BOOKING_SLACK_MINUTES ({earliest}), "
            f"got {config.booking.default_form_offset_minutes}"
        )

    if config.booking.timezone:
        try:
            ZoneInfo(config.booking.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown TIMEZONE: {config.booking.timezone!r}") from None


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if not config.messaging.api_key:
        logger.warning("MESSAGEBIRD_API_KEY is not set; provider calls will be rejected")
    logger.info("Configuration loaded for '%s'", config.service_name)
    return config


# Singleton instance
settings = load_config()
