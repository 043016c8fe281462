"""
Configuration Validation for the Moderation Core

This module contains configuration validation logic.
Kept apart from settings.py so importing settings never raises.
"""

import logging

from utils.exceptions import ConfigurationError


def validate_settings():
    """
    Validate that all required settings are properly configured.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings

    errors = []
    logger = logging.getLogger(__name__)

    if not settings.SECURE_TRIPCODE_SALT:
        errors.append("Missing required environment variable: MB_SECURE_TRIPCODE_SALT")

    if settings.CAPTCHA_ENABLED and not settings.HCAPTCHA_SECRET:
        errors.append("MB_CAPTCHA_ENABLED is true but MB_CAPTCHA_HCAPTCHA_SECRET is not configured.")

    if not settings.CLOUDFLARE:
        logger.debug("MB_CLOUDFLARE disabled, logging REMOTE_ADDR for moderation actions")

    # Validate timeout values are positive
    timeout_settings = [
        ("CAPTCHA_TIMEOUT", settings.CAPTCHA_TIMEOUT),
        ("URL_FETCH_TIMEOUT", settings.URL_FETCH_TIMEOUT),
    ]

    for name, value in timeout_settings:
        if value <= 0:
            errors.append(f"{name} must be positive, got {value}")

    if not 4 <= settings.PASSWORD_BCRYPT_ROUNDS <= 31:
        errors.append(f"PASSWORD_BCRYPT_ROUNDS must be between 4 and 31, got {settings.PASSWORD_BCRYPT_ROUNDS}")

    # Validate every board entry has the keys rebuild depends on
    for board_id, cfg in settings.BOARDS.items():
        if "anonymous" not in cfg:
            errors.append(f"Board /{board_id}/ is missing 'anonymous'")
        truncate = cfg.get("truncate")
        if not isinstance(truncate, int) or truncate < 0:
            errors.append(f"Board /{board_id}/ 'truncate' must be a non-negative integer, got {truncate!r}")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration (without sensitive values).
    Useful for logging startup state.
    """
    # Import settings here to avoid circular imports
    from config import settings

    return {
        "secrets": {
            "secure_tripcode_salt": bool(settings.SECURE_TRIPCODE_SALT),
            "hcaptcha_secret": bool(settings.HCAPTCHA_SECRET),
        },
        "captcha": {
            "enabled": settings.CAPTCHA_ENABLED,
            "timeout": settings.CAPTCHA_TIMEOUT,
        },
        "request": {
            "cloudflare": settings.CLOUDFLARE,
        },
        "storage": {
            "upload_root": settings.UPLOAD_ROOT,
        },
        "boards": sorted(settings.BOARDS.keys()),
    }
