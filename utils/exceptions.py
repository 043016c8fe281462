"""
Custom Exception Classes for the Moderation Core

This module defines custom exceptions for better error handling and
categorization of failures across the application. Every exception carries
an HTTP-style status code so the routing layer can map it to a response.
"""


class ModerationCoreError(Exception):
    """Base exception for all moderation core errors."""
    status_code = 500


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(ModerationCoreError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Request Errors
# =============================================================================

class ValidationError(ModerationCoreError):
    """Raised when input is missing, has the wrong type or is out of range."""
    status_code = 400


class CaptchaError(ValidationError):
    """Raised when captcha verification fails."""
    pass


class NotFoundError(ModerationCoreError):
    """Raised when a board or other top-level resource does not exist."""
    status_code = 404


# =============================================================================
# Authentication Errors
# =============================================================================

class AuthError(ModerationCoreError):
    """Raised when an operation requires a logged-in staff identity."""
    status_code = 401


class InternalError(ModerationCoreError):
    """Raised when a one-way hash function fails unexpectedly."""
    pass
