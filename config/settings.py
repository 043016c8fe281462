"""
Configuration Settings for the Moderation Core

This module centralizes all configuration settings for the moderation core,
including environment variables, secrets, the board registry and
application constants.
"""

import os
import json
from pathlib import Path
from dotenv import load_dotenv

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


# =============================================================================
# Secrets
# =============================================================================

SECURE_TRIPCODE_SALT = os.getenv("MB_SECURE_TRIPCODE_SALT", "")

# hCaptcha
CAPTCHA_ENABLED = _env_bool("MB_CAPTCHA_ENABLED")
HCAPTCHA_SECRET = os.getenv("MB_CAPTCHA_HCAPTCHA_SECRET", "")
HCAPTCHA_VERIFY_URL = "https://hcaptcha.com/siteverify"
HCAPTCHA_RESPONSE_FIELD = "h-captcha-response"
CAPTCHA_TIMEOUT = _env_int("MB_CAPTCHA_TIMEOUT", 10)  # Seconds

# =============================================================================
# Request Settings
# =============================================================================

CLOUDFLARE = _env_bool("MB_CLOUDFLARE")  # Trust HTTP_CF_CONNECTING_IP
URL_FETCH_TIMEOUT = 10                   # Seconds for url_get_contents

# =============================================================================
# Storage Settings
# =============================================================================

# Stored file/thumb paths ("/src/123.png") are relative to this directory
UPLOAD_ROOT = os.getenv("MB_UPLOAD_ROOT", str(APP_ROOT))
STATIC_THUMB_MARKER = "/static/"         # Built-in thumbnails, never unlinked

# =============================================================================
# Content Processing Settings
# =============================================================================

PASSWORD_BCRYPT_ROUNDS = 10
DEFAULT_TRUNCATE_BREAKS = 15             # Line breaks kept before truncating

# =============================================================================
# Logging
# =============================================================================

LOG_FILE = os.getenv("MB_LOG_FILE", "")

# =============================================================================
# Board Registry
# =============================================================================

def _load_boards(path: str) -> dict:
    if not path:
        return {}
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


# board_id -> {"anonymous": "Anonymous", "truncate": 15, ...}
BOARDS_FILE = os.getenv("MB_BOARDS_FILE", "")
BOARDS = _load_boards(BOARDS_FILE)
