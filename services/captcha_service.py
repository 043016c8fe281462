"""
Captcha Service Module

This module validates hCaptcha tokens submitted with user forms by posting
them to the hCaptcha verification endpoint.
"""

from typing import Any, Mapping, Optional

import requests

from config import settings
from utils.exceptions import CaptchaError
from utils.logger import get_logger

logger = get_logger(__name__)


class HCaptchaVerifier:
    """Service for server-side hCaptcha verification."""

    def __init__(self, secret: Optional[str] = None, verify_url: Optional[str] = None,
                 timeout: Optional[int] = None):
        """Initialize the verifier from settings unless overridden."""
        self.secret = secret if secret is not None else settings.HCAPTCHA_SECRET
        self.verify_url = verify_url or settings.HCAPTCHA_VERIFY_URL
        self.timeout = timeout or settings.CAPTCHA_TIMEOUT
        self.response_field = settings.HCAPTCHA_RESPONSE_FIELD

    def validate(self, form: Mapping[str, Any]) -> None:
        """
        Validate the captcha token in a submitted form.

        Args:
            form: The submitted form data.

        Raises:
            CaptchaError: If the token is missing, the endpoint cannot be
                reached or the token is rejected.
        """
        token = form.get(self.response_field)
        if token is None:
            raise CaptchaError(f"{self.response_field} not found in input form data")

        try:
            response = requests.post(
                self.verify_url,
                data={'secret': self.secret, 'response': token},
                timeout=self.timeout
            )
            body = response.json()
        except requests.RequestException as e:
            logger.error(f"hCaptcha verification request failed: {e}")
            raise CaptchaError("h-captcha validation failed") from e
        except ValueError as e:
            logger.error(f"hCaptcha returned a non-JSON body: {e}")
            raise CaptchaError("h-captcha validation failed") from e

        if not isinstance(body, dict) or body.get('success') is not True:
            logger.info(f"hCaptcha rejected token: {body}")
            raise CaptchaError("h-captcha validation failed")
