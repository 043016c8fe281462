"""
Moderation Core

Composition root for the moderation core. The routing layer builds one
ModerationCore at startup with its store and renderer, then per request
creates a RequestContext and calls the services exposed here.
"""

from typing import Any, Mapping, MutableMapping, Optional

from config import settings
from config.validators import validate_settings, get_config_summary
from data.protocols import ModerationStore, BoardRegistry, PostRenderer
from services.audit_service import ModerationLog
from services.auth_service import AuthService
from services.board_service import SettingsBoardRegistry
from services.captcha_service import HCaptchaVerifier
from services.context import RequestContext
from services.moderation_service import ModerationService
from services.protocols import PasswordHasher, CaptchaVerifier
from utils.logger import get_logger, setup_file_logging
from utils.tripcode import generate_tripcode

logger = get_logger(__name__)


class ModerationCore:
    """
    Wires the moderation services to their collaborators.

    This class owns the audit log, auth gate, captcha verifier and bulk
    operations so callers only supply the store and renderer.
    """

    def __init__(
        self,
        store: ModerationStore,
        renderer: PostRenderer,
        boards: Optional[BoardRegistry] = None,
        hasher: Optional[PasswordHasher] = None,
        captcha: Optional[CaptchaVerifier] = None,
        validate: bool = True
    ):
        """Initialize the core, validating settings unless told otherwise."""
        if validate:
            validate_settings()

        if settings.LOG_FILE:
            setup_file_logging(settings.LOG_FILE)

        self.store = store
        self.boards = boards or SettingsBoardRegistry()
        self.audit = ModerationLog(store)
        self.auth = AuthService(hasher)
        self.captcha = captcha or HCaptchaVerifier()
        self.moderation = ModerationService(store, self.boards, renderer)

        logger.info(f"Moderation core ready: {get_config_summary()}")

    def context(self, environ: Mapping[str, Any], session: MutableMapping[str, Any]) -> RequestContext:
        """Create the context for one request."""
        return RequestContext.from_environ(environ, session, self.audit)

    def tripcode(self, raw_name: str):
        """Split a submitted name into (name, tripcode) with the server salt."""
        return generate_tripcode(raw_name, settings.SECURE_TRIPCODE_SALT)

    def validate_captcha(self, form: Mapping[str, Any]) -> None:
        """Validate the captcha token of a form when captcha is enabled."""
        if settings.CAPTCHA_ENABLED:
            self.captcha.validate(form)
