"""
Submission verifier: the anti-forgery and CAPTCHA gate in front of comments.

verify() runs three checks in order and stops at the first failure:

1. the nonce must be valid for the form's action (local, no network)
2. a CAPTCHA response token must be present (local, no network)
3. the provider must accept the token (exactly one outbound call)

On success the submission is returned untouched. Failures are raised as
VerificationError subclasses for the caller to report. Nothing is cached:
every call with a token redeems it with the provider again.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Optional, TypeVar

from errors import CaptchaMissingError, CaptchaRejectedError, InvalidFormError
from infrastructure.captcha.protocol import CaptchaProvider
from services.captcha_settings import CaptchaKeys
from shared.logging import get_logger, log_with_context
from shared.nonce import NonceManager
from shared.validators import sanitize_text_field

log = get_logger(__name__)

COMMENT_FORM_ACTION = "comment_form"

T = TypeVar("T")

KeysSource = Callable[[], Awaitable[CaptchaKeys]]


class SubmissionVerifier:
    def __init__(
        self,
        nonces: NonceManager,
        captcha: CaptchaProvider,
        keys_source: KeysSource,
        action: str = COMMENT_FORM_ACTION,
    ) -> None:
        self._nonces = nonces
        self._captcha = captcha
        self._keys_source = keys_source
        self.action = action

    async def verify(
        self,
        submission: T,
        *,
        nonce: Optional[str],
        captcha_response: Optional[str],
        subject: str = "",
    ) -> T:
        """Gate *submission* behind the nonce and CAPTCHA checks.

        Args:
            submission: Passed through unchanged on success.
            nonce: Anti-forgery value from the form, may be ``None``.
            captcha_response: ``g-recaptcha-response`` value, may be ``None``.
            subject: What the nonce was minted for (e.g. the user id).

        Raises:
            InvalidFormError: nonce missing or invalid.
            CaptchaMissingError: no CAPTCHA token submitted.
            CaptchaRejectedError: provider denied the token, gave an
                unreadable answer, or no secret key is configured.
            CaptchaTransportError: the provider could not be reached.
        """
        vlog = log_with_context(log, action=self.action)

        if not self._nonces.verify(nonce, self.action, subject):
            vlog.warning("submission_nonce_invalid", missing=not nonce)
            raise InvalidFormError()

        response_token = sanitize_text_field(captcha_response)
        if not response_token:
            vlog.warning("submission_captcha_missing")
            raise CaptchaMissingError()

        keys = await self._keys_source()
        if not keys.secret_key:
            vlog.error("recaptcha_secret_not_configured")
            raise CaptchaRejectedError()

        if not await self._captcha.verify(response_token, secret=keys.secret_key):
            vlog.warning("submission_captcha_rejected")
            raise CaptchaRejectedError()

        vlog.info("submission_verified")
        return submission
