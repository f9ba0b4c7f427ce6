"""Google reCAPTCHA v2 implementation of CaptchaProvider.

- one form-encoded POST per call: ``secret=<secret>&response=<token>``
- the secret is passed per call because administrators can rotate it at runtime
- timeout is enforced by the HttpClient default
- a token is accepted only when the JSON body carries ``"success": true``
"""

from __future__ import annotations

import httpx

from errors import CaptchaTransportError
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


class RecaptchaProvider:
    def __init__(
        self, http_client: HttpClient, verify_url: str = RECAPTCHA_VERIFY_URL
    ) -> None:
        self._http = http_client
        self._verify_url = verify_url

    async def verify(self, token: str, *, secret: str) -> bool:
        """Redeem *token* with the provider.

        Returns:
            ``True`` only for an explicit ``"success": true`` answer.

        Raises:
            CaptchaTransportError: the request itself failed.
        """
        try:
            response = await self._http.post(
                self._verify_url,
                data={"secret": secret, "response": token},
            )
        except httpx.HTTPError as e:
            log.error(
                "recaptcha_request_failed", error=str(e), error_type=type(e).__name__
            )
            raise CaptchaTransportError(details={"reason": type(e).__name__}) from e

        try:
            data = response.json()
        except ValueError:
            log.warning(
                "recaptcha_response_unparsable",
                status_code=response.status_code,
                response_text=response.text[:200],
            )
            return False

        if not isinstance(data, dict):
            log.warning("recaptcha_response_not_object", status_code=response.status_code)
            return False

        if data.get("success") is True:
            return True

        log.warning(
            "recaptcha_verification_failed",
            status_code=response.status_code,
            error_codes=data.get("error-codes", []),
        )
        return False
