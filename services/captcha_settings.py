"""
reCAPTCHA key storage.

Keys are kept in the host's OptionStore under two option names. Values from
the environment (RecaptchaSettings) are used until an administrator saves
keys through the settings page.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from config import RecaptchaSettings
from infrastructure.options.protocol import OptionStore
from shared.logging import get_logger
from shared.validators import sanitize_text_field

log = get_logger(__name__)

SITE_KEY_OPTION = "recaptcha_site_key"
SECRET_KEY_OPTION = "recaptcha_secret_key"

# Nonce action guarding the admin settings form
SETTINGS_FORM_ACTION = "captcha_settings"


@dataclass(frozen=True)
class CaptchaKeys:
    site_key: str
    secret_key: str

    @property
    def is_configured(self) -> bool:
        return bool(self.site_key and self.secret_key)


class CaptchaSettingsService:
    def __init__(
        self, store: OptionStore, defaults: Optional[RecaptchaSettings] = None
    ) -> None:
        self._store = store
        self._defaults = defaults or RecaptchaSettings()

    async def get_keys(self) -> CaptchaKeys:
        site_key = await self._store.get(SITE_KEY_OPTION)
        secret_key = await self._store.get(SECRET_KEY_OPTION)
        return CaptchaKeys(
            site_key=site_key if site_key is not None else self._defaults.recaptcha_site_key,
            secret_key=(
                secret_key
                if secret_key is not None
                else self._defaults.recaptcha_secret_key
            ),
        )

    async def save_keys(self, site_key: str, secret_key: str) -> CaptchaKeys:
        """Sanitize and persist both keys; returns what was stored."""
        keys = CaptchaKeys(
            site_key=sanitize_text_field(site_key),
            secret_key=sanitize_text_field(secret_key),
        )
        await self._store.set(SITE_KEY_OPTION, keys.site_key)
        await self._store.set(SECRET_KEY_OPTION, keys.secret_key)
        log.info("recaptcha_settings_saved", configured=keys.is_configured)
        return keys
