"""
Admin settings page for the reCAPTCHA keys.

GET  /admin/settings/recaptcha: form with both keys (HTML-escaped) and a nonce
POST /admin/settings/recaptcha: check the nonce, sanitize and store the keys

Both require ``Authorization: Bearer <ADMIN_TOKEN>``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from dependencies import get_captcha_settings, get_nonces, require_admin
from errors import InvalidFormError
from routes.forms import form_text, parse_form
from routes.templating import templates
from schemas.dto.requests.comment import SETTINGS_NONCE_FIELD, CaptchaKeysForm
from services.captcha_settings import (
    SETTINGS_FORM_ACTION,
    CaptchaKeys,
    CaptchaSettingsService,
)
from services.widget import render_nonce_field
from shared.logging import get_logger
from shared.nonce import NonceManager

log = get_logger(__name__)

router = APIRouter(
    prefix="/admin/settings",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


def _render(
    request: Request,
    keys: CaptchaKeys,
    nonces: NonceManager,
    notice: Optional[str] = None,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "captcha_settings.html",
        {
            "keys": keys,
            "notice": notice,
            "action_url": request.url_for("save_captcha_settings").path,
            "nonce_field": render_nonce_field(
                SETTINGS_NONCE_FIELD, nonces.create(SETTINGS_FORM_ACTION)
            ),
        },
    )


@router.get("/recaptcha", response_class=HTMLResponse)
async def show_captcha_settings(
    request: Request,
    captcha_settings: CaptchaSettingsService = Depends(get_captcha_settings),
    nonces: NonceManager = Depends(get_nonces),
) -> HTMLResponse:
    return _render(request, await captcha_settings.get_keys(), nonces)


@router.post(
    "/recaptcha", name="save_captcha_settings", response_class=HTMLResponse
)
async def save_captcha_settings(
    request: Request,
    captcha_settings: CaptchaSettingsService = Depends(get_captcha_settings),
    nonces: NonceManager = Depends(get_nonces),
) -> HTMLResponse:
    form = await request.form()
    if not nonces.verify(form_text(form, SETTINGS_NONCE_FIELD), SETTINGS_FORM_ACTION):
        log.warning("settings_nonce_invalid")
        raise InvalidFormError()

    body = parse_form(CaptchaKeysForm, form, "Invalid reCAPTCHA settings")
    keys = await captcha_settings.save_keys(body.site_key, body.secret_key)
    return _render(request, keys, nonces, notice="Settings saved.")
