"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Everything they return is built once in the
application lifespan and stored on app.state.
"""

from __future__ import annotations

import hmac

from fastapi import Depends, Request

from config import AppSettings
from errors import AuthenticationError, ForbiddenError
from services.captcha_settings import CaptchaSettingsService
from services.comments import CommentHandler
from services.submission_verifier import SubmissionVerifier
from shared.nonce import NonceManager


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_captcha_settings(request: Request) -> CaptchaSettingsService:
    return request.app.state.captcha_settings


def get_nonces(request: Request) -> NonceManager:
    return request.app.state.nonces


def get_verifier(request: Request) -> SubmissionVerifier:
    return request.app.state.verifier


def get_comment_handler(request: Request) -> CommentHandler:
    return request.app.state.comment_handler


def require_admin(
    request: Request, settings: AppSettings = Depends(get_settings)
) -> None:
    """Allow the request only with ``Authorization: Bearer <ADMIN_TOKEN>``."""
    if not settings.admin_token:
        raise ForbiddenError("Admin settings are disabled")

    scheme, _, supplied = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not hmac.compare_digest(
        supplied.strip().encode("utf-8"), settings.admin_token.encode("utf-8")
    ):
        raise AuthenticationError("Admin authentication required")
