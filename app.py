"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

import secrets
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import AppSettings
from errors import register_error_handlers
from infrastructure.captcha.protocol import CaptchaProvider
from infrastructure.captcha.recaptcha import RecaptchaProvider
from infrastructure.http_client import HttpClient
from infrastructure.options.memory import InMemoryOptionStore
from infrastructure.options.protocol import OptionStore
from infrastructure.options.redis_store import RedisOptionStore, create_redis_client
from routes.comment_routes import router as comment_router
from routes.health_routes import router as health_router
from routes.settings_routes import router as settings_router
from services.captcha_settings import CaptchaSettingsService
from services.comments import CommentHandler, log_comment
from services.submission_verifier import SubmissionVerifier
from shared.logging import get_logger, setup_logging
from shared.nonce import NonceManager
from shared.request_logging import setup_request_logging

log = get_logger(__name__)


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    comment_handler: Optional[CommentHandler] = None,
    option_store: Optional[OptionStore] = None,
    captcha_provider: Optional[CaptchaProvider] = None,
) -> FastAPI:
    """Create and return a fully configured FastAPI application.

    Args:
        settings: Defaults to AppSettings() read from the environment.
        comment_handler: Receives every comment that passed verification.
            Defaults to logging the comment.
        option_store: Where the reCAPTCHA keys live. Defaults to Redis when
            REDIS_URI is set, otherwise process memory.
        captcha_provider: Defaults to Google reCAPTCHA over HTTP.
    """
    if settings is None:
        settings = AppSettings()

    log_settings = settings.logging
    if settings.is_production:
        log_settings = log_settings.model_copy(update={"log_format": "json"})
    setup_logging(log_settings)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    nonce_secret = settings.secret_key
    if not nonce_secret:
        # Nonces minted by this process will not verify in any other process
        log.warning("secret_not_configured", fallback="per_process_random")
        nonce_secret = secrets.token_hex(32)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        app.state.settings = settings

        http_client = HttpClient(timeout=settings.recaptcha.recaptcha_timeout_seconds)

        redis_client = None
        store = option_store
        if store is None and settings.redis.redis_uri:
            redis_client = await create_redis_client(settings.redis.redis_uri)
            if redis_client is not None:
                store = RedisOptionStore(redis_client)
        if store is None:
            store = InMemoryOptionStore()
        app.state.option_store = store

        captcha_settings = CaptchaSettingsService(store, settings.recaptcha)
        nonces = NonceManager(nonce_secret, settings.nonce.nonce_lifetime_seconds)
        provider = captcha_provider or RecaptchaProvider(
            http_client, settings.recaptcha.recaptcha_verify_url
        )

        app.state.captcha_settings = captcha_settings
        app.state.nonces = nonces
        app.state.verifier = SubmissionVerifier(
            nonces, provider, captcha_settings.get_keys
        )
        app.state.comment_handler = comment_handler or log_comment

        log.info(
            "app_started",
            option_store=type(store).__name__,
            recaptcha_configured=(await captcha_settings.get_keys()).is_configured,
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()
        if redis_client is not None:
            await redis_client.aclose()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=None if settings.is_production else settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_request_logging(app)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(comment_router)
    app.include_router(settings_router)

    return app
