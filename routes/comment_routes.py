"""
Comment form and comment submission.

GET  /comments/form: comment form with the reCAPTCHA widget and a fresh nonce
POST /comments     : verify nonce + CAPTCHA, then hand the comment to the
                      registered CommentHandler

A failed verification answers with the AppError JSON body and the comment
handler is never called.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse

from config import AppSettings
from dependencies import (
    get_captcha_settings,
    get_comment_handler,
    get_nonces,
    get_settings,
    get_verifier,
)
from routes.forms import form_text, parse_form
from routes.templating import templates
from schemas.dto.requests.comment import (
    CAPTCHA_RESPONSE_FIELD,
    COMMENT_NONCE_FIELD,
    CommentSubmission,
)
from schemas.dto.responses.common import ErrorResponse
from services.captcha_settings import CaptchaSettingsService
from services.comments import CommentHandler
from services.submission_verifier import SubmissionVerifier
from services.widget import render_script_tag, render_widget
from shared.nonce import NonceManager

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/form", response_class=HTMLResponse)
async def comment_form(
    request: Request,
    post_id: int = Query(default=1, gt=0),
    settings: AppSettings = Depends(get_settings),
    captcha_settings: CaptchaSettingsService = Depends(get_captcha_settings),
    nonces: NonceManager = Depends(get_nonces),
) -> HTMLResponse:
    keys = await captcha_settings.get_keys()
    return templates.TemplateResponse(
        request,
        "comment_form.html",
        {
            "post_id": post_id,
            "action_url": request.url_for("submit_comment").path,
            "script_tag": render_script_tag(settings.recaptcha.recaptcha_script_url),
            "widget": render_widget(keys.site_key, nonces),
        },
    )


@router.post(
    "",
    name="submit_comment",
    status_code=201,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def submit_comment(
    request: Request,
    verifier: SubmissionVerifier = Depends(get_verifier),
    handler: CommentHandler = Depends(get_comment_handler),
) -> JSONResponse:
    form = await request.form()
    submission = parse_form(CommentSubmission, form, "Invalid comment submission")

    await verifier.verify(
        submission,
        nonce=form_text(form, COMMENT_NONCE_FIELD),
        captcha_response=form_text(form, CAPTCHA_RESPONSE_FIELD),
    )
    await handler(submission)

    return JSONResponse(
        status_code=201,
        content={"status": "accepted", "comment": submission.model_dump()},
    )
