"""
Request DTOs for comment submission and the reCAPTCHA settings form.

The anti-forgery nonce and the ``g-recaptcha-response`` token are transport
fields: the route reads them beside the comment, they are not part of it.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.validators import validate_comment_email, validate_comment_url

CAPTCHA_RESPONSE_FIELD = "g-recaptcha-response"
COMMENT_NONCE_FIELD = "comment_form_nonce"
SETTINGS_NONCE_FIELD = "captcha_settings_nonce"


class CommentSubmission(BaseModel):
    """A blog comment as posted by the comment form."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    post_id: int = Field(gt=0, alias="comment_post_ID")
    content: str = Field(min_length=1, max_length=65525, alias="comment")
    author: Optional[str] = Field(default=None, max_length=245)
    email: Optional[str] = Field(default=None, max_length=100)
    url: Optional[str] = Field(default=None, max_length=200)
    parent_id: int = Field(default=0, ge=0, alias="comment_parent")

    @field_validator("author", "email", "url", mode="before")
    @classmethod
    def _empty_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not validate_comment_email(value):
            raise ValueError("invalid email address")
        return value

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not validate_comment_url(value):
            raise ValueError("invalid website URL")
        return value


class CaptchaKeysForm(BaseModel):
    """Body of the admin settings form. Sanitized by the settings service."""

    model_config = ConfigDict(populate_by_name=True)

    site_key: str = Field(default="", alias="recaptcha_site_key")
    secret_key: str = Field(default="", alias="recaptcha_secret_key")
