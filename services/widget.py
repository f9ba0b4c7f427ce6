"""
Comment-form widget markup.

The widget is the provider's ``g-recaptcha`` container plus a hidden field
carrying a fresh comment-form nonce. The same markup is rendered for
anonymous and logged-in commenters.
"""

from __future__ import annotations

from markupsafe import Markup

from schemas.dto.requests.comment import COMMENT_NONCE_FIELD
from services.submission_verifier import COMMENT_FORM_ACTION
from shared.nonce import NonceManager


def render_script_tag(script_url: str) -> Markup:
    return Markup('<script src="{}" async defer></script>').format(script_url)


def render_nonce_field(field_name: str, value: str) -> Markup:
    return Markup('<input type="hidden" id="{0}" name="{0}" value="{1}" />').format(
        field_name, value
    )


def render_widget(site_key: str, nonces: NonceManager, subject: str = "") -> Markup:
    """Return the widget container followed by the comment-form nonce field."""
    container = Markup('<div class="g-recaptcha" data-sitekey="{}"></div>').format(
        site_key
    )
    nonce = nonces.create(COMMENT_FORM_ACTION, subject)
    return container + render_nonce_field(COMMENT_NONCE_FIELD, nonce)
