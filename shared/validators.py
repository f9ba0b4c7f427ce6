"""
Input sanitizers and validators: framework-agnostic, pure functions.

sanitize_text_field() is applied to every free-text value that is stored
(the reCAPTCHA keys) or forwarded to the provider (the response token).
"""

from __future__ import annotations

import re

import validators as _validators

_SCRIPT_STYLE_RE = re.compile(
    r"<(script|style)[^>]*?>.*?</\1>", re.IGNORECASE | re.DOTALL
)
_TAG_RE = re.compile(r"<[^>]*>?")
_LONE_LT_RE = re.compile(r"<(?=[^a-zA-Z/!?])")
_WHITESPACE_RE = re.compile(r"[\r\n\t ]+")
_OCTET_RE = re.compile(r"%[a-fA-F0-9]{2}")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def strip_all_tags(value: str) -> str:
    """Remove HTML tags, dropping ``<script>`` and ``<style>`` blocks whole."""
    value = _SCRIPT_STYLE_RE.sub("", value)
    return _TAG_RE.sub("", value)


def sanitize_text_field(value: str | None) -> str:
    """Sanitize a single-line text value.

    - Strips HTML tags (a ``<`` that cannot start a tag is encoded instead)
    - Removes control characters
    - Collapses line breaks, tabs and runs of spaces into one space
    - Removes percent-encoded octets
    - Trims surrounding whitespace

    Returns:
        The cleaned string; ``""`` for ``None``.
    """
    if not value:
        return ""

    filtered = str(value)
    if "<" in filtered:
        filtered = _LONE_LT_RE.sub("&lt;", filtered)
        filtered = strip_all_tags(filtered)

    filtered = _CONTROL_RE.sub("", filtered)

    while _OCTET_RE.search(filtered):
        filtered = _OCTET_RE.sub("", filtered)

    filtered = _WHITESPACE_RE.sub(" ", filtered)

    return filtered.strip()


def validate_comment_email(email: str) -> bool:
    """Return True if *email* looks like a deliverable address."""
    return bool(_validators.email(email))


def validate_comment_url(url: str) -> bool:
    """Return True if *url* is an HTTP/S URL a commenter may link to."""
    if not url.lower().startswith(("http://", "https://")):
        return False
    return bool(_validators.url(url))
