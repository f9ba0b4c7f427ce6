"""
Comment handler registration.

The host decides what happens to a verified comment by handing create_app()
a CommentHandler. Only submissions that passed the verifier reach it.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from schemas.dto.requests.comment import CommentSubmission
from shared.logging import get_logger

log = get_logger(__name__)

CommentHandler = Callable[[CommentSubmission], Awaitable[None]]


async def log_comment(submission: CommentSubmission) -> None:
    """Default handler: record the accepted comment in the log only."""
    log.info(
        "comment_accepted",
        post_id=submission.post_id,
        parent_id=submission.parent_id,
        content_length=len(submission.content),
        anonymous=submission.author is None,
    )
