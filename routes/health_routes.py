"""
Health check endpoint.

GET /health: checks the option store and whether reCAPTCHA keys are set.
Rules:
- Option store failure → "unhealthy" (503): keys cannot be read without it.
- Keys not configured → "degraded" (200): every submission would be rejected.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from schemas.dto.responses.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    responses={200: {"model": HealthResponse}, 503: {"model": HealthResponse}},
)
async def health_check(request: Request) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    try:
        if not await request.app.state.option_store.ping():
            raise ConnectionError("option store did not answer")
        keys = await request.app.state.captcha_settings.get_keys()
        checks["options"] = "ok"
    except Exception:
        checks["options"] = "error"
        checks["recaptcha"] = "unknown"
        overall = "unhealthy"
    else:
        if keys.is_configured:
            checks["recaptcha"] = "ok"
        else:
            checks["recaptcha"] = "not_configured"
            overall = "degraded"

    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(
        status_code=status_code,
        content={"status": overall, "checks": checks},
    )
