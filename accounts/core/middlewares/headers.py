from typing import Callable

from fastapi import Request

from accounts.core.config import settings

# Responses are JSON only, nothing may be framed or embedded
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none';",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}


async def security_headers_middleware(request: Request, call_next: Callable):
    """Add security headers to all responses; account data is never cached."""
    response = await call_next(request)

    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)

    if request.url.path.startswith(settings.API_V1_STR):
        response.headers["Cache-Control"] = "no-store"

    if settings.ENVIRONMENT.upper() in ("PRODUCTION", "PROD"):
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    return response
