"""Security headers middleware.

The API only serves JSON, so the default CSP forbids everything. The
interactive docs pages load Swagger/ReDoc assets from a CDN and get a
relaxed policy instead. Raw ASGI (no BaseHTTPMiddleware).
"""

from typing import Callable

DEFAULT_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}

DOCS_CSP = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https://fastapi.tiangolo.com"
)
DOCS_PATHS = ("/docs", "/redoc")


def SecurityHeadersMiddleware(
    app: Callable, headers: dict[str, str] | None = None
) -> Callable:
    """Set security headers on HTTP responses; handler-set headers win."""
    resolved = headers if headers is not None else DEFAULT_HEADERS.copy()

    def header_list(path: str) -> list[tuple[bytes, bytes]]:
        values = dict(resolved)
        if path.startswith(DOCS_PATHS):
            values["Content-Security-Policy"] = DOCS_CSP
            values.pop("Cache-Control", None)
        return [(k.lower().encode(), v.encode()) for k, v in values.items()]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        extra = header_list(scope.get("path", ""))

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                seen = {h[0].lower() for h in headers}
                headers.extend(h for h in extra if h[0] not in seen)
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
