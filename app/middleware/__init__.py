"""HTTP middleware: request ID / access timing and security headers.

Registered in create_app(); the last one added runs outermost.
"""

from app.middleware.request_id import RequestIDMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
]
