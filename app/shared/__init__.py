"""Cross-cutting helpers shared by the API, use cases and the store adapter."""

from app.shared.utils import ensure_utc, generate_cuid, parse_timestamp, utc_now

__all__ = ["ensure_utc", "generate_cuid", "parse_timestamp", "utc_now"]
