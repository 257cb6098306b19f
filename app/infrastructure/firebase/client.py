"""Process-wide Firestore REST client.

Credentials come from FIREBASE_SERVICE_ACCOUNT_KEY (the JSON itself, for
hosts without a writable filesystem) or FIREBASE_SERVICE_ACCOUNT_PATH. The
key wins when both are set.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from app.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
)

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

_REQUIRED_KEY_FIELDS = ("project_id", "client_email", "private_key")

_firestore_client: FirestoreRESTClient | None = None


def load_service_account(settings: Settings) -> dict[str, Any] | None:
    """Return the service-account mapping, or None when none is configured.

    Raises ValueError for malformed JSON or a key missing required fields.
    A configured path that does not exist is logged and treated as unset.
    """
    info: Any = None
    key = settings.firebase_service_account_key
    if key is not None and key.get_secret_value():
        try:
            info = json.loads(key.get_secret_value())
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    elif settings.firebase_service_account_path:
        path = Path(settings.firebase_service_account_path).expanduser()
        if not path.is_file():
            logger.warning("Service account file not found: %s", path)
            return None
        info = json.loads(path.read_text(encoding="utf-8"))
    else:
        return None

    if not isinstance(info, dict):
        raise ValueError("Service account credentials must be a JSON object")
    missing = [field for field in _REQUIRED_KEY_FIELDS if not info.get(field)]
    if missing:
        raise ValueError(f"Service account is missing: {', '.join(missing)}")
    return info


def init_firebase(settings: Settings | None = None) -> bool:
    """Create the shared client; False (logged) when unconfigured or invalid.

    The API starts either way; store-backed routes answer 503 without it.
    """
    global _firestore_client
    if _firestore_client is not None:
        return True
    if settings is None:
        from app.core.config import get_settings

        settings = get_settings()
    try:
        info = load_service_account(settings)
        if info is None:
            return False
        _firestore_client = FirestoreRESTClient(
            info["project_id"],
            _get_credentials(info),
            timeout=settings.firestore_http_timeout_seconds,
        )
    except Exception:
        logger.exception("Firestore initialization failed")
        return False
    logger.info("Firestore client ready for project %s", info["project_id"])
    return True


def get_firestore_client() -> FirestoreRESTClient | None:
    return _firestore_client


async def close_firebase() -> None:
    """Close the client's connection pool (app shutdown)."""
    global _firestore_client
    client, _firestore_client = _firestore_client, None
    if client is not None:
        await client.aclose()
        logger.info("Firestore HTTP client closed")
