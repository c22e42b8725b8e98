"""
API key guard for the dataset reload endpoint.

The key and the header carrying it come from Settings
(PRICE_API_KEY, PRICE_API_KEY_HEADER). With no key configured the
endpoint is open, which is the local development setup.
"""
import logging
import secrets

from fastapi import HTTPException, Request

from backend.core.config import settings

logger = logging.getLogger(__name__)


def require_api_key(request: Request) -> None:
    """Reject the request unless it carries the configured reload key."""
    expected = settings.API_KEY
    if not expected:
        return

    supplied = request.headers.get(settings.API_KEY_HEADER, "")
    if not secrets.compare_digest(supplied.encode(), expected.encode()):
        logger.warning(f"Rejected {request.method} {request.url.path}: bad or missing {settings.API_KEY_HEADER}")
        raise HTTPException(status_code=401, detail="Invalid API key")
