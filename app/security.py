import hashlib
import hmac
from typing import Optional

from fastapi import Depends, HTTPException, Security
from fastapi.security.api_key import APIKeyHeader
from starlette.status import HTTP_403_FORBIDDEN

from app.exceptions import VerificationError
from app.settings import Settings, settings

API_KEY_NAME = "X-Blog-Key"
api_key_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


def get_api_key(
    api_key_header: str = Security(api_key_header),
    current_settings: Settings = Depends(get_settings),
):
    if current_settings.BLOG_API_KEY and api_key_header == current_settings.BLOG_API_KEY:
        return api_key_header
    raise HTTPException(
        status_code=HTTP_403_FORBIDDEN,
        detail="Could not validate API key",
    )


def sign_payload(secret: str, raw_body: bytes) -> str:
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(secret: str, raw_body: bytes, signature_header: Optional[str]) -> bool:
    """
    Check a ``sha256=<hex>`` webhook signature against the raw request body.
    Never raises: anything malformed is simply not verified.
    """
    if not secret or not signature_header:
        return False
    if not signature_header.startswith(SIGNATURE_PREFIX):
        return False

    expected = sign_payload(secret, raw_body)
    try:
        return hmac.compare_digest(expected, signature_header.strip())
    except TypeError:  # non-ASCII header value
        return False


def verify_delivery(secret: str, raw_body: bytes, signature_header: Optional[str]) -> None:
    if not verify_signature(secret, raw_body, signature_header):
        raise VerificationError("Webhook signature does not match payload")
