import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from app import dependencies as deps
from app.exceptions import (
    FrontMatterError,
    StoreError,
    UpstreamError,
    ValidationError,
    VerificationError,
)
from app.schemas.webhook import parse_push_event
from app.security import get_settings, verify_delivery
from app.services.sync_service import SyncService
from app.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/blog-webhook")
async def blog_webhook(
    request: Request,
    x_hub_signature_256: Optional[str] = Header(default=None),
    x_github_event: Optional[str] = Header(default=None),
    sync_service: SyncService = Depends(deps.get_sync_service),
    current_settings: Settings = Depends(get_settings),
):
    """Incremental sync triggered by a GitHub push to the content repository."""
    # verify against the exact bytes GitHub signed, before any JSON decoding
    raw_body = await request.body()
    if not x_hub_signature_256:
        raise HTTPException(status_code=400, detail="Missing signature")
    try:
        verify_delivery(
            current_settings.GITHUB_WEBHOOK_SECRET, raw_body, x_hub_signature_256
        )
    except VerificationError as e:
        logger.warning(f"Rejected webhook delivery: {e}")
        raise HTTPException(status_code=403, detail="Invalid signature")

    if x_github_event == "ping":
        return {"status": "pong"}

    try:
        event = parse_push_event(raw_body)
    except ValidationError as e:
        logger.warning(f"Rejected webhook payload: {e}")
        raise HTTPException(status_code=400, detail="Invalid payload")

    expected_ref = f"refs/heads/{current_settings.GITHUB_BRANCH}"
    if event.ref != expected_ref:
        logger.info(f"Ignoring push to {event.ref} (tracking {expected_ref})")
        return {"status": "ignored", "ref": event.ref}

    try:
        result = await run_in_threadpool(sync_service.sync_push_event, event)
    except (UpstreamError, FrontMatterError) as e:
        logger.error(f"Webhook sync failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to sync posts")
    except StoreError as e:
        logger.error(f"Webhook sync failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to store posts")

    return {"status": "ok", **result.model_dump()}
