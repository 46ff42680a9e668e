import logging

from fastapi import APIRouter, Depends, HTTPException

from app import dependencies as deps
from app.exceptions import FrontMatterError, StoreError, UpstreamError
from app.schemas.webhook import SyncResult
from app.services.sync_service import SyncService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sync", response_model=SyncResult)
def full_resync(service: SyncService = Depends(deps.get_sync_service)):
    """Rebuild the post store from the content repository."""
    try:
        return service.full_resync()
    except (UpstreamError, FrontMatterError) as e:
        logger.error(f"Full resync failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to sync posts")
    except StoreError as e:
        logger.error(f"Full resync failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to store posts")
