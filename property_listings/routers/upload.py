from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from typing import Optional
from structlog import get_logger

from property_listings.dependencies.content_store import get_content_store
from property_listings.dependencies.rate_limit import upload_limiter
from property_listings.errors import ContentStoreError
from property_listings.schemas.listing import UploadResponse
from property_listings.services.content_store import ContentStore
from property_listings.services.listings import upload_image

logger = get_logger()
router = APIRouter(tags=["upload"])

@router.post("/upload", response_model=UploadResponse, dependencies=[Depends(upload_limiter)])
async def upload_endpoint(
    image: Optional[UploadFile] = File(None),
    store: ContentStore = Depends(get_content_store),
):
    """Store an image and return its asset document; clients send its ``_id`` back as ``imageAssetId``."""
    content = await image.read() if image is not None else b""
    if not content:
        raise HTTPException(status_code=400, detail="No file uploaded")
    try:
        asset = await upload_image(store, content, image.filename or "upload", image.content_type)
    except ContentStoreError as e:
        logger.error("Upload failed", filename=image.filename, error=str(e))
        raise HTTPException(status_code=500, detail="Upload failed")
    return {"asset": asset}
