from fastapi import APIRouter, Body, Depends, HTTPException
from typing import Optional
from structlog import get_logger

from property_listings.dependencies.content_store import get_content_store
from property_listings.dependencies.rate_limit import write_limiter
from property_listings.errors import ContentStoreError, ListingNotFoundError, ListingValidationError
from property_listings.schemas.listing import (
    CreateListingResponse,
    DeleteListingResponse,
    ListingCreate,
    ListingDetail,
    ListingPageResponse,
    ListingUpdate,
    RecentListingsResponse,
    UpdateListingResponse,
)
from property_listings.services.content_store import ContentStore
from property_listings.services.listings import (
    create_listing,
    delete_listing,
    get_listing_by_slug,
    get_listing_page,
    get_recent_listings,
    normalize_description,
    to_detail,
    update_listing,
)
from property_listings.services.pagination import coerce_page

logger = get_logger()
router = APIRouter(prefix="/listings", tags=["listings"])

@router.get("", response_model=ListingPageResponse)
async def list_listings(page: Optional[str] = None, store: ContentStore = Depends(get_content_store)):
    """Published listings, newest first, one page at a time."""
    current_page = coerce_page(page)
    try:
        return await get_listing_page(store, current_page)
    except ContentStoreError as e:
        logger.error("Error fetching listing page", page=current_page, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch listings")

@router.get("/recent", response_model=RecentListingsResponse)
async def recent_listings(store: ContentStore = Depends(get_content_store)):
    try:
        items = await get_recent_listings(store)
    except ContentStoreError as e:
        logger.error("Error fetching recent listings", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch listings")
    return {"items": items}

@router.get("/{slug}", response_model=ListingDetail)
async def listing_detail(slug: str, store: ContentStore = Depends(get_content_store)):
    try:
        document = await get_listing_by_slug(store, slug)
    except ListingNotFoundError:
        raise HTTPException(status_code=404, detail="Property not found")
    except ContentStoreError as e:
        logger.error("Error fetching listing", slug=slug, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch listing")
    logger.info("Fetched listing detail", slug=slug, listing_id=document.get("_id"))
    return to_detail(document)

@router.get("/{slug}/edit", response_model=ListingDetail)
async def listing_edit_form(slug: str, store: ContentStore = Depends(get_content_store)):
    """Listing data for the edit form, with every description block and child keyed."""
    try:
        document = await get_listing_by_slug(store, slug)
    except ListingNotFoundError:
        raise HTTPException(status_code=404, detail="Property not found")
    except ContentStoreError as e:
        logger.error("Error fetching listing for edit", slug=slug, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch listing")
    detail = to_detail(document)
    detail["description"] = normalize_description(document.get("description"))
    return detail

@router.post("", status_code=201, response_model=CreateListingResponse, dependencies=[Depends(write_limiter)])
async def create_listing_endpoint(payload: ListingCreate, store: ContentStore = Depends(get_content_store)):
    try:
        created = await create_listing(store, payload)
    except ListingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ContentStoreError as e:
        logger.error("Error saving listing", title=payload.title, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to save listing")
    return {"success": True, "document": created}

@router.put("/{listing_id}", response_model=UpdateListingResponse, dependencies=[Depends(write_limiter)])
async def update_listing_endpoint(
    listing_id: str,
    payload: Optional[ListingUpdate] = Body(None),
    store: ContentStore = Depends(get_content_store),
):
    if not listing_id.strip() or payload is None:
        raise HTTPException(status_code=400, detail="Missing ID or data")
    try:
        await update_listing(store, listing_id, payload)
    except ListingValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ContentStoreError as e:
        logger.error("Error updating listing", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to update listing")
    return {"message": "Listing updated successfully"}

@router.delete("/{listing_id}", response_model=DeleteListingResponse, dependencies=[Depends(write_limiter)])
async def delete_listing_endpoint(listing_id: str, store: ContentStore = Depends(get_content_store)):
    if not listing_id.strip():
        raise HTTPException(status_code=400, detail="Missing document ID")
    try:
        deleted = await delete_listing(store, listing_id)
    except ContentStoreError as e:
        logger.error("Error deleting listing", listing_id=listing_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to delete document")
    return {"success": True, "deletedDoc": deleted}
