from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional, Union

from property_listings.schemas.pagination import PaginationResponse
from property_listings.schemas.rich_text import Block

class AssetReference(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str = Field("reference", alias="_type")
    ref: str = Field(..., alias="_ref")

class ImageField(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str = Field("image", alias="_type")
    asset: AssetReference

class ListingCreate(BaseModel):
    # Required fields are checked by the service so that a missing one answers 400
    title: Optional[str] = None
    location: Optional[str] = None
    price: Optional[Union[int, float, str]] = None
    description: Optional[Union[str, List[Block]]] = None
    image: Optional[ImageField] = None
    imageAssetId: Optional[str] = None

class ListingUpdate(BaseModel):
    title: Optional[str] = None
    location: Optional[str] = None
    price: Optional[Union[int, float, str]] = None
    description: Optional[Union[str, List[Block]]] = None
    image: Optional[ImageField] = None

class ListingSummary(BaseModel):
    id: str
    title: str
    slug: Optional[str] = None
    location: Optional[str] = None
    price: Optional[int] = None
    price_display: Optional[str] = None
    image: Optional[dict] = None
    image_url: Optional[str] = None
    description: List[dict] = []

class ListingDetail(ListingSummary):
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

class ListingPageResponse(BaseModel):
    items: List[ListingSummary]
    total: int
    pagination: PaginationResponse

class RecentListingsResponse(BaseModel):
    items: List[ListingSummary]

class CreateListingResponse(BaseModel):
    success: bool
    document: dict[str, Any]

class UpdateListingResponse(BaseModel):
    message: str

class DeleteListingResponse(BaseModel):
    success: bool
    deletedDoc: dict[str, Any]

class UploadResponse(BaseModel):
    asset: dict[str, Any]
