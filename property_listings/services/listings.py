import re
from typing import Any

from structlog import get_logger

from property_listings.config import settings
from property_listings.errors import ListingNotFoundError, ListingValidationError
from property_listings.schemas.listing import ListingCreate, ListingUpdate
from property_listings.services.content_store import ContentStore
from property_listings.services.images import image_url
from property_listings.services.pagination import page_numbers, paginate, shown_range
from property_listings.services.rich_text import dump_blocks, ensure_keys, text_to_blocks
from property_listings.services.slug import unique_slug

logger = get_logger()

LISTINGS_PAGE_QUERY = """{
  "properties": *[_type == "property" && isPublished == true]
    | order(_createdAt desc)[$start...$end]{
      _id, title, slug, location, price, image, description[0...2]
    },
  "total": count(*[_type == "property" && isPublished == true])
}"""

RECENT_LISTINGS_QUERY = """*[_type == "property" && isPublished == true]
  | order(_createdAt desc)[0...$limit]{
    _id, title, slug, location, price, image, description[0...2]
  }"""

LISTING_BY_SLUG_QUERY = """*[_type == "property" && slug.current == $slug && isPublished == true][0]{
  _id, title, slug, location, price, image, description, _createdAt, _updatedAt
}"""

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_price(value: Any) -> int | None:
    """Coerce a submitted price to whole rupiah.

    Strings are read like a form field: the leading integer counts, so "2500000.50"
    becomes 2500000. Returns None for an empty value.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ListingValidationError("Price must be a number")
    if isinstance(value, (int, float)):
        price = int(value)
    else:
        match = _LEADING_INT.match(str(value))
        if not match:
            raise ListingValidationError("Price must be a number")
        price = int(match.group(1))
    if price < 0:
        raise ListingValidationError("Price must not be negative")
    return price


def format_price(price: int | None) -> str | None:
    """Indonesian rupiah display, e.g. ``Rp 2.500.000.000``."""
    if price is None:
        return None
    return "Rp " + f"{price:,}".replace(",", ".")


def normalize_description(description: Any) -> list[dict]:
    if isinstance(description, str):
        return dump_blocks(text_to_blocks(description))
    return dump_blocks(ensure_keys(description))


def image_reference(asset_id: str) -> dict:
    return {"_type": "image", "asset": {"_type": "reference", "_ref": asset_id}}


def _shape(document: dict, width: int, height: int) -> dict:
    slug = document.get("slug")
    return {
        "id": document["_id"],
        "title": document.get("title") or "",
        "slug": slug.get("current") if isinstance(slug, dict) else slug,
        "location": document.get("location"),
        "price": document.get("price"),
        "price_display": format_price(document.get("price")),
        "image": document.get("image"),
        "image_url": image_url(
            document.get("image"), settings.SANITY_PROJECT_ID, settings.SANITY_DATASET, width, height
        ),
        "description": document.get("description") or [],
    }


def to_summary(document: dict) -> dict:
    return _shape(document, 400, 300)


def to_detail(document: dict) -> dict:
    detail = _shape(document, 800, 600)
    detail["created_at"] = document.get("_createdAt")
    detail["updated_at"] = document.get("_updatedAt")
    return detail


async def get_listing_page(store: ContentStore, page: int, page_size: int | None = None) -> dict:
    page_size = page_size or settings.PAGE_SIZE
    window = paginate(page, page_size, 0)
    data = await store.fetch(LISTINGS_PAGE_QUERY, {"start": window.start_index, "end": window.end_index}) or {}
    properties = data.get("properties") or []
    total = data.get("total") or 0

    window = paginate(page, page_size, total)
    shown_from, shown_to = shown_range(window, len(properties))
    logger.info("Fetched listing page", page=page, total_listings=total, returned=len(properties))
    return {
        "items": [to_summary(p) for p in properties],
        "total": total,
        "pagination": {
            **window.model_dump(),
            "shown_from": shown_from,
            "shown_to": shown_to,
            "pages": page_numbers(window.current_page, window.total_pages),
        },
    }


async def get_recent_listings(store: ContentStore, limit: int | None = None) -> list[dict]:
    properties = await store.fetch(RECENT_LISTINGS_QUERY, {"limit": limit or settings.RECENT_LIMIT}) or []
    return [to_summary(p) for p in properties]


async def get_listing_by_slug(store: ContentStore, slug: str) -> dict:
    document = await store.fetch(LISTING_BY_SLUG_QUERY, {"slug": slug})
    if not document:
        raise ListingNotFoundError(f"No published listing with slug {slug!r}")
    return document


def _require(value: Any, field: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()) or value == 0:
        raise ListingValidationError(f"Missing required field: {field}")


async def build_listing_document(store: ContentStore, payload: ListingCreate) -> dict:
    _require(payload.title, "title")
    _require(payload.location, "location")
    _require(payload.price, "price")
    price = parse_price(payload.price)
    _require(price, "price")

    document = {
        "_type": "property",
        "title": payload.title,
        "slug": {"_type": "slug", "current": await unique_slug(store, payload.title)},
        "location": payload.location,
        "price": price,
        "description": normalize_description(payload.description),
        "isPublished": True,
    }
    if payload.image is not None:
        document["image"] = payload.image.model_dump(by_alias=True)
    elif payload.imageAssetId:
        document["image"] = image_reference(payload.imageAssetId)
    return document


async def create_listing(store: ContentStore, payload: ListingCreate) -> dict:
    document = await build_listing_document(store, payload)
    created = await store.create(document)
    logger.info("Created listing", listing_id=created.get("_id"), slug=document["slug"]["current"])
    return created


def build_listing_patch(payload: ListingUpdate) -> tuple[dict, list[str]]:
    """Split an update payload into fields to set and paths to unset.

    Only fields present in the body are touched; ``isPublished`` and ``slug``
    are never part of an update.
    """
    sent = payload.model_fields_set
    fields: dict[str, Any] = {}
    unset: list[str] = []
    for name in ("title", "location"):
        if name in sent and getattr(payload, name) is not None:
            fields[name] = getattr(payload, name)
    if "price" in sent:
        price = parse_price(payload.price)
        if price is not None:
            fields["price"] = price
    if "description" in sent and payload.description is not None:
        fields["description"] = normalize_description(payload.description)
    if "image" in sent:
        if payload.image is None:
            unset.append("image")
        else:
            fields["image"] = payload.image.model_dump(by_alias=True)
    return fields, unset


async def update_listing(store: ContentStore, listing_id: str, payload: ListingUpdate) -> None:
    fields, unset = build_listing_patch(payload)
    if not fields and not unset:
        logger.info("Nothing to update", listing_id=listing_id)
        return
    patch = store.patch(listing_id)
    if fields:
        patch.set(fields)
    if unset:
        patch.unset(unset)
    await patch.commit()
    logger.info("Updated listing", listing_id=listing_id, fields=sorted(fields), unset=unset)


async def delete_listing(store: ContentStore, listing_id: str) -> dict:
    deleted = await store.delete(listing_id)
    logger.info("Deleted listing", listing_id=listing_id, found=deleted is not None)
    return deleted or {"_id": listing_id}


async def upload_image(store: ContentStore, content: bytes, filename: str, content_type: str | None) -> dict:
    asset = await store.upload("image", content, filename=filename, content_type=content_type)
    logger.info("Uploaded image", asset_id=asset.get("_id"), filename=filename)
    return asset
