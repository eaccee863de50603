from typing import AsyncIterator

from property_listings.services.content_store import ContentStore, open_content_store


async def get_content_store() -> AsyncIterator[ContentStore]:
    """One store handle per request; its HTTP client closes when the response is done."""
    async with open_content_store() as store:
        yield store
