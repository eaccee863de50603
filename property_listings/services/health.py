import time

from structlog import get_logger

from property_listings.errors import ContentStoreError
from property_listings.services.content_store import ContentStore, open_content_store

logger = get_logger()

PING_QUERY = 'count(*[_type == "property"])'


async def check_content_store(store: ContentStore) -> dict:
    started = time.perf_counter()
    try:
        documents = await store.fetch(PING_QUERY)
    except ContentStoreError as e:
        return {"status": "error", "error": str(e)}
    return {
        "status": "ok",
        "documents": documents,
        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
    }


async def get_health() -> dict:
    """Probe every upstream the service depends on."""
    async with open_content_store() as store:
        content_store = await check_content_store(store)
    status = "ok" if content_store["status"] == "ok" else "degraded"
    logger.info("Checked upstream health", status=status)
    return {"status": status, "content_store": content_store}
