import re
import secrets

from property_listings.services.content_store import ContentStore

_DISALLOWED = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")

SLUG_TAKEN_QUERY = 'count(*[_type == "property" && slug.current == $slug])'

# Fixed path segments under /listings that a slug must not shadow
RESERVED_SLUGS = frozenset({"recent"})


def generate_slug(title: str) -> str:
    """Turn a listing title into a URL-safe slug.

    Not collision-free: two listings with the same title produce the same slug.
    A title made only of punctuation yields an empty string.
    """
    cleaned = _DISALLOWED.sub("", (title or "").lower())
    return _WHITESPACE.sub("-", cleaned.strip())


async def _is_free(store: ContentStore, slug: str) -> bool:
    if slug in RESERVED_SLUGS:
        return False
    return not await store.fetch(SLUG_TAKEN_QUERY, {"slug": slug})


async def unique_slug(store: ContentStore, title: str) -> str:
    base = generate_slug(title) or "listing"
    candidate = base
    while not await _is_free(store, candidate):
        candidate = f"{base}-{secrets.token_hex(3)}"
    return candidate
