import os

os.environ.setdefault("SANITY_PROJECT_ID", "testproj")
os.environ.setdefault("SANITY_DATASET", "production")
os.environ.setdefault("LOG_FORMAT", "console")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from property_listings.dependencies.content_store import get_content_store
from property_listings.dependencies.rate_limit import upload_limiter, write_limiter
from property_listings.errors import ContentStoreError
from property_listings.main import app
from property_listings.services.content_store import Patch
from property_listings.services.listings import LISTINGS_PAGE_QUERY, LISTING_BY_SLUG_QUERY, RECENT_LISTINGS_QUERY
from property_listings.services.slug import SLUG_TAKEN_QUERY


class FakeContentStore:
    """In-memory stand-in with the ContentStore create/patch/delete/fetch/upload contract."""

    def __init__(self):
        self.documents: dict[str, dict] = {}
        self.mutations: list[dict] = []
        self.queries: list[tuple[str, dict]] = []
        self.uploads: list[dict] = []
        self.fail = False
        self._counter = 0

    def _check(self):
        if self.fail:
            raise ContentStoreError("store unavailable")

    def add(self, **fields) -> dict:
        self._counter += 1
        document = {
            "_id": fields.pop("_id", f"doc-{self._counter}"),
            "_type": "property",
            "_createdAt": f"2024-01-{self._counter:02d}T00:00:00Z",
            "_updatedAt": f"2024-01-{self._counter:02d}T00:00:00Z",
            "isPublished": True,
            **fields,
        }
        if isinstance(document.get("slug"), str):
            document["slug"] = {"_type": "slug", "current": document["slug"]}
        self.documents[document["_id"]] = document
        return document

    def _published(self) -> list[dict]:
        docs = [d for d in self.documents.values() if d.get("isPublished")]
        return sorted(docs, key=lambda d: d["_createdAt"], reverse=True)

    async def fetch(self, query, params=None):
        self._check()
        params = params or {}
        self.queries.append((query, params))
        if query == SLUG_TAKEN_QUERY:
            return sum(1 for d in self.documents.values() if d.get("slug", {}).get("current") == params["slug"])
        if query == LISTINGS_PAGE_QUERY:
            published = self._published()
            return {"properties": published[params["start"]:params["end"]], "total": len(published)}
        if query == RECENT_LISTINGS_QUERY:
            return self._published()[: params["limit"]]
        if query == LISTING_BY_SLUG_QUERY:
            for doc in self._published():
                if doc.get("slug", {}).get("current") == params["slug"]:
                    return doc
            return None
        raise AssertionError(f"unexpected query: {query}")

    async def mutate(self, mutations):
        self._check()
        self.mutations.extend(mutations)
        results = []
        for mutation in mutations:
            if "create" in mutation:
                doc = self.add(**mutation["create"])
                results.append({"id": doc["_id"], "operation": "create", "document": doc})
            elif "patch" in mutation:
                patch = mutation["patch"]
                doc = self.documents[patch["id"]]
                doc.update(patch.get("set", {}))
                for path in patch.get("unset", []):
                    doc.pop(path, None)
                results.append({"id": doc["_id"], "operation": "update", "document": doc})
            elif "delete" in mutation:
                doc = self.documents.pop(mutation["delete"]["id"], None)
                if doc is not None:
                    results.append({"id": doc["_id"], "operation": "delete", "document": doc})
        return {"transactionId": "tx", "results": results}

    async def create(self, document):
        result = await self.mutate([{"create": document}])
        return result["results"][0]["document"]

    def patch(self, document_id):
        return Patch(self, document_id)

    async def delete(self, document_id):
        result = await self.mutate([{"delete": {"id": document_id}}])
        return result["results"][0]["document"] if result["results"] else None

    async def upload(self, kind, content, filename, content_type=None):
        self._check()
        self.uploads.append({"kind": kind, "content": content, "filename": filename, "content_type": content_type})
        return {"_id": "image-abc123-800x600-jpg", "_type": "sanity.imageAsset", "originalFilename": filename}


@pytest.fixture
def fake_store():
    return FakeContentStore()


@pytest_asyncio.fixture
async def client(fake_store):
    app.dependency_overrides[get_content_store] = lambda: fake_store
    app.dependency_overrides[write_limiter] = lambda: None
    app.dependency_overrides[upload_limiter] = lambda: None
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
