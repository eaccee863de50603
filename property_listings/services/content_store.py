"""Async client for the hosted content store (Sanity HTTP API)."""

from contextlib import asynccontextmanager
from typing import Any
import json

from httpx import AsyncClient, HTTPError, HTTPStatusError, InvalidURL
from structlog import get_logger

from property_listings.config import settings
from property_listings.errors import ContentStoreError

logger = get_logger()


def _describe(error: Exception) -> str:
    if isinstance(error, HTTPStatusError):
        try:
            body = error.response.json()
            message = body.get("error", {}).get("description") or body.get("message")
        except Exception:
            message = None
        return f"{error.response.status_code}: {message or error.response.text or 'upstream error'}"
    return f"{type(error).__name__}: {error}"


class Patch:
    """Collects set/unset operations for one document and commits them as a single mutation."""

    def __init__(self, store: "ContentStore", document_id: str):
        self._store = store
        self.document_id = document_id
        self.operations: dict[str, Any] = {}

    def set(self, fields: dict[str, Any]) -> "Patch":
        self.operations.setdefault("set", {}).update(fields)
        return self

    def unset(self, paths: list[str]) -> "Patch":
        self.operations.setdefault("unset", []).extend(paths)
        return self

    async def commit(self) -> dict | None:
        result = await self._store.mutate([{"patch": {"id": self.document_id, **self.operations}}])
        return _first_document(result)


def _first_document(result: dict) -> dict | None:
    results = result.get("results") or []
    if not results:
        return None
    return results[0].get("document")


class ContentStore:
    """Thin wrapper over the store's query, mutate and asset endpoints.

    The handle owns no connection of its own: it is built around an
    ``AsyncClient`` that the caller opens and closes (see ``open_content_store``).
    """

    def __init__(
        self,
        client: AsyncClient,
        project_id: str,
        dataset: str,
        api_version: str,
        token: str | None = None,
        use_cdn: bool = False,
    ):
        self.client = client
        self.project_id = project_id
        self.dataset = dataset
        self.api_version = api_version.lstrip("v")
        self.token = token
        self.use_cdn = use_cdn

    @property
    def api_base(self) -> str:
        return f"https://{self.project_id}.api.sanity.io/v{self.api_version}"

    @property
    def query_base(self) -> str:
        # Authenticated reads must bypass the CDN
        if self.use_cdn and not self.token:
            return f"https://{self.project_id}.apicdn.sanity.io/v{self.api_version}"
        return self.api_base

    def _headers(self, extra: dict | None = None) -> dict:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if extra:
            headers.update(extra)
        return headers

    async def fetch(self, query: str, params: dict[str, Any] | None = None) -> Any:
        query_params = {"query": query}
        for name, value in (params or {}).items():
            query_params[f"${name}"] = json.dumps(value)
        try:
            response = await self.client.get(
                f"{self.query_base}/data/query/{self.dataset}",
                params=query_params,
                headers=self._headers(),
            )
            response.raise_for_status()
            return response.json().get("result")
        except (HTTPError, InvalidURL) as e:
            logger.error("Content store query failed", dataset=self.dataset, error=_describe(e))
            raise ContentStoreError(f"Query failed: {_describe(e)}") from e

    async def mutate(self, mutations: list[dict]) -> dict:
        try:
            response = await self.client.post(
                f"{self.api_base}/data/mutate/{self.dataset}",
                params={"returnDocuments": "true", "visibility": "sync"},
                json={"mutations": mutations},
                headers=self._headers(),
            )
            response.raise_for_status()
            return response.json()
        except (HTTPError, InvalidURL) as e:
            logger.error(
                "Content store mutation failed",
                dataset=self.dataset,
                operations=[next(iter(m)) for m in mutations],
                error=_describe(e),
            )
            raise ContentStoreError(f"Mutation failed: {_describe(e)}") from e

    async def create(self, document: dict) -> dict:
        result = await self.mutate([{"create": document}])
        created = _first_document(result)
        if created is None:
            raise ContentStoreError("Create returned no document")
        return created

    def patch(self, document_id: str) -> Patch:
        return Patch(self, document_id)

    async def delete(self, document_id: str) -> dict | None:
        result = await self.mutate([{"delete": {"id": document_id}}])
        return _first_document(result)

    async def upload(self, kind: str, content: bytes, filename: str, content_type: str | None = None) -> dict:
        """Upload a binary asset; ``kind`` is ``"image"`` or ``"file"``."""
        try:
            response = await self.client.post(
                f"{self.api_base}/assets/{kind}s/{self.dataset}",
                params={"filename": filename},
                content=content,
                headers=self._headers({"Content-Type": content_type or "application/octet-stream"}),
            )
            response.raise_for_status()
            asset = response.json().get("document")
        except (HTTPError, InvalidURL) as e:
            logger.error("Asset upload failed", kind=kind, filename=filename, error=_describe(e))
            raise ContentStoreError(f"Upload failed: {_describe(e)}") from e
        if not asset:
            raise ContentStoreError("Upload returned no asset document")
        return asset


@asynccontextmanager
async def open_content_store():
    async with AsyncClient(timeout=settings.SANITY_TIMEOUT) as client:
        yield ContentStore(
            client,
            project_id=settings.SANITY_PROJECT_ID,
            dataset=settings.SANITY_DATASET,
            api_version=settings.SANITY_API_VERSION,
            token=settings.SANITY_API_TOKEN,
            use_cdn=settings.SANITY_USE_CDN,
        )
