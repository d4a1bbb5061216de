"""Pinecone-backed knowledge retrieval over the REST API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import httpx

from presenter.core.errors import PresenterError, UpstreamFailure
from presenter.providers.base import KnowledgeRetriever, LanguageModel, upstream_failure


class PineconeRetriever(KnowledgeRetriever):
    """Embed the question and return the text metadata of the closest vectors.

    Retrieval is best effort: when the index is not configured or any step
    fails, an empty list is returned and the answer falls back to the slide
    context alone.
    """

    name = "pinecone"

    def __init__(
        self,
        api_key: str | None,
        embedder: LanguageModel,
        *,
        index_name: str | None = None,
        index_host: str | None = None,
        control_url: str = "https://api.pinecone.io",
        top_k: int = 2,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self.embedder = embedder
        self.index_name = index_name
        self._index_host = _normalise_host(index_host) if index_host else None
        self.control_url = control_url.rstrip("/")
        self.top_k = top_k
        self._timeout = timeout
        self._transport = transport
        self._host_lock = asyncio.Lock()
        self._logger = logging.getLogger("presenter.retrieval")

    def missing_setting(self) -> str | None:
        if not self._api_key:
            return "pinecone_api_key"
        if not self.index_name and not self._index_host:
            return "pinecone_index"
        return None

    def _headers(self) -> dict[str, str]:
        return {"Api-Key": str(self._api_key), "Content-Type": "application/json"}

    async def retrieve(self, query: str) -> list[str]:
        if not self.configured or not self.embedder.configured or not query.strip():
            return []

        try:
            vector = await self.embedder.embed(query)
            matches = await self.query(vector)
        except PresenterError as exc:
            self._logger.warning("Knowledge retrieval skipped: %s", exc.message)
            return []

        passages: list[str] = []
        for match in matches:
            metadata = match.get("metadata") or {}
            text = metadata.get("text") if isinstance(metadata, dict) else None
            passages.append(text if isinstance(text, str) else "")
        return passages

    async def query(self, vector: Sequence[float]) -> list[dict[str, Any]]:
        host = await self.resolve_host()
        payload = {"vector": list(vector), "topK": self.top_k, "includeMetadata": True}
        data = await self._post(f"{host}/query", payload)
        matches = data.get("matches") if isinstance(data, dict) else None
        return [match for match in matches or [] if isinstance(match, dict)]

    async def upsert(self, vectors: Sequence[dict[str, Any]], namespace: str | None = None) -> int:
        """Write vectors to the index and return the upserted count."""

        self.ensure_configured()
        host = await self.resolve_host()
        payload: dict[str, Any] = {"vectors": list(vectors)}
        if namespace:
            payload["namespace"] = namespace
        data = await self._post(f"{host}/vectors/upsert", payload)
        return int(data.get("upsertedCount", 0)) if isinstance(data, dict) else 0

    async def resolve_host(self) -> str:
        """Return the data-plane host, looking it up by index name once."""

        if self._index_host:
            return self._index_host

        async with self._host_lock:
            if self._index_host:
                return self._index_host
            try:
                async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                    response = await client.get(
                        f"{self.control_url}/indexes/{self.index_name}",
                        headers=self._headers(),
                    )
                    response.raise_for_status()
                    host = response.json().get("host")
            except httpx.HTTPError as exc:
                raise upstream_failure(self.name, exc) from exc
            except ValueError:
                raise UpstreamFailure(self.name, "index description is not JSON") from None

            if not host:
                raise UpstreamFailure(self.name, f"index {self.index_name} has no host")
            self._index_host = _normalise_host(host)
            self._logger.info("Resolved Pinecone index %s to %s", self.index_name, self._index_host)
            return self._index_host

    async def _post(self, url: str, payload: dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(url, headers=self._headers(), json=payload)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as exc:
            raise upstream_failure(self.name, exc) from exc
        except ValueError:
            raise UpstreamFailure(self.name, "response is not JSON") from None


def _normalise_host(host: str) -> str:
    host = host.rstrip("/")
    if not host.startswith(("http://", "https://")):
        host = f"https://{host}"
    return host
