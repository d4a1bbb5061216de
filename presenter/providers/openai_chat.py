"""OpenAI chat completion and embedding client."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import httpx

from presenter.core.errors import UpstreamFailure
from presenter.providers.base import LanguageModel, upstream_failure


class OpenAIChatModel(LanguageModel):
    """Chat completions with an ordered list of fallback models."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None,
        models: Sequence[str],
        *,
        base_url: str = "https://api.openai.com/v1",
        embedding_model: str = "text-embedding-3-small",
        max_tokens: int = 200,
        temperature: float = 0.7,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self.models = list(models)
        self.base_url = base_url.rstrip("/")
        self.embedding_model = embedding_model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._timeout = timeout
        self._transport = transport
        self._logger = logging.getLogger("presenter.openai")

    def missing_setting(self) -> str | None:
        if not self._api_key:
            return "openai_api_key"
        if not self.models:
            return "openai_model"
        return None

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
        )

    async def complete(
        self,
        messages: Sequence[Mapping[str, Any]],
        *,
        json_mode: bool = False,
    ) -> str:
        self.ensure_configured()

        last_error: UpstreamFailure | None = None
        async with self._client() as client:
            for model in self.models:
                payload: dict[str, Any] = {
                    "model": model,
                    "messages": list(messages),
                    "max_tokens": self.max_tokens,
                    "temperature": 0.0 if json_mode else self.temperature,
                }
                if json_mode:
                    payload["response_format"] = {"type": "json_object"}

                try:
                    response = await client.post("/chat/completions", json=payload)
                    response.raise_for_status()
                    data = response.json()
                except httpx.HTTPError as exc:
                    last_error = upstream_failure(self.name, exc)
                    self._logger.warning("Chat model %s failed; trying next candidate", model)
                    continue
                except ValueError:
                    last_error = UpstreamFailure(self.name, f"model {model} returned a non-JSON body")
                    continue

                content = _message_content(data)
                if content is None:
                    last_error = UpstreamFailure(
                        self.name,
                        f"model {model} returned no message content",
                        upstream_body=data,
                    )
                    continue

                self._logger.debug("Chat completion served by %s", model)
                return content.strip()

        if last_error is None:
            raise UpstreamFailure(self.name, "no model candidates")
        raise last_error

    async def embed(self, text: str) -> list[float]:
        self.ensure_configured()

        try:
            async with self._client() as client:
                response = await client.post(
                    "/embeddings",
                    json={"model": self.embedding_model, "input": text},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise upstream_failure(self.name, exc) from exc
        except ValueError:
            raise UpstreamFailure(self.name, "embedding response is not JSON") from None

        try:
            return [float(value) for value in data["data"][0]["embedding"]]
        except (KeyError, IndexError, TypeError, ValueError):
            raise UpstreamFailure(self.name, "embedding response missing vector", upstream_body=data) from None


def _message_content(data: Any) -> str | None:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(content, str) or not content.strip():
        return None
    return content
