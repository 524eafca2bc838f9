"""Text embeddings through Gemini's batchEmbedContents API."""

from __future__ import annotations

import json
from typing import Any, Sequence

import httpx

from .options import Config
from .types import GeminiError

EMBED_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT = 60.0


def build_batch_embed_request(
    model_id: str, texts: Sequence[str], output_dimensionality: int
) -> bytes:
    """JSON body for batchEmbedContents, one request per text."""
    requests = []
    for text in texts:
        entry: dict[str, Any] = {
            "model": f"models/{model_id}",
            "content": {"parts": [{"text": text}]},
        }
        if output_dimensionality:
            entry["outputDimensionality"] = output_dimensionality
        requests.append(entry)
    return json.dumps({"requests": requests}).encode("utf-8")


def parse_batch_embed_response(
    body: bytes | str, expected_count: int
) -> list[list[float]]:
    """Extract embedding vectors, checking there is one per input."""
    try:
        data = json.loads(body)
        embeddings = data.get("embeddings") or []
        if not isinstance(embeddings, list):
            raise TypeError("embeddings is not a list")
        vectors = [[float(v) for v in (e.get("values") or [])] for e in embeddings]
    except (ValueError, TypeError, AttributeError) as exc:
        raise GeminiError(f"gemini embed: parse response: {exc}") from exc
    if len(vectors) != expected_count:
        raise GeminiError(
            f"gemini embed: expected {expected_count} embeddings, got {len(vectors)}"
        )
    return vectors


class EmbeddingModel:
    """Embedding model backed by the Gemini native embedding API."""

    def __init__(
        self,
        model_id: str,
        config: Config | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        config = config or Config()
        self._model_id = model_id
        self._api_key = config.api_key
        self._output_dimensionality = config.output_dimensionality
        timeout = config.timeout or DEFAULT_TIMEOUT
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def model_id(self) -> str:
        """The Gemini embedding model identifier."""
        return self._model_id

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> EmbeddingModel:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def embed(self, text: str) -> list[float]:
        """Embedding vector for one text."""
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """Embedding vectors in the same order as the texts."""
        if not texts:
            return []
        body = build_batch_embed_request(self._model_id, texts, self._output_dimensionality)
        url = f"{EMBED_BASE_URL}/models/{self._model_id}:batchEmbedContents"
        try:
            response = self._client.post(
                url,
                params={"key": self._api_key},
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise GeminiError(f"gemini embed: http request: {exc}") from exc
        if response.status_code != 200:
            raise GeminiError(
                f"gemini embed: unexpected status {response.status_code}: {response.text}"
            )
        return parse_batch_embed_response(response.content, len(texts))