"""Grounding sources and Google metadata carried in provider metadata."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from .types import Source

_Extractor = Callable[[Mapping[str, Any], set], "Source | None"]


def _google(provider_metadata: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
    if not provider_metadata:
        return None
    google = provider_metadata.get("google")
    return google if isinstance(google, Mapping) else None


def build_google_metadata(
    provider_metadata: Mapping[str, Any] | None,
) -> dict[str, Any] | None:
    """Collect groundingMetadata, safetyRatings and urlContextMetadata, or None."""
    google = _google(provider_metadata)
    if google is None:
        return None
    result: dict[str, Any] = {}
    grounding = google.get("groundingMetadata")
    if isinstance(grounding, Mapping):
        result["groundingMetadata"] = grounding
    if "safetyRatings" in google:
        result["safetyRatings"] = google["safetyRatings"]
    if "urlContextMetadata" in google:
        result["urlContextMetadata"] = google["urlContextMetadata"]
    return result or None


def _grounding_metadata(
    provider_metadata: Mapping[str, Any] | None,
) -> Mapping[str, Any] | None:
    google = _google(provider_metadata)
    if google is None:
        return None
    grounding = google.get("groundingMetadata")
    return grounding if isinstance(grounding, Mapping) else None


def _title(entry: Mapping[str, Any]) -> str:
    title = entry.get("title")
    return title if isinstance(title, str) else ""


def _uri_source(field: str, source_type: str) -> _Extractor:
    def extract(chunk: Mapping[str, Any], seen: set) -> Source | None:
        entry = chunk.get(field)
        if not isinstance(entry, Mapping):
            return None
        uri = entry.get("uri")
        if not isinstance(uri, str) or not uri or uri in seen:
            return None
        seen.add(uri)
        return Source(source_type=source_type, url=uri, title=_title(entry))

    return extract


def _keyed_source(field: str, placeholder: str) -> _Extractor:
    def extract(chunk: Mapping[str, Any], seen: set) -> Source | None:
        entry = chunk.get(field)
        if not isinstance(entry, Mapping):
            return None
        uri = entry.get("uri")
        if not isinstance(uri, str) or not uri:
            uri = placeholder
        key = f"{field}:{uri}"
        if key in seen:
            return None
        seen.add(key)
        return Source(
            source_type=field,
            url=uri,
            title=_title(entry),
            provider_metadata={field: entry},
        )

    return extract


_EXTRACTORS: tuple[_Extractor, ...] = (
    _uri_source("web", "url"),
    _uri_source("retrievedContext", "retrieved-context"),
    _keyed_source("image", "image-chunk"),
    _keyed_source("maps", "maps-chunk"),
)


def grounding_sources(
    grounding_metadata: Mapping[str, Any] | None, seen: set
) -> list[Source]:
    """Sources from ``groundingChunks`` not already in ``seen``; ``seen`` is updated."""
    if not grounding_metadata:
        return []
    chunks = grounding_metadata.get("groundingChunks")
    if not isinstance(chunks, list):
        return []
    sources: list[Source] = []
    for chunk in chunks:
        if not isinstance(chunk, Mapping):
            continue
        for extract in _EXTRACTORS:
            source = extract(chunk, seen)
            if source is not None:
                sources.append(source)
                break
    return sources


class GroundingCollector:
    """Tracks grounding sources and Google metadata across the chunks of one stream.

    Sources are deduplicated across chunks, and the most recent Google
    metadata is remembered so the finish event can carry it even when it
    arrived in an earlier chunk.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self._last_meta: dict[str, Any] | None = None

    def _remember(self, provider_metadata: Mapping[str, Any] | None) -> None:
        meta = build_google_metadata(provider_metadata)
        if meta is not None:
            self._last_meta = meta

    def sources(self, provider_metadata: Mapping[str, Any] | None) -> list[Source]:
        """New grounding sources from one chunk's provider metadata."""
        self._remember(provider_metadata)
        return grounding_sources(_grounding_metadata(provider_metadata), self._seen)

    def finish_metadata(
        self, provider_metadata: Mapping[str, Any] | None
    ) -> dict[str, Any] | None:
        """Provider metadata for a finish event: ``{"google": ...}`` or None."""
        self._remember(provider_metadata)
        if self._last_meta is None:
            return None
        return {"google": self._last_meta}