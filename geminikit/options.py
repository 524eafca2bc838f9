"""Model configuration and Gemini-specific provider options."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass
class Config:
    """Options for constructing a Gemini language or embedding model.

    ``timeout`` is in seconds; ``None`` or ``0`` selects the model's default.
    """

    api_key: str = ""
    base_url: str = ""
    timeout: float | None = None
    output_dimensionality: int = 0


@dataclass
class TimeRangeFilter:
    """Restricts search grounding results to an RFC 3339 time range."""

    start_time: str = ""
    end_time: str = ""


@dataclass
class GoogleSearchConfig:
    """Optional configuration for Google Search grounding."""

    dynamic_retrieval_threshold: float | None = None
    search_types: list[str] = field(default_factory=list)
    time_range_filter: TimeRangeFilter | None = None


@dataclass
class ThinkingConfig:
    """Controls the model's thinking behaviour."""

    thinking_budget: int | None = None
    include_thoughts: bool | None = None
    thinking_level: str = ""


@dataclass
class ProviderOptions:
    """Gemini options passed under ``provider_options["gemini"]``."""

    enable_google_search: bool = False
    google_search_config: GoogleSearchConfig | None = None
    thinking_config: ThinkingConfig | None = None


def parse_provider_options(options: Mapping[str, Any] | None) -> ProviderOptions:
    """Return the Gemini options from a provider options map, or defaults."""
    if not options:
        return ProviderOptions()
    value = options.get("gemini")
    if isinstance(value, ProviderOptions):
        return value
    return ProviderOptions()