"""Gemini language and embedding models with streaming, grounding and tool calling."""

__version__ = "0.1.0"

__all__ = [
    "types",
    "options",
    "schema",
    "compat",
    "grounding",
    "embedding",
    "native_request",
    "native_tools",
    "native_decoder",
    "native_model",
]