# geminikit

A small Python library for talking to Gemini models:

- `NativeLanguageModel` streams chat responses from the native
  `:streamGenerateContent` endpoint and yields normalized `StreamEvent`s
  (text, reasoning, tool calls, grounding sources, usage, finish).
- `EmbeddingModel` produces embedding vectors through `batchEmbedContents`.
- Helpers for the OpenAI-compatible endpoint (`geminikit.compat`) build
  Google Search tools, thinking configuration and advisory warnings.

## Installation

```
pip install geminikit
```

## Streaming a response

```python
from geminikit.native_model import NativeLanguageModel
from geminikit.options import Config, ProviderOptions, ThinkingConfig
from geminikit.types import LanguageModelRequest, StreamEventType, user_message

model = NativeLanguageModel("gemini-2.5-flash", Config(api_key="placeholder"))

request = LanguageModelRequest(
    system="You are helpful.",
    messages=[user_message("What happened in the news today?")],
    provider_options={
        "gemini": ProviderOptions(
            enable_google_search=True,
            thinking_config=ThinkingConfig(include_thoughts=True),
        )
    },
)

for event in model.stream(request):
    if event.type is StreamEventType.TEXT_DELTA:
        print(event.text_delta, end="")
    elif event.type is StreamEventType.SOURCE:
        print("\nsource:", event.source.url)
    elif event.type is StreamEventType.FINISH:
        print("\nfinished:", event.finish_reason, event.warnings)
```

A non-200 reply raises `GeminiError` with the status code in its message.
When Google Search grounding is enabled together with `top_k` or `seed`,
warnings are attached to the first finish event.

## Tools

Pass `ToolDefinition`s in `request.tools` and an optional `ToolChoice`
(`ToolChoice.specific("get_weather")` forces one function). Schemas are
sanitized: `$ref`, `$defs`, `additionalProperties`, `examples` and
`default` are removed, as the Gemini API rejects them.

## Embeddings

```python
from geminikit.embedding import EmbeddingModel
from geminikit.options import Config

embedder = EmbeddingModel("text-embedding-004", Config(api_key="placeholder"))
vector = embedder.embed("hello world")
vectors = embedder.embed_batch(["chunk one", "chunk two"])
```

Results are returned in the same order as the input texts; an empty input
returns an empty result without a request.

## Running the tests

```
pip install geminikit[test]
pytest
```