import json

import httpx
import pytest

from geminikit.embedding import (
    EmbeddingModel,
    build_batch_embed_request,
    parse_batch_embed_response,
)
from geminikit.options import Config
from geminikit.types import GeminiError


def _indexed_handler(dim, seen=None):
    def handler(request):
        payload = json.loads(request.content)
        if seen is not None:
            seen.append(request)
        embeddings = [
            {"values": [(i + 1) * 0.01] * dim} for i in range(len(payload["requests"]))
        ]
        return httpx.Response(200, json={"embeddings": embeddings})

    return handler


def _model(handler, config=None):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return EmbeddingModel(
        "text-embedding-004", config or Config(api_key="placeholder"), client
    )


def test_order_preserved():
    model = _model(_indexed_handler(3))
    texts = ["alpha", "beta", "gamma", "delta"]
    vecs = model.embed_batch(texts)
    assert len(vecs) == len(texts)
    for i, vec in enumerate(vecs):
        assert vec[0] == pytest.approx((i + 1) * 0.01)


def test_search_inputs_full_dimension():
    model = _model(_indexed_handler(768))
    queries = [
        "find all messages about project alpha",
        "what did we decide about the database schema",
    ]
    vecs = model.embed_batch(queries)
    assert [len(v) for v in vecs] == [768, 768]


def test_document_chunks():
    model = _model(_indexed_handler(768))
    chunks = [
        "Chapter 1: Introduction to distributed systems and their challenges in modern cloud environments.",
        "Chapter 2: Consensus algorithms such as Raft and Paxos and their trade-offs in practice.",
        "Chapter 3: Replication strategies for high availability including synchronous and asynchronous modes.",
        "Chapter 4: Partition tolerance and the CAP theorem applied to real-world database systems.",
        "Chapter 5: Monitoring and observability for distributed services at scale.",
    ]
    vecs = model.embed_batch(chunks)
    assert len(vecs) == len(chunks)
    for i, vec in enumerate(vecs):
        assert len(vec) > 0
        assert vec[0] == pytest.approx((i + 1) * 0.01)


def test_mixed_search_and_chunks():
    model = _model(_indexed_handler(768))
    items = [
        "find all messages about project alpha",
        "what did we decide about the database schema",
        "Introduction to distributed systems...",
        "Consensus algorithms and their trade-offs...",
        "Replication strategies for high availability...",
    ]
    vecs = model.embed_batch(items)
    assert len(vecs) == 5
    assert all(len(v) == 768 for v in vecs)


def test_embed_delegates_to_batch():
    model = _model(_indexed_handler(4))
    vec = model.embed("single text")
    assert len(vec) == 4
    assert vec[0] == pytest.approx(0.01)


def test_fixed_vectors():
    def handler(request):
        payload = json.loads(request.content)
        return httpx.Response(
            200, json={"embeddings": [{"values": [0.1, 0.2, 0.3]} for _ in payload["requests"]]}
        )

    model = _model(handler)
    assert len(model.embed("hello world")) == 3
    vecs = model.embed_batch(["chunk one", "chunk two", "chunk three"])
    assert len(vecs) == 3
    assert all(len(v) == 3 for v in vecs)


def test_request_url_and_headers():
    seen = []
    model = _model(_indexed_handler(2, seen))
    model.embed("x")
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/v1beta/models/text-embedding-004:batchEmbedContents"
    assert request.url.params["key"] == "placeholder"
    assert request.headers["content-type"] == "application/json"


def test_output_dimensionality_sent():
    seen = []
    model = _model(
        _indexed_handler(2, seen), Config(api_key="placeholder", output_dimensionality=768)
    )
    model.embed("x")
    payload = json.loads(seen[0].content)
    assert payload["requests"][0]["outputDimensionality"] == 768


def test_model_id():
    model = EmbeddingModel("text-embedding-004")
    assert model.model_id() == "text-embedding-004"
    model.close()


def test_embed_batch_empty():
    def handler(request):
        raise AssertionError("no request expected")

    model = _model(handler)
    assert model.embed_batch([]) == []


def test_http_error():
    model = _model(lambda request: httpx.Response(401, text="unauthorized"))
    with pytest.raises(GeminiError, match="401"):
        model.embed("test")


def test_build_request_model_prefix():
    payload = json.loads(build_batch_embed_request("text-embedding-004", ["x"], 0))
    assert payload["requests"][0]["model"] == "models/text-embedding-004"
    assert "outputDimensionality" not in payload["requests"][0]


def test_build_request_texts():
    texts = ["a", "b"]
    payload = json.loads(build_batch_embed_request("text-embedding-004", texts, 0))
    assert len(payload["requests"]) == 2
    for text, entry in zip(texts, payload["requests"]):
        assert entry["model"] == "models/text-embedding-004"
        assert entry["content"]["parts"] == [{"text": text}]


def test_parse_response_valid():
    body = json.dumps({"embeddings": [{"values": [0.1, 0.2]}, {"values": [0.3, 0.4]}]})
    results = parse_batch_embed_response(body, 2)
    assert results[0][1] == pytest.approx(0.2)
    assert results[1][0] == pytest.approx(0.3)


def test_parse_response_count_mismatch():
    body = json.dumps({"embeddings": [{"values": [0.1]}]})
    with pytest.raises(GeminiError, match="expected 3 embeddings, got 1"):
        parse_batch_embed_response(body, 3)


def test_parse_response_invalid_json():
    with pytest.raises(GeminiError, match="parse response"):
        parse_batch_embed_response(b"not json", 1)