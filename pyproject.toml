[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "geminikit"
version = "0.1.0"
description = "Streaming Gemini language and embedding models with grounding, thinking config and tool calling"
requires-python = ">=3.10"
keywords = ["gemini", "llm", "embeddings", "streaming", "sse", "ai"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Typing :: Typed",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "httpx",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["geminikit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
