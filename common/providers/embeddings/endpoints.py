"""Helpers for OpenAI-compatible base URLs (LM Studio, llama.cpp, vLLM...)."""


def normalize_base_url(raw: str) -> str:
    """Strip trailing slashes."""
    return raw.rstrip("/")


def make_endpoint(base_url: str, path: str) -> str:
    """
    Join a base URL and an API path, inserting ``/v1`` when the base lacks it.

    Example:
        make_endpoint("http://127.0.0.1:1234", "/models")
        -> "http://127.0.0.1:1234/v1/models"
    """
    normalized = normalize_base_url(base_url)
    if normalized.endswith("/v1"):
        return f"{normalized}{path}"
    return f"{normalized}/v1{path}"
