import os
import pytest
import pytest_asyncio
import httpx
from httpx import AsyncClient, ASGITransport

# Configure the upstream credential through settings rather than a literal in code.
os.environ.setdefault("MEGALLM_API_KEY", "sk-test-key")
os.environ.setdefault("MEGALLM_MODELS_URL", "https://upstream.test/v1/models")

from megallm.core import config as _config  # noqa: E402
_config.get_settings.cache_clear()  # ensure new env vars are picked up # type: ignore[attr-defined]
_settings = _config.get_settings()

from megallm.api.main import app  # noqa: E402
from megallm.api import deps  # noqa: E402
from megallm.core.modelhub import ModelHubClient  # noqa: E402


SAMPLE_MODELS = [
    {
        "id": "gpt-4o-mini",
        "object": "model",
        "owned_by": "openai",
        "display_name": "GPT-4o mini",
        "capabilities": {
            "supports_function_calling": True,
            "supports_vision": True,
            "supports_streaming": True,
            "supports_structured_output": True,
        },
        "pricing": {"input_tokens_cost_per_million": 0.15, "output_tokens_cost_per_million": 0.6, "currency": "USD"},
        "context_length": 128000,
        "max_output_tokens": 16384,
    },
    {
        "id": "text-embedding-3-small",
        "object": "model",
        "owned_by": "openai",
        "display_name": "Text Embedding 3 Small",
        "capabilities": {"supports_function_calling": False, "supports_vision": False,
                         "supports_streaming": False, "supports_structured_output": False},
        "pricing": {"input_tokens_cost_per_million": 0.02, "output_tokens_cost_per_million": 0, "currency": "USD"},
        "context_length": 8191,
        "max_output_tokens": 0,
    },
    {
        "id": "claude-sonnet-4",
        "object": "model",
        "owned_by": "Anthropic",
        "display_name": "Claude Sonnet 4",
        "capabilities": {"supports_function_calling": True, "supports_vision": True,
                         "supports_streaming": True, "supports_structured_output": False},
        "pricing": {"input_tokens_cost_per_million": 3, "output_tokens_cost_per_million": 15, "currency": "USD"},
        "context_length": 200000,
        "max_output_tokens": 64000,
    },
    {
        "id": "gemini-2.5-pro",
        "owned_by": "google",
        "display_name": "Gemini 2.5 Pro",
        "pricing": {"input_tokens_cost_per_million": 1.25, "output_tokens_cost_per_million": 10, "currency": "USD"},
        "context_length": 1048576,
        "max_output_tokens": 65536,
    },
    {
        "id": "mistral-large",
        "owned_by": "Mistral AI",
        "display_name": "Mistral Large",
        "pricing": None,
        "context_length": 0,
    },
    {
        "id": "qwen-max",
        "owned_by": "alibaba-cloud",
        "display_name": "Qwen Max",
        "context_length": 32768,
        "max_output_tokens": 8192,
    },
]


def make_transport(status_code: int = 200, json_body=None, content: bytes | None = None, exc: Exception | None = None):
    """Build an ``httpx.MockTransport`` standing in for the upstream gateway.

    Requests are recorded on ``transport.requests`` for header assertions.
    """
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if exc is not None:
            raise exc
        if content is not None:
            return httpx.Response(status_code, content=content)
        return httpx.Response(status_code, json=json_body if json_body is not None else {"data": SAMPLE_MODELS})

    transport = httpx.MockTransport(handler)
    transport.requests = requests  # type: ignore[attr-defined]
    return transport


def make_client(transport) -> ModelHubClient:
    return ModelHubClient(
        models_url=_settings.modelhub_models_url,
        api_key=_settings.modelhub_api_key.get_secret_value(),
        timeout=5.0,
        transport=transport,
    )


@pytest.fixture(scope="session")
def settings():
    """Expose application settings to tests if needed."""
    return _settings


@pytest.fixture()
def sample_models():
    return [dict(m) for m in SAMPLE_MODELS]


@pytest.fixture()
def transport_factory():
    return make_transport


@pytest.fixture()
def hub_factory():
    return make_client


@pytest.fixture()
def upstream():
    """Mutable holder for the transport the next request will use."""
    return {"transport": make_transport()}


@pytest_asyncio.fixture()
async def client(upstream):
    app.dependency_overrides[deps.get_modelhub_client] = lambda: make_client(upstream["transport"])
    # httpx >=0.28 removed the 'app=' shortcut; use ASGITransport explicitly
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
