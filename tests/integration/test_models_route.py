import httpx
import pytest


@pytest.mark.asyncio
@pytest.mark.integration
async def test_models_relays_upstream(client, settings, sample_models):
    resp = await client.get(f"{settings.api_prefix}/models")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["total"] == len(body["data"]) == len(sample_models)
    assert body["data"][0]["id"] == "gpt-4o-mini"
    # upstream extras pass through untouched
    assert body["data"][0]["pricing"]["currency"] == "USD"
    assert "lastUpdated" in body


@pytest.mark.asyncio
@pytest.mark.integration
async def test_models_upstream_error_is_500(client, settings, upstream, transport_factory):
    upstream["transport"] = transport_factory(status_code=503, json_body={})
    resp = await client.get(f"{settings.api_prefix}/models")
    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "error": "Failed to fetch models: Service Unavailable",
        "data": [],
        "total": 0,
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_models_network_error_is_500(client, settings, upstream, transport_factory):
    upstream["transport"] = transport_factory(exc=httpx.ReadTimeout("timed out"))
    resp = await client.get(f"{settings.api_prefix}/models")
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["data"] == []
    assert body["total"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_models_unconfigured_client_is_500(client, settings):
    from megallm.api.main import app
    from megallm.api import deps

    app.dependency_overrides[deps.get_modelhub_client] = lambda: None
    resp = await client.get(f"{settings.api_prefix}/models")
    assert resp.status_code == 500
    assert resp.json()["success"] is False
