import pytest

@pytest.mark.asyncio
@pytest.mark.integration
async def test_liveness(client):
	resp = await client.get('/api/health/liveness')
	assert resp.status_code == 200
	assert resp.json()['status'] == 'ok'
