from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from shelter.api.api_run import app
from shelter.api.deps import configure_stores, get_now
from shelter.infra.Data_Store import JsonDataStore


@pytest.mark.asyncio
async def test_next_available_over_asgi(tmp_path):
    """Two guests booking the next shower get consecutive slots."""
    configure_stores(JsonDataStore(tmp_path / "shelter.json"))
    app.dependency_overrides[get_now] = lambda: datetime(2026, 1, 13, 16, 0, tzinfo=timezone.utc)
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp1 = await ac.post("/api/bookings/shower/next-available", json={"guest_id": "g1"})
            resp2 = await ac.post("/api/bookings/shower/next-available", json={"guest_id": "g2"})
    finally:
        app.dependency_overrides.clear()

    assert resp1.status_code == 201, resp1.text
    assert resp2.status_code == 201, resp2.text
    assert resp1.json()["date"] == "2026-01-13"
    assert [resp1.json()["time"], resp2.json()["time"]] == ["07:30", "08:00"]
