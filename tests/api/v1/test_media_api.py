"""
Tests for media and tags API endpoints.

These tests cover:
- Serving stored uploads from /api/v1/media
- Tag listing and prefix search on /api/v1/tags
"""

import pytest
from httpx import AsyncClient


@pytest.mark.api
class TestServeMedia:
    async def test_serve_stored_file(self, client: AsyncClient, asset_store):
        locator = asset_store.store(b"Chapter one.", "text/plain")

        response = await client.get(f"/api/v1/media/{locator}")
        assert response.status_code == 200
        assert response.content == b"Chapter one."
        assert response.headers["content-type"].startswith("text/plain")

    async def test_unknown_locator(self, client: AsyncClient):
        response = await client.get(f"/api/v1/media/{'0' * 32}.png")
        assert response.status_code == 404

    async def test_malformed_locator(self, client: AsyncClient):
        response = await client.get("/api/v1/media/settings.py")
        assert response.status_code == 404


@pytest.mark.api
class TestTags:
    async def test_list_and_search(self, client: AsyncClient, make_user, auth_headers):
        user = await make_user()
        await client.post(
            "/api/v1/fanworks",
            json={"title": "T", "type": "artwork", "tags": ["Hurt/Comfort", "humor", "angst"]},
            headers=auth_headers(user),
        )

        response = await client.get("/api/v1/tags")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [t["name"] for t in data["tags"]] == ["angst", "humor", "hurt/comfort"]

        response = await client.get("/api/v1/tags", params={"search": "hu"})
        assert [t["name"] for t in response.json()["tags"]] == ["humor", "hurt/comfort"]

        response = await client.get("/api/v1/tags", params={"limit": 1, "offset": 2})
        assert [t["name"] for t in response.json()["tags"]] == ["hurt/comfort"]
