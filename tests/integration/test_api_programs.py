"""
Integration tests for Programs, Guide, Videos and Health APIs.
"""

from datetime import datetime

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from streamguide import __version__
from tests.fixtures import TODAY, ChannelFactory, ProgramRecordFactory
from tests.fixtures.mock_responses import YOUTUBE_VIDEO_NO_MAXRES_RESPONSE

CHANNEL = "music-box"


@pytest.fixture
def programs(db: Session):
    db.add(ChannelFactory.create(id=CHANNEL, name="MusicBox"))
    db.add(ChannelFactory.create(id="art-house", name="ArtHouse"))
    records = ProgramRecordFactory.chain(CHANNEL, datetime(2026, 10, 18, 23, 0), [7200, 1800, 600])
    records.append(ProgramRecordFactory.create("art-house", datetime(2026, 10, 19, 20, 0), 3600 * 5))
    db.add_all(records)
    db.commit()
    return [r.id for r in records]


@pytest.mark.integration
class TestProgramsAPI:
    """Tests for /api/programs endpoints."""

    def test_update_program(self, client: TestClient, programs):
        response = client.patch(
            f"/api/programs/{programs[1]}",
            json={"title": "Renamed", "description": "Edited"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Renamed"
        assert data["description"] == "Edited"
        assert (data["start_time"], data["end_time"]) == ("01:00", "01:30")

    def test_update_blank_title(self, client: TestClient, programs):
        response = client.patch(f"/api/programs/{programs[1]}", json={"title": "  "})

        assert response.status_code == 422

    def test_update_missing(self, client: TestClient, programs):
        response = client.patch("/api/programs/99999", json={"title": "Ghost"})

        assert response.status_code == 404

    def test_delete_program(self, client: TestClient, programs):
        response = client.delete(f"/api/programs/{programs[2]}")

        assert response.status_code == 204
        assert client.delete(f"/api/programs/{programs[2]}").status_code == 404

    def test_delete_does_not_reflow(self, client: TestClient, programs):
        client.delete(f"/api/programs/{programs[1]}")

        guide = client.get(f"/api/guide/{TODAY}", params={"channel_id": CHANNEL}).json()

        assert [(p["start_time"], p["end_time"]) for p in guide] == [("00:00", "01:00"), ("01:30", "01:40")]

    def test_bulk_delete(self, client: TestClient, programs):
        response = client.post("/api/programs/bulk-delete", json={"ids": programs[:2]})

        assert response.status_code == 200
        assert response.json() == {"deleted": 2}

    def test_bulk_delete_requires_ids(self, client: TestClient):
        response = client.post("/api/programs/bulk-delete", json={"ids": []})

        assert response.status_code == 422


@pytest.mark.integration
class TestGuideAPI:
    """Tests for /api/guide."""

    def test_guide_all_channels(self, client: TestClient, programs):
        response = client.get(f"/api/guide/{TODAY}")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 4
        overnight = data[0]
        assert overnight["id"] == programs[0]
        assert (overnight["start_time"], overnight["end_time"], overnight["date"]) == ("00:00", "01:00", TODAY)
        late = next(p for p in data if p["channel_id"] == "art-house")
        assert (late["start_time"], late["end_time"]) == ("20:00", "24:00")

    def test_guide_one_channel(self, client: TestClient, programs):
        data = client.get(f"/api/guide/{TODAY}", params={"channel_id": "art-house"}).json()

        assert [p["id"] for p in data] == [programs[3]]

    def test_guide_previous_day(self, client: TestClient, programs):
        data = client.get("/api/guide/2026-10-18", params={"channel_id": CHANNEL}).json()

        assert [(p["start_time"], p["end_time"]) for p in data] == [("23:00", "24:00")]

    def test_guide_invalid_date(self, client: TestClient):
        response = client.get("/api/guide/tomorrow")

        assert response.status_code == 400


@pytest.mark.integration
class TestVideosAPI:
    """Tests for /api/videos/lookup."""

    @pytest.mark.parametrize(
        "youtube_handler",
        [lambda r: httpx.Response(200, json=YOUTUBE_VIDEO_NO_MAXRES_RESPONSE)],
    )
    def test_lookup(self, client: TestClient):
        response = client.get("/api/videos/lookup", params={"url": "https://www.youtube.com/watch?v=ILzo07ipH40"})

        assert response.status_code == 200
        data = response.json()
        assert data["video_id"] == "ILzo07ipH40"
        assert data["duration"] == 36000
        assert data["thumbnail"].endswith("hqdefault.jpg")

    def test_lookup_invalid_url(self, client: TestClient):
        response = client.get("/api/videos/lookup", params={"url": "https://vimeo.com/1"})

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidInputError"

    def test_lookup_not_found(self, client: TestClient):
        response = client.get("/api/videos/lookup", params={"url": "dQw4w9WgXcQ"})

        assert response.status_code == 404

    @pytest.mark.parametrize("youtube_handler", [lambda r: httpx.Response(503)])
    def test_lookup_provider_down(self, client: TestClient):
        response = client.get("/api/videos/lookup", params={"url": "dQw4w9WgXcQ"})

        assert response.status_code == 404


@pytest.mark.integration
class TestHealthAPI:
    def test_health(self, client: TestClient):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert data["checks"]["database"]["status"] == "ok"
