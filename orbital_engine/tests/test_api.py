"""
Tests for the HTTP service, with an offline ephemeris and a private TLE cache.
"""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from orbital_engine.api.main import create_app
from orbital_engine.core import propagator
from orbital_engine.data.stations import default_tle_cache
from orbital_engine.utils.config import Settings
from orbital_engine.utils.constants import AU_SCENE, PLANETS

from conftest import ISS_LINE1, ISS_LINE2, FakeEphemeris

AT = "2024-01-01T00:00:00Z"


@pytest.fixture
def cache():
    return default_tle_cache()


@pytest.fixture
def client(cache):
    app = create_app(tle_cache=cache, ephemeris=FakeEphemeris(), settings=Settings())
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_list_comets_sorted_by_distance(client):
    response = client.get("/api/comets", params={"at": AT})
    assert response.status_code == 200
    comets = response.json()
    assert len(comets) == 8
    distances = [c["distance_au"] for c in comets]
    assert distances == sorted(distances)
    assert all(c["datetime_utc"].startswith("2024-01-01T00:00:00") for c in comets)


def test_comet_position(client):
    response = client.get("/api/comets/halley/position", params={"at": AT})
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Halley's Comet"
    assert body["visible"] is False
    assert body["scene_position"]["x"] == pytest.approx(body["position_au"]["x"] * AU_SCENE)
    assert body["distance_label"].endswith("AU")


def test_comet_orbit(client):
    response = client.get("/api/comets/encke/orbit", params={"segments": 32})
    assert response.status_code == 200
    assert len(response.json()["points_au"]) == 33


def test_unknown_ids_are_404(client):
    assert client.get("/api/comets/nope/position").status_code == 404
    assert client.get("/api/stations/mir/position").status_code == 404
    assert client.get("/api/missions/pioneer10/position").status_code == 404


def test_station_position(client):
    response = client.get("/api/stations/iss/position", params={"at": AT})
    assert response.status_code == 200
    body = response.json()
    assert body["tle_name"] == "ISS (ZARYA)"
    assert 300.0 < body["altitude_km"] < 500.0
    assert body["velocity_kms"] == pytest.approx(7.66, abs=0.05)
    assert isinstance(body["in_shadow"], bool)
    assert body["region"]


def test_station_ground_track(client):
    response = client.get("/api/stations/tiangong/ground-track", params={"at": AT, "steps": 10})
    assert response.status_code == 200
    points = response.json()
    assert len(points) == 11
    assert all(abs(p["latitude"]) <= 41.5 for p in points)


def test_replace_tle(client, cache):
    payload = {"line1": ISS_LINE1, "line2": ISS_LINE2, "name": "ISS (FRESH)"}
    response = client.put("/api/stations/iss/tle", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["inclination"] == pytest.approx(51.6416)
    assert body["epoch"].startswith("2008-09-20T12:25")
    assert cache.get("iss").line2 == ISS_LINE2

    position = client.get("/api/stations/iss/position", params={"at": AT}).json()
    assert position["tle_name"] == "ISS (FRESH)"


def test_replace_tle_rejects_bad_checksum(client, cache):
    before = cache.get("iss")
    payload = {"line1": ISS_LINE1, "line2": ISS_LINE2[:68] + "0"}
    response = client.put("/api/stations/iss/tle", json=payload)
    assert response.status_code == 422
    assert "checksum" in response.json()["detail"]
    assert cache.get("iss") is before


def test_replace_tle_rejects_short_lines(client):
    response = client.put("/api/stations/iss/tle", json={"line1": "1 25544U", "line2": "2 25544"})
    assert response.status_code == 422


def test_replace_tle_rejects_other_satellite(client, cache):
    before = cache.get("iss")
    tiangong = cache.get("tiangong")
    payload = {"line1": tiangong.line1, "line2": tiangong.line2}
    response = client.put("/api/stations/iss/tle", json=payload)
    assert response.status_code == 422
    assert "48274" in response.json()["detail"]
    assert cache.get("iss") is before


def test_station_position_uses_one_element_set(client, cache, monkeypatch):
    snapshot = cache.get("iss")
    tiangong = cache.get("tiangong")
    original_get = cache.get

    def get_then_replace(sat_id):
        element_set = original_get(sat_id)
        cache.replace("iss", tiangong.line1, tiangong.line2, name="SWAPPED")
        return element_set

    monkeypatch.setattr(cache, "get", get_then_replace)
    body = client.get("/api/stations/iss/position", params={"at": AT}).json()

    expected = propagator.propagate(snapshot, datetime(2024, 1, 1, tzinfo=timezone.utc))
    assert body["tle_name"] == snapshot.name
    assert body["latitude"] == pytest.approx(expected.latitude)
    assert body["longitude"] == pytest.approx(expected.longitude)
    assert body["altitude_km"] == pytest.approx(expected.altitude)


def test_mission_position_before_launch_is_null(client):
    response = client.get("/api/missions/voyager1/position", params={"at": "1970-01-01T00:00:00Z"})
    assert response.status_code == 200
    body = response.json()
    assert body["position_au"] is None
    assert body["distance_au"] is None


def test_mission_position(client):
    response = client.get("/api/missions/voyager1/position", params={"at": "2000-01-01T00:00:00Z"})
    body = response.json()
    assert body["distance_au"] == pytest.approx(76.0, abs=0.5)
    assert body["light_time_hours"] == pytest.approx(body["distance_au"] * 8.317 / 60.0)


def test_mission_milestones(client):
    response = client.get("/api/missions/voyager2/milestones", params={"at": "1982-01-01T00:00:00Z"})
    assert response.status_code == 200
    names = [m["name"] for m in response.json()]
    assert names == ["Launch", "Jupiter Flyby", "Saturn Flyby"]
    assert response.json()[1]["body"] == "jupiter"


def test_body_positions(client):
    response = client.get("/api/bodies/positions", params={"at": AT})
    assert response.status_code == 200
    bodies = {b["body"]: b["scene_position"] for b in response.json()["bodies"]}
    assert set(bodies) == set(PLANETS) | {"moon"}
    assert bodies["earth"]["x"] == pytest.approx(AU_SCENE)
    assert bodies["moon"]["y"] == pytest.approx(0.00257 * AU_SCENE)
