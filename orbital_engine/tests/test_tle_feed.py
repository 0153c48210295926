"""
Tests for CelesTrak ingestion using a fake requests session.
"""
import pytest
import requests

from orbital_engine.core.tle_parser import SatelliteElementSet, TLECache, TLEParseError
from orbital_engine.utils.tle_feed import TLEFeed

from conftest import ISS_LINE1, ISS_LINE2, ISS_NAME

STALE = SatelliteElementSet(
    "ISS (STALE)",
    "1 25544U 98067A   24001.50000000  .00016717  00000-0  10270-3 0  9997",
    "2 25544  51.6400 100.0000 0001234  90.0000 270.0000 15.50000000000008",
)


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def cache():
    return TLECache({"iss": STALE})


def test_fetch_text_sends_catalog_query():
    session = FakeSession(FakeResponse("payload"))
    feed = TLEFeed(TLECache(), session=session, base_url="https://example.test/gp.php", timeout=5)
    assert feed.fetch_text(25544) == "payload"
    assert session.requests == [
        ("https://example.test/gp.php", {"CATNR": 25544, "FORMAT": "tle"}, 5)
    ]


def test_refresh_replaces_cached_lines(cache):
    text = f"{ISS_NAME}\r\n{ISS_LINE1}\r\n{ISS_LINE2}\r\n"
    feed = TLEFeed(cache, session=FakeSession(FakeResponse(text)))

    assert feed.refresh("iss", 25544) is True
    updated = cache.get("iss")
    assert (updated.name, updated.line1, updated.line2) == (ISS_NAME, ISS_LINE1, ISS_LINE2)
    assert cache.parsed("iss").inclination == pytest.approx(51.6416)


def test_network_failure_keeps_stale_data(cache, caplog):
    feed = TLEFeed(cache, session=FakeSession(error=requests.ConnectionError("offline")))
    assert feed.refresh("iss", 25544) is False
    assert cache.get("iss") is STALE
    assert "download failed" in caplog.text


def test_http_error_keeps_stale_data(cache):
    feed = TLEFeed(cache, session=FakeSession(FakeResponse("Not found", status_code=404)))
    assert feed.refresh("iss", 25544) is False
    assert cache.get("iss") is STALE


def test_invalid_payload_keeps_stale_data(cache, caplog):
    broken = ISS_LINE2[:68] + "0"
    feed = TLEFeed(cache, session=FakeSession(FakeResponse(f"{ISS_LINE1}\n{broken}\n")))
    assert feed.refresh("iss", 25544) is False
    assert cache.get("iss") is STALE
    assert "Rejected TLE" in caplog.text


def test_fetch_requires_matching_catalog_number():
    feed = TLEFeed(TLECache(), session=FakeSession(FakeResponse(f"{ISS_LINE1}\n{ISS_LINE2}")))
    assert feed.fetch(25544).catalog_number == 25544
    with pytest.raises(TLEParseError, match="NORAD 48274"):
        feed.fetch(48274)


def test_refresh_all(cache):
    feed = TLEFeed(cache, session=FakeSession(FakeResponse(f"{ISS_LINE1}\n{ISS_LINE2}")))
    assert feed.refresh_all({"iss": 25544, "tiangong": 48274}) == {"iss": True, "tiangong": False}
    assert "tiangong" not in cache


def test_lazy_session_has_user_agent():
    feed = TLEFeed(TLECache())
    session = feed._get_session()
    assert isinstance(session, requests.Session)
    assert session.headers["User-Agent"] == "OrbitalEngine/1.0"
    assert feed._get_session() is session
