# tests/conftest.py

"""
Pytest Fixtures - Shared test configuration and data

All network access goes through fake fetchers that return canned
``httpx.Response`` objects, so no test touches pipa.org.uk.
"""

from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from pipa_lookup.config import Settings
from pipa_lookup.pipelines.pipa_client import PipaClient
from pipa_lookup.services.file_cache import FileTagCache
from pipa_lookup.services.tag_lookup import TagLookupService

FIXTURES_DIR = Path(__file__).parent / "fixtures"

TAG_ID = "40000"
TAG_PATH = "/tags/40000/"
REPORT_URL = "https://hub.pipa.org.uk/public/reports/report/abc123"
SECOND_REPORT_URL = "https://hub.pipa.org.uk/public/reports/report/def456"


# =============================================================================
# HTML FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def report_html():
    """Full inspection report page (hub.pipa.org.uk layout)."""
    return (FIXTURES_DIR / "report_page.html").read_text(encoding="utf-8")


@pytest.fixture(scope="session")
def tag_html():
    """Tag check page with a green Pass badge and two annual reports."""
    return (FIXTURES_DIR / "tag_page.html").read_text(encoding="utf-8")


# =============================================================================
# FAKE UPSTREAM
# =============================================================================

class FakePipa:
    """
    Routes fetcher calls to canned responses by URL.

    Unrouted URLs answer 404. Every call is recorded in ``calls``.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def route(self, url, response):
        self.routes[url] = response
        return self

    def route_search(self, tag_id, payload, status_code=200):
        url = PipaClient(fetcher=self, config=Settings()).build_search_url(tag_id)
        return self.route(url, httpx.Response(status_code, json=payload))

    def route_tag(self, tag_id, html, tag_path=None):
        tag_path = tag_path or f"/tags/{tag_id}/"
        self.route_search(tag_id, {"success": "true", "message": tag_path})
        return self.route(f"https://www.pipa.org.uk{tag_path}", httpx.Response(200, html=html))

    def urls(self):
        return [url for url, _ in self.calls]

    async def __call__(self, url, *, headers=None, follow_redirects=True):
        self.calls.append((url, follow_redirects))
        response = self.routes.get(url)
        if response is None:
            return httpx.Response(404, text="Not Found")
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_pipa():
    return FakePipa()


@pytest.fixture
def pipa_client(fake_pipa):
    return PipaClient(fetcher=fake_pipa, config=Settings())


@pytest.fixture
def full_upstream(fake_pipa, tag_html, report_html):
    """Tag 40000 plus both of its report pages."""
    fake_pipa.route_tag(TAG_ID, tag_html)
    fake_pipa.route(REPORT_URL, httpx.Response(200, html=report_html))
    fake_pipa.route(SECOND_REPORT_URL, httpx.Response(200, html=report_html))
    return fake_pipa


# =============================================================================
# CACHE + SERVICE FIXTURES
# =============================================================================

@pytest.fixture
def file_cache(tmp_path):
    return FileTagCache(tmp_path / "cache", host="pipa.org.uk", ttl_seconds=86400)


@pytest.fixture
def lookup_service(pipa_client, file_cache):
    return TagLookupService(pipa_client, file_cache)


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def api_client(monkeypatch, tmp_path, full_upstream):
    """TestClient whose lifespan-built services are swapped for fakes."""
    from pipa_lookup.main import app

    monkeypatch.setattr("pipa_lookup.main.build_cache", lambda config: None)

    with TestClient(app) as test_client:
        client = PipaClient(fetcher=full_upstream, config=Settings())
        cache = FileTagCache(tmp_path / "api-cache")
        app.state.pipa_client = client
        app.state.tag_cache = cache
        app.state.tag_lookup = TagLookupService(client, cache)
        yield test_client
