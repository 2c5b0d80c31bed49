"""
API Endpoint Tests - PIPA Tag Lookup
tests/test_api.py

Tests for the HTTP surface: tag lookup, single report fetch, health and
unknown routes. Upstream pages are served by the fake fetcher.
"""

from conftest import REPORT_URL, TAG_ID


# =============================================================================
# HEALTH
# =============================================================================

class TestHealth:

    def test_health(self, api_client):
        response = api_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_cache_status(self, api_client):
        response = api_client.get("/health/cache")
        assert response.status_code == 200
        data = response.json()
        assert data["backend"] == "file"
        assert data["connected"] is True
        assert data["host"] == "pipa.org.uk"
        assert data["ttl_seconds"] == 86400

    def test_cache_status_without_cache(self, api_client):
        api_client.app.state.tag_cache = None
        data = api_client.get("/health/cache").json()
        assert data["backend"] == "none"
        assert data["connected"] is False


# =============================================================================
# TAG LOOKUP
# =============================================================================

class TestTagEndpoint:

    def test_found_with_details(self, api_client):
        response = api_client.get(f"/tag/{TAG_ID}")
        assert response.status_code == 200
        data = response.json()
        assert data["found"] is True
        assert data["tagId"] == TAG_ID
        assert data["statusClass"] == "green"
        assert "fromCache" not in data
        assert data["annualReports"][0]["details"]["id"] == "431119-v1"
        assert data["annualReports"][0]["details"]["userLimits"]["upTo1_0m"] == 7

    def test_second_request_served_from_cache(self, api_client):
        api_client.get(f"/tag/{TAG_ID}")
        data = api_client.get(f"/tag/{TAG_ID}").json()
        assert data["fromCache"] is True

    def test_use_cache_false(self, api_client):
        api_client.get(f"/tag/{TAG_ID}")
        data = api_client.get(f"/tag/{TAG_ID}", params={"use_cache": "false"}).json()
        assert "fromCache" not in data

    def test_without_details(self, api_client):
        data = api_client.get(f"/tag/{TAG_ID}", params={"details": "false"}).json()
        assert data["found"] is True
        assert "details" not in data["annualReports"][0]

    def test_invalid_tag_id_is_200_with_error(self, api_client):
        response = api_client.get("/tag/abc")
        assert response.status_code == 200
        assert response.json() == {"found": False, "error": "Invalid tag ID - must be all numbers"}

    def test_unknown_tag(self, api_client):
        data = api_client.get("/tag/99999").json()
        assert data["found"] is False
        assert data["tagId"] == "99999"
        assert data["error"] == "Search API error: 404"


# =============================================================================
# REPORT FETCH
# =============================================================================

class TestReportEndpoint:

    def test_report(self, api_client):
        data = api_client.get("/report", params={"url": REPORT_URL}).json()
        assert data["found"] is True
        assert data["reportId"] == "431119-v1"
        assert data["inspectionSections"]["structure"][3]["label"] == "Trough Depth"

    def test_foreign_host(self, api_client):
        data = api_client.get("/report", params={"url": "https://example.com/report"}).json()
        assert data == {"found": False, "error": "Invalid report URL"}

    def test_missing_url_parameter(self, api_client):
        response = api_client.get("/report")
        assert response.status_code == 422
        assert "url" in response.json()["error"]


# =============================================================================
# UNKNOWN ROUTES
# =============================================================================

def test_unknown_path(api_client):
    response = api_client.get("/nope")
    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}
