"""
Tests for the health endpoints
"""

import pytest


@pytest.mark.parametrize("path", ["/api/health", "/api", "/"])
def test_health_check(client, path):
    response = client.get(path)
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "OK"
    assert data["storage"] == "In-memory (not persistent)"
    assert data["configured"] is True
    assert data["reachable"] is True
    assert "timestamp" in data


def test_health_reports_unreachable_store(client, store):
    store.fail_reads = True

    data = client.get("/api/health").json()
    assert data["status"] == "OK"
    assert data["reachable"] is False
