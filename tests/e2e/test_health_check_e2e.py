"""E2E smoke test for health check endpoint using Playwright.

Run with:
    pytest -m e2e --base-url http://localhost:8000

Requires:
    pip install pytest-playwright
    playwright install chromium
"""

import json

import pytest

pytestmark = [pytest.mark.e2e]


def test_health_check_returns_json(page):
    """The browser shows the raw JSON health report."""
    page.goto("/health")

    body_text = page.text_content("body")
    assert body_text is not None

    data = json.loads(body_text)
    assert data["status"] == "healthy"
    assert set(data["services"]) == {"database", "cache"}
    assert "timestamp" in data


def test_health_check_response_has_correlation_id(page):
    response = page.goto("/health")
    assert "x-request-id" in response.headers
