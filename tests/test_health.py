# mypy: ignore-errors
# tests/test_health.py
from typing import Any


def test_health_reports_ok(client: Any) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_root_describes_the_api(client: Any) -> None:
    """The root endpoint points clients at the interactive docs."""
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["docs"] == "/docs"
