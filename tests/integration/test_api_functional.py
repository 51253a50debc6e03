from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from brainmap.api.main import app

APP = Path(__file__).resolve().parents[1] / "fixtures" / "app"
ROOT = APP / "brain"
APP_TESTS = APP.parent / "app_tests"


@pytest.fixture
def client(monkeypatch) -> TestClient:
    monkeypatch.setenv("BRAIN_ROOT", str(ROOT))
    monkeypatch.setenv("BRAIN_TEST_DIRECTORY", str(APP_TESTS))
    monkeypatch.delenv("BRAIN_SOURCE_ROOT", raising=False)
    monkeypatch.delenv("BRAIN_TEST_MINIMUM_COVERAGE", raising=False)
    return TestClient(app)


def test_api_health_map_and_report(client: TestClient) -> None:
    health_resp = client.get("/health")
    assert health_resp.status_code == 200
    assert health_resp.json()["root_exists"] is True

    map_resp = client.get("/map")
    assert map_resp.status_code == 200
    payload = map_resp.json()
    assert [domain["name"] for domain in payload["domains"]] == ["example", "example2", "example3"]
    assert payload["domains"][1]["processes"][0]["is_chained"] is True
    assert payload["tested"]["ExampleTask"] is True
    assert payload["tested"]["ExampleTask2"] is False

    report_resp = client.get("/report", params={"width": 90, "plain": True})
    assert report_resp.status_code == 200
    report = report_resp.json()
    assert report["lines"][0].startswith("  EXAMPLE   PROC  TESTED  ExampleProcess ")
    assert all("<fg=" not in line for line in report["lines"])
    assert report["coverage"]["tested"] == 3
    assert report["coverage"]["total"] == 7
    assert report["coverage"]["passed"] is None


def test_report_keeps_markup_and_verdict(client: TestClient, monkeypatch) -> None:
    monkeypatch.setenv("BRAIN_TEST_MINIMUM_COVERAGE", "95")

    report = client.get("/report", params={"width": 90}).json()

    assert report["lines"][0].startswith("  <fg=#6C7280;options=bold>EXAMPLE</>")
    assert report["coverage"]["passed"] is False
    assert any("FAIL" in line for line in report["lines"])


def test_missing_root_maps_to_404(client: TestClient, monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BRAIN_ROOT", str(tmp_path / "nowhere"))

    assert client.get("/health").json()["root_exists"] is False
    response = client.get("/map")
    assert response.status_code == 404
    assert "Brain directory not found" in response.json()["detail"]


def test_empty_brain_report_maps_to_409(client: TestClient, monkeypatch) -> None:
    monkeypatch.setenv("BRAIN_ROOT", str(APP / "empty_brain"))

    assert client.get("/map").json()["domains"] == []
    response = client.get("/report")
    assert response.status_code == 409
    assert response.json()["detail"] == "The brain map is empty."
