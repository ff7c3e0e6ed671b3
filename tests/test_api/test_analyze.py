"""Tests for the analysis API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import composebox.deps as deps
from composebox.main import app


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_analyze_returns_all_views(client: TestClient, full_stack_yaml: str) -> None:
    resp = client.post("/api/analyze", json={"content": full_stack_yaml})
    assert resp.status_code == 200
    data = resp.json()
    assert data["overview"] == {"services_count": 3, "networks_count": 2, "volumes_count": 2}
    assert [s["name"] for s in data["structure"]["services"]] == ["web", "api", "db"]
    assert data["validation"]["is_valid"] is True
    assert [i["code"] for i in data["validation"]["issues"]] == ["service-common-port"]


def test_overview(client: TestClient) -> None:
    resp = client.post(
        "/api/analyze/overview",
        json={"content": "services:\n  web:\n    image: nginx\nvolumes:\n  data:\n"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"services_count": 1, "networks_count": 0, "volumes_count": 1}


def test_structure(client: TestClient, full_stack_yaml: str) -> None:
    resp = client.post("/api/analyze/structure", json={"content": full_stack_yaml})
    assert resp.status_code == 200
    web = resp.json()["services"][0]
    assert web["image"] == "nginx:1.25"
    assert web["ports"][0] == {"host": "80", "container": "80"}
    assert web["networks"] == [{"name": "frontend", "ip": "172.20.0.10"}]


def test_validate_uses_type_for_severity(client: TestClient) -> None:
    resp = client.post(
        "/api/analyze/validate",
        json={"content": "services:\n  web:\n    image: nginx:latest\n"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["is_valid"] is True
    assert data["has_warnings"] is True
    first = data["issues"][0]
    assert first["type"] == "warning"
    assert first["code"] == "compose-latest-tag"
    assert first["line"] == 3
    assert "severity" not in first


def test_empty_body_means_empty_document(client: TestClient) -> None:
    resp = client.post("/api/analyze/validate", json={})
    assert resp.status_code == 200
    data = resp.json()
    assert data["is_valid"] is False
    assert data["issues"][0]["code"] == "compose-missing-services"


def test_oversized_document_rejected(
    client: TestClient, monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(deps, "_max_document_bytes", 16)
    resp = client.post("/api/analyze", json={"content": "services:\n  web:\n    image: x\n"})
    assert resp.status_code == 413
    assert "limit is 16" in resp.json()["detail"]


def test_health(client: TestClient) -> None:
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
