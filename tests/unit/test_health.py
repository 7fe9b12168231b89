"""상태 확인 라우트 테스트"""

from fastapi.testclient import TestClient

from nutrisync.main import app

client = TestClient(app)


def test_health_endpoint():
    """API 상태 확인 엔드포인트 테스트"""
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "timestamp" in data


def test_root_health_endpoint():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_healthz_endpoint():
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
