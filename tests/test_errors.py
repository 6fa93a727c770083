from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "HTTP_ERROR"
    assert data["error"] == "The page /non-existent-route does not exist"

def test_validation_error_structure():
    from pydantic import BaseModel

    class Item(BaseModel):
        name: str
        price: int

    @app.post("/test-validation")
    def create_item(item: Item):
        return item

    response = client.post("/test-validation", json={"name": "foo", "price": "invalid"})
    assert response.status_code == 422
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert "details" in data
    assert len(data["details"]) > 0

def test_custom_exception():
    from app.core.exceptions import NotFoundError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise NotFoundError(message="Item not found")

    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["error"] == "Item not found"

def test_duplicate_email_maps_to_conflict():
    from app.core.exceptions import DuplicateEmailError

    @app.get("/test-duplicate-error")
    def trigger_duplicate():
        raise DuplicateEmailError("ann@ex.com")

    response = client.get("/test-duplicate-error")
    assert response.status_code == 409
    assert response.json()["details"] == {"email": "ann@ex.com"}

def test_security_headers(client):
    response = client.get("/live")
    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "X-Process-Time" in response.headers

def test_oversized_body_rejected(client, monkeypatch):
    from app.core.config import settings
    monkeypatch.setattr(settings, "MAX_REQUEST_BODY_BYTES", 64)

    response = client.post("/api/users", json={"name": "A" * 100, "email": "ann@ex.com"})

    assert response.status_code == 413
    assert response.json()["code"] == "PAYLOAD_TOO_LARGE"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert client.get("/api/users").json()["count"] == 0

def test_default_body_limit_is_ten_megabytes():
    from app.core.config import Settings
    assert Settings().MAX_REQUEST_BODY_BYTES == 10 * 1024 * 1024
