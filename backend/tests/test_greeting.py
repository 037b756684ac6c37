from backend.app.config.settings import settings


def test_root_returns_default_greeting(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Hello, World!"
    assert response.headers["content-type"] == "text/plain; charset=utf-8"


def test_root_ignores_query_parameters(client):
    response = client.get("/", params={"name": "ignored"})
    assert response.status_code == 200
    assert response.text == "Hello, World!"


def test_root_after_edit(client, monkeypatch):
    """The edited greeting is served verbatim, with no trailing newline."""
    monkeypatch.setattr(settings, "greeting", "Hi World.")
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Hi World."


def test_unknown_route_is_404_envelope(client):
    response = client.get("/nope")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["message"] == "Not Found"
    assert data["request_id"] == response.headers["X-Request-ID"]


def test_post_root_is_405(client):
    response = client.post("/")
    assert response.status_code == 405
    assert response.json()["code"] == "METHOD_NOT_ALLOWED"
    assert "GET" in response.headers["allow"]
