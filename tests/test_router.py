from werkzeug.test import Client

from linkshort.fixed_window import FixedWindowGlobalLimiter
from linkshort.handler import Handler
from linkshort.model import URL
from linkshort.router import create_app


class StubService:
    def __init__(self, record=None):
        self.record = record

    def save_url(self, data):
        return "test"

    def get_url(self, short_url):
        return self.record


def test_router_health_and_panic():
    app = create_app(Handler(StubService()), FixedWindowGlobalLimiter(100, 60))
    client = Client(app)

    health = client.get("/health")
    assert health.status_code == 200
    assert health.get_json() == {"status": "OK"}

    panic = client.get("/panic")
    assert panic.status_code == 500
    assert "Internal Server Error" in panic.get_data(as_text=True)


def test_router_delegates_to_handler():
    record = URL(short_url="1", original_url="https://example.com")
    client = Client(create_app(Handler(StubService(record)), FixedWindowGlobalLimiter(100, 60)))
    response = client.get("/1")
    assert response.status_code == 302
    assert response.headers["Location"] == "https://example.com"


def test_router_rate_limits():
    client = Client(create_app(Handler(StubService()), FixedWindowGlobalLimiter(1, 60)))
    assert client.get("/health").status_code == 200
    limited = client.get("/health")
    assert limited.status_code == 429
    assert limited.get_json()["errors"][0]["title"] == "Too Many Requests"


def test_router_default_limiter_burst_of_five():
    client = Client(create_app(Handler(StubService())))
    statuses = [client.get("/health").status_code for _ in range(6)]
    assert statuses == [200, 200, 200, 200, 200, 429]