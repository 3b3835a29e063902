from __future__ import annotations

import httpx
from fastapi.testclient import TestClient

from uptime_checker.auth import SESSION_COOKIE, hash_password
from uptime_checker.config import Settings
from uptime_checker.errors import StoreFailure
from uptime_checker.main import create_app
from uptime_checker.services.store import MemoryStore


def _settings(**overrides) -> Settings:
    values = dict(
        STORE_BACKEND="memory",
        SCHEDULER_ENABLED=False,
        COOKIE_SECURE=False,
        ADMIN_PASSWORD="s3cret",
        SESSION_SECRET="test-secret",
    )
    values.update(overrides)
    return Settings(**values)


def _client(store: MemoryStore | None = None, **overrides) -> TestClient:
    app = create_app(
        _settings(**overrides),
        store=store or MemoryStore(),
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200))),
    )
    return TestClient(app)


def _login(client: TestClient, password: str = "s3cret") -> httpx.Response:
    return client.post("/api/login", json={"password": password})


def test_health_and_dashboard() -> None:
    with _client(DASHBOARD_REFRESH_S=15) as client:
        assert client.get("/health").json() == {"status": "ok"}
        r = client.get("/")
        assert r.status_code == 200
        assert "text/html" in r.headers["content-type"]
        assert "const REFRESH_MS = 15 * 1000;" in r.text


def test_add_website_requires_session() -> None:
    with _client() as client:
        r = client.post("/api/websites", json={"name": "Example", "url": "https://example.com"})
        assert r.status_code == 401
        assert client.get("/api/websites").json() == []


def test_login_logout_and_auth_status() -> None:
    with _client() as client:
        assert client.get("/api/auth-status").json() == {"authenticated": False}

        r = _login(client, "wrong")
        assert r.status_code == 401
        assert r.json() == {"success": False, "message": "Invalid password"}

        r = _login(client)
        assert r.status_code == 200
        assert r.json() == {"success": True}
        assert SESSION_COOKIE in r.cookies
        assert client.get("/api/auth-status").json() == {"authenticated": True}

        assert client.post("/api/logout").json() == {"success": True}
        client.cookies.clear()
        assert client.get("/api/auth-status").json() == {"authenticated": False}


def test_forged_session_cookie_is_rejected() -> None:
    with _client() as client:
        forged = {"Cookie": f"{SESSION_COOKIE}=abcdefghijklmnop"}
        assert client.get("/api/auth-status", headers=forged).json() == {"authenticated": False}
        r = client.post("/api/websites", headers=forged, json={"name": "X", "url": "https://x.example"})
        assert r.status_code == 401


def test_login_with_password_hash() -> None:
    with _client(ADMIN_PASSWORD="", ADMIN_PASSWORD_HASH=hash_password("hashed-pass")) as client:
        assert _login(client, "s3cret").status_code == 401
        assert _login(client, "hashed-pass").status_code == 200


def test_login_without_configured_password_fails() -> None:
    with _client(ADMIN_PASSWORD="") as client:
        r = _login(client)
        assert r.status_code == 500
        assert r.json() == {"success": False, "message": "Login failed"}


def test_add_list_check_and_status_flow() -> None:
    with _client() as client:
        _login(client)

        r = client.post("/api/websites", json={"name": "Example", "url": "https://example.com"})
        assert r.status_code == 200
        site = r.json()
        assert set(site) == {"id", "name", "url", "createdAt"}

        assert client.get("/api/websites").json() == [site]

        r = client.post("/api/check", json={"websiteId": site["id"]})
        assert r.status_code == 200
        assert r.json() == {"success": True}

        rows = client.get("/api/status").json()
        assert len(rows) == 1
        row = rows[0]
        assert row["id"] == site["id"]
        assert row["currentStatus"]["status"] == "up"
        assert row["currentStatus"]["statusCode"] == 200
        assert len(row["history"]) == 1
        assert row["uptimePercent"] == 100
        assert row["averageResponseTimeMs"] >= 0


def test_add_invalid_url_is_client_error() -> None:
    with _client() as client:
        _login(client)
        r = client.post("/api/websites", json={"name": "Bad", "url": "not-a-url"})
        assert r.status_code == 400
        assert r.json() == {"detail": "Invalid URL format"}
        r = client.post("/api/websites", json={"url": "https://example.com"})
        assert r.status_code == 400
        assert client.get("/api/websites").json() == []


def test_check_unknown_site_is_not_found() -> None:
    with _client() as client:
        r = client.post("/api/check", json={"websiteId": "missing"})
        assert r.status_code == 404
        assert r.json() == {"detail": "Website not found"}


class _BrokenStore(MemoryStore):
    async def get(self, key: str) -> str | None:
        raise StoreFailure("backend unavailable")


def test_store_failure_is_server_error() -> None:
    with _client(store=_BrokenStore()) as client:
        assert client.get("/api/status").status_code == 500
        assert client.get("/api/websites").status_code == 500


def test_cors_preflight() -> None:
    with _client() as client:
        r = client.options(
            "/api/status",
            headers={"Origin": "https://elsewhere.example", "Access-Control-Request-Method": "GET"},
        )
        assert r.status_code == 200
        assert r.headers["access-control-allow-origin"] == "*"
