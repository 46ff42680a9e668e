from fastapi.testclient import TestClient

from app import dependencies as deps
from app.main import app
from app.schemas.webhook import SyncResult
from app.security import API_KEY_NAME, get_settings
from app.settings import Settings


class FakeSyncService:
    def __init__(self):
        self.resyncs = 0

    def full_resync(self):
        self.resyncs += 1
        return SyncResult(upserted=["posts/a.md"])


def test_root_endpoint_runs_lifespan():
    with TestClient(app) as client:
        res = client.get("/")
        assert res.status_code == 200
        assert res.json() == {"message": "Blog Sync API is running"}
        assert not app.state.content_client.http.is_closed

    assert app.state.content_client.http.is_closed


def test_lifespan_can_run_twice():
    with TestClient(app):
        pass
    with TestClient(app) as client:
        assert client.get("/").status_code == 200
        assert not app.state.content_client.http.is_closed


def test_sync_route_enforces_api_key():
    fake = FakeSyncService()
    original_overrides = dict(app.dependency_overrides)
    app.dependency_overrides[deps.get_sync_service] = lambda: fake
    app.dependency_overrides[get_settings] = lambda: Settings(BLOG_API_KEY="secret")
    try:
        with TestClient(app) as client:
            res = client.post("/sync")
            assert res.status_code == 403

            res = client.post("/sync", headers={API_KEY_NAME: "wrong"})
            assert res.status_code == 403

            res = client.post("/sync", headers={API_KEY_NAME: "secret"})
            assert res.status_code == 200
            assert res.json()["upserted"] == ["posts/a.md"]
    finally:
        app.dependency_overrides = original_overrides

    assert fake.resyncs == 1


def test_webhook_route_is_public_but_signed():
    original_overrides = dict(app.dependency_overrides)
    app.dependency_overrides[deps.get_sync_service] = lambda: FakeSyncService()
    app.dependency_overrides[get_settings] = lambda: Settings(
        GITHUB_WEBHOOK_SECRET="s3cret", BLOG_API_KEY="secret"
    )
    try:
        with TestClient(app) as client:
            res = client.post(
                "/api/blog-webhook",
                content=b"{}",
                headers={"X-Hub-Signature-256": "sha256=00"},
            )
            assert res.status_code == 403
            assert res.json()["detail"] == "Invalid signature"
    finally:
        app.dependency_overrides = original_overrides
