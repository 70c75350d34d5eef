"""
Tests for the revalidation webhook.
"""

import json

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from generate_metadata.constants import DEFAULT_REVALIDATE_BASE_PATH, HTTP_METHODS
from generate_metadata.schemas.metadata import MetadataDocument
from generate_metadata.services.cache_service import MetadataCache
from generate_metadata.services.webhook_service import WebhookAuthenticator, extract_bearer_token, verify_bearer_token
from generate_metadata.utils.crypto import sign_payload
from utils.mocks import RevalidateRecorder

SECRET = "test-webhook-secret"
TIMESTAMP = "1700000000000"
URL = f"http://test{DEFAULT_REVALIDATE_BASE_PATH}"


def update_body(path="/blog/hello/", event_type="metadata_update") -> str:
    return json.dumps({"_type": event_type, "path": path, "metadataRevisionId": "rev_1"})


def bearer(secret=SECRET) -> dict:
    return {"Authorization": f"Bearer {secret}"}


def hmac_headers(body: str, secret=SECRET) -> dict:
    return {
        "X-Webhook-Signature": sign_payload(secret, TIMESTAMP, body),
        "X-Webhook-Timestamp": TIMESTAMP,
    }


@pytest.fixture
async def populated_core(core):
    """Core with cached entries for /blog/hello and /other."""
    await core.get_metadata("/blog/hello")
    await core.get_metadata("/other")
    return core


def client_for(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestBearerToken:
    """Tests for bearer token helpers."""

    def test_extract(self):
        assert extract_bearer_token("Bearer abc") == "abc"
        assert extract_bearer_token("Basic abc") is None
        assert extract_bearer_token(None) is None

    def test_verify(self):
        assert verify_bearer_token(SECRET, f"Bearer {SECRET}") is True
        assert verify_bearer_token(SECRET, "Bearer wrong") is False
        assert verify_bearer_token(SECRET, SECRET) is False


class TestWebhookAuthenticator:
    """Tests for HMAC-first, bearer-fallback authentication."""

    def test_hmac(self):
        body = update_body()
        headers = {key.lower(): value for key, value in hmac_headers(body).items()}
        assert WebhookAuthenticator(SECRET).authenticate(headers, body.encode()) is True

    def test_hmac_wins_over_wrong_bearer(self):
        body = update_body()
        headers = {key.lower(): value for key, value in hmac_headers(body).items()}
        headers["authorization"] = "Bearer wrong"
        assert WebhookAuthenticator(SECRET).authenticate(headers, body) is True

    def test_bad_hmac_falls_back_to_bearer(self):
        body = update_body()
        headers = {key.lower(): value for key, value in hmac_headers(body, secret="wrong").items()}
        headers["authorization"] = f"Bearer {SECRET}"
        assert WebhookAuthenticator(SECRET).authenticate(headers, body) is True

    def test_bad_hmac_without_bearer(self):
        body = update_body()
        headers = {key.lower(): value for key, value in hmac_headers(body, secret="wrong").items()}
        assert WebhookAuthenticator(SECRET).authenticate(headers, body) is False

    def test_signature_without_timestamp_rejected(self):
        body = update_body()
        headers = {"x-webhook-signature": sign_payload(SECRET, TIMESTAMP, body)}
        assert WebhookAuthenticator(SECRET).authenticate(headers, body) is False


class TestWebhookAuthentication:
    """Tests for webhook authentication over HTTP."""

    @pytest.mark.asyncio
    async def test_missing_secret_fails_closed(self, core):
        """Test that a webhook built without a secret answers 500 to everyone."""
        webhook = core.create_revalidate_app(webhook_secret=None)

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=update_body(), headers=bearer())

        assert response.status_code == 500
        assert response.json() == {"ok": False, "error": "Webhook secret is not configured"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", HTTP_METHODS)
    @pytest.mark.parametrize("credentials", ["none", "bearer", "hmac"])
    @pytest.mark.parametrize("url", [URL, "http://test/whatever"])
    async def test_missing_secret_checked_first(self, core, method, credentials, url):
        """Test that the secret check precedes authentication and routing for every verb."""
        webhook = core.create_revalidate_app(webhook_secret=None)
        body = update_body()
        headers = {"none": {}, "bearer": bearer(), "hmac": hmac_headers(body)}[credentials]

        async with client_for(webhook.app) as client:
            response = await client.request(method, url, content=body, headers=headers)

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_no_credentials(self, populated_core):
        webhook = populated_core.create_revalidate_app(webhook_secret=SECRET)

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=update_body())

        assert response.status_code == 401
        assert response.json() == {"ok": False, "error": "Unauthorized"}
        assert "/blog/hello" in populated_core.cache

    @pytest.mark.asyncio
    async def test_wrong_bearer(self, core):
        webhook = core.create_revalidate_app(webhook_secret=SECRET)

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=update_body(), headers=bearer("wrong"))

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_valid_hmac(self, populated_core):
        """Test HMAC verification over the raw body."""
        webhook = populated_core.create_revalidate_app(webhook_secret=SECRET)
        body = update_body()

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=body, headers=hmac_headers(body))

        assert response.status_code == 200
        assert "/blog/hello" not in populated_core.cache

    @pytest.mark.asyncio
    async def test_valid_hmac_with_invalid_bearer(self, populated_core):
        """Test that a valid signature authenticates even when the bearer token is wrong."""
        recorder = RevalidateRecorder()
        webhook = populated_core.create_revalidate_app(webhook_secret=SECRET, revalidate=recorder)
        body = update_body("/blog/hello")
        headers = {**hmac_headers(body), **bearer("wrong")}

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=body, headers=headers)

        assert response.status_code == 200
        assert response.json() == {"ok": True, "metadata": {"revalidated": True, "path": "/blog/hello"}}
        assert "/blog/hello" not in populated_core.cache
        assert recorder.paths == ["/blog/hello"]

    @pytest.mark.asyncio
    async def test_invalid_hmac_valid_bearer(self, core):
        webhook = core.create_revalidate_app(webhook_secret=SECRET)
        body = update_body()
        headers = {**hmac_headers(body, secret="wrong"), **bearer()}

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=body, headers=headers)

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_invalid_hmac_only(self, core):
        webhook = core.create_revalidate_app(webhook_secret=SECRET)
        body = update_body()

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=body, headers=hmac_headers(body, secret="wrong"))

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_auth_checked_before_route(self, core):
        """Test that unauthenticated requests to unknown routes get 401, not 404."""
        webhook = core.create_revalidate_app(webhook_secret=SECRET)

        async with client_for(webhook.app) as client:
            response = await client.post("http://test/somewhere/else", content=update_body())

        assert response.status_code == 401


class TestWebhookRouting:
    """Tests for route matching."""

    @pytest.mark.asyncio
    async def test_unknown_route(self, core):
        webhook = core.create_revalidate_app(webhook_secret=SECRET)

        async with client_for(webhook.app) as client:
            response = await client.post("http://test/somewhere/else", content=update_body(), headers=bearer())

        assert response.status_code == 404
        assert response.json() == {"ok": False, "error": "Not found"}

    @pytest.mark.asyncio
    async def test_wrong_method(self, core):
        webhook = core.create_revalidate_app(webhook_secret=SECRET)

        async with client_for(webhook.app) as client:
            response = await client.get(URL, headers=bearer())

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_trailing_slash_matches(self, core):
        webhook = core.create_revalidate_app(webhook_secret=SECRET)

        async with client_for(webhook.app) as client:
            response = await client.post(URL + "/", content=update_body(), headers=bearer())

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_custom_base_path(self, core):
        webhook = core.create_revalidate_app(webhook_secret=SECRET, base_path="hooks/revalidate/")

        async with client_for(webhook.app) as client:
            response = await client.post("http://test/hooks/revalidate", content=update_body(), headers=bearer())

        assert webhook.base_path == "/hooks/revalidate"
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_router_in_host_application(self, core):
        """Test mounting the webhook router next to other routes."""
        webhook = core.create_revalidate_app(webhook_secret=SECRET)
        app = FastAPI()
        app.include_router(webhook.router)

        @app.get("/health")
        async def health():
            return {"status": "ok"}

        async with client_for(app) as client:
            hook_response = await client.post(URL, content=update_body(), headers=bearer())
            health_response = await client.get("http://test/health")

        assert hook_response.status_code == 200
        assert health_response.json() == {"status": "ok"}


class TestWebhookPayload:
    """Tests for payload validation and dispatch."""

    @pytest.mark.asyncio
    async def test_revalidates_normalized_path(self, populated_core):
        """Test that the entry is cleared and the hook gets the normalized path."""
        recorder = RevalidateRecorder()
        webhook = populated_core.create_revalidate_app(webhook_secret=SECRET, revalidate=recorder)

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=update_body("/blog/hello/"), headers=bearer())

        assert response.status_code == 200
        assert response.json() == {"ok": True, "metadata": {"revalidated": True, "path": "/blog/hello"}}
        assert recorder.paths == ["/blog/hello"]
        assert populated_core.cache.keys() == ["/other"]

    @pytest.mark.asyncio
    async def test_sync_hook(self, core):
        calls = []
        webhook = core.create_revalidate_app(webhook_secret=SECRET, revalidate=calls.append)

        async with client_for(webhook.app) as client:
            await client.post(URL, content=update_body("a/b"), headers=bearer())

        assert calls == ["/a/b"]

    @pytest.mark.asyncio
    async def test_null_path_clears_everything(self, populated_core):
        recorder = RevalidateRecorder()
        webhook = populated_core.create_revalidate_app(webhook_secret=SECRET, revalidate=recorder)

        async with client_for(webhook.app) as client:
            response = await client.post(
                URL, content=json.dumps({"_type": "metadata_update", "path": None}), headers=bearer()
            )

        assert response.json() == {"ok": True, "metadata": {"revalidated": True, "path": None}}
        assert recorder.paths == [None]
        assert len(populated_core.cache) == 0

    @pytest.mark.asyncio
    async def test_missing_path_clears_everything(self, populated_core):
        webhook = populated_core.create_revalidate_app(webhook_secret=SECRET)

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=json.dumps({"_type": "metadata_update"}), headers=bearer())

        assert response.status_code == 200
        assert len(populated_core.cache) == 0

    @pytest.mark.asyncio
    async def test_path_rewrite(self, populated_core):
        """Test that the rewritten path is normalized, cleared and revalidated."""
        recorder = RevalidateRecorder()
        populated_core.cache.set("/en/blog/hello", MetadataDocument(title="EN"))
        webhook = populated_core.create_revalidate_app(
            webhook_secret=SECRET,
            revalidate=recorder,
            path_rewrite=lambda path: f"en{path}/",
        )

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=update_body("/blog/hello"), headers=bearer())

        assert response.json()["metadata"]["path"] == "/en/blog/hello"
        assert recorder.paths == ["/en/blog/hello"]
        assert "/en/blog/hello" not in populated_core.cache
        assert "/blog/hello" in populated_core.cache

    @pytest.mark.asyncio
    async def test_async_path_rewrite_returning_none(self, core):
        recorder = RevalidateRecorder()

        async def rewrite(path):
            return None

        webhook = core.create_revalidate_app(webhook_secret=SECRET, revalidate=recorder, path_rewrite=rewrite)

        async with client_for(webhook.app) as client:
            await client.post(URL, content=update_body("/blog/hello"), headers=bearer())

        assert recorder.paths == ["/blog/hello"]

    @pytest.mark.asyncio
    async def test_ignored_event_type(self, populated_core):
        recorder = RevalidateRecorder()
        webhook = populated_core.create_revalidate_app(webhook_secret=SECRET, revalidate=recorder)

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=update_body(event_type="site_update"), headers=bearer())

        assert response.status_code == 200
        assert response.json() == {"ok": True, "metadata": {"revalidated": False, "path": None}}
        assert recorder.paths == []
        assert len(populated_core.cache) == 2

    @pytest.mark.asyncio
    async def test_malformed_json(self, populated_core):
        recorder = RevalidateRecorder()
        webhook = populated_core.create_revalidate_app(webhook_secret=SECRET, revalidate=recorder)

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content="{not json", headers=bearer())

        assert response.status_code == 400
        body = response.json()
        assert body["ok"] is False
        assert body["error"] == "Invalid payload"
        assert "message" in body["metadata"]
        assert recorder.paths == []
        assert len(populated_core.cache) == 2

    @pytest.mark.asyncio
    async def test_missing_type(self, core):
        webhook = core.create_revalidate_app(webhook_secret=SECRET)

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=json.dumps({"path": "/a"}), headers=bearer())

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_hook_failure(self, core):
        """Test that a failing hook yields 500 with the reason."""
        webhook = core.create_revalidate_app(
            webhook_secret=SECRET,
            revalidate=RevalidateRecorder(exception=RuntimeError("render cache offline")),
        )

        async with client_for(webhook.app) as client:
            response = await client.post(URL, content=update_body(), headers=bearer())

        assert response.status_code == 500
        assert response.json() == {
            "ok": False,
            "error": "Failed to revalidate",
            "metadata": {"message": "render cache offline"},
        }


class TestCacheIsolation:
    """Tests that webhook apps only touch their own core's cache."""

    @pytest.mark.asyncio
    async def test_separate_caches(self, core):
        other = MetadataCache()
        other.set("/blog/hello", MetadataDocument(title="Other"))
        await core.get_metadata("/blog/hello")
        webhook = core.create_revalidate_app(webhook_secret=SECRET)

        async with client_for(webhook.app) as client:
            await client.post(URL, content=update_body(), headers=bearer())

        assert "/blog/hello" not in core.cache
        assert "/blog/hello" in other
