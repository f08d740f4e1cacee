"""Tests for backend selection and caller identification."""

import httpx
import pytest
from fastapi.testclient import TestClient

from budget_tracker.config import Settings
from budget_tracker.context import AppContext, build_context
from budget_tracker.main import app
from budget_tracker.services.identity_service import IdentityService
from budget_tracker.services.storage import (
    LocalRecordStore,
    RemoteRecordStore,
    create_record_store,
)


def make_settings(**overrides):
    return Settings(_env_file=None, **overrides)


class TestCreateRecordStore:
    """Test that the backend is picked from the configured credentials."""

    @pytest.mark.parametrize("url,key", [
        (None, None),
        ("https://project.supabase.co", None),
        ("https://placeholder.supabase.co", "placeholder-key"),
        ("https://project.supabase.co", "placeholder-key"),
    ])
    def test_local_without_real_credentials(self, session_factory, url, key):
        store = create_record_store(
            make_settings(supabase_url=url, supabase_anon_key=key),
            session_factory=session_factory,
        )
        assert isinstance(store, LocalRecordStore)
        assert store.backend_name == "local"

    def test_remote_with_credentials(self):
        store = create_record_store(make_settings(
            supabase_url="https://project.supabase.co",
            supabase_anon_key="real-anon-key",
        ))
        assert isinstance(store, RemoteRecordStore)
        assert store.backend_name == "remote"

    def test_namespace_from_settings(self, session_factory):
        store = create_record_store(
            make_settings(local_storage_namespace="household"),
            session_factory=session_factory,
        )
        assert store.categories_key == "household_categories"
        assert store.transactions_key == "household_transactions"

    def test_remote_context_has_identity(self):
        context = build_context(make_settings(
            supabase_url="https://project.supabase.co",
            supabase_anon_key="real-anon-key",
        ))
        assert context.is_remote
        assert context.identity is not None


class TestRemoteCaller:
    """Test bearer-token identification when Supabase is configured."""

    def _remote_client(self):
        requests = []

        def supabase(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.path == "/auth/v1/user":
                if request.headers["authorization"] == "Bearer good-token":
                    return httpx.Response(200, json={"id": "user-42"})
                return httpx.Response(401, json={"message": "invalid JWT"})
            return httpx.Response(200, json=[])

        transport = httpx.MockTransport(supabase)
        base_url = "https://project.supabase.co"
        settings = make_settings(supabase_url=base_url, supabase_anon_key="real-anon-key")
        context = AppContext(
            settings=settings,
            store=RemoteRecordStore(base_url, "real-anon-key", client=httpx.AsyncClient(transport=transport)),
            identity=IdentityService(base_url, "real-anon-key", client=httpx.AsyncClient(transport=transport)),
        )
        app.state.context = context
        return requests

    def teardown_method(self):
        app.state.context = None

    def test_missing_token(self):
        self._remote_client()
        with TestClient(app) as client:
            response = client.get("/api/v1/categories")
        assert response.status_code == 401

    def test_invalid_token(self):
        self._remote_client()
        with TestClient(app) as client:
            response = client.get("/api/v1/categories", headers={"Authorization": "Bearer bad-token"})
        assert response.status_code == 401

    def test_valid_token_scopes_queries(self):
        """Queries carry the caller's token and are filtered by their id."""
        requests = self._remote_client()
        with TestClient(app) as client:
            response = client.get("/api/v1/categories", headers={"Authorization": "Bearer good-token"})

        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0}
        query = requests[-1]
        assert query.url.path == "/rest/v1/categories"
        assert query.url.params["owner_id"] == "eq.user-42"
        assert query.headers["authorization"] == "Bearer good-token"

    def test_remote_failure_is_503(self):
        """A write the remote store rejects surfaces as 503."""
        def failing(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/auth/v1/user":
                return httpx.Response(200, json={"id": "user-42"})
            return httpx.Response(500, json={"message": "down"})

        transport = httpx.MockTransport(failing)
        base_url = "https://project.supabase.co"
        app.state.context = AppContext(
            settings=make_settings(supabase_url=base_url, supabase_anon_key="real-anon-key"),
            store=RemoteRecordStore(base_url, "real-anon-key", client=httpx.AsyncClient(transport=transport)),
            identity=IdentityService(base_url, "real-anon-key", client=httpx.AsyncClient(transport=transport)),
        )
        with TestClient(app) as client:
            response = client.post(
                "/api/v1/categories",
                json={"name": "Food", "type": "expense"},
                headers={"Authorization": "Bearer good-token"},
            )
        assert response.status_code == 503
