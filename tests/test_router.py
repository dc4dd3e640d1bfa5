"""HTTP surface: /auth/<name> redirects out, /auth/<name>/callback logs the user in."""

from dataclasses import replace

import pytest
from authlib.integrations.starlette_client import OAuthError
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from starlette.middleware.sessions import SessionMiddleware

from sso_oauth import HostServices, SSOOAuth, create_auth_router
from sso_oauth.session import SessionLoginNotifier, require_login

from .fakes import AUTHORIZE_URL, FakeRemoteClient, userinfo_response

WIKI_USERINFO = {"query": {"userinfo": {"id": 123, "name": "alice", "email": "a@x.com"}}}


@pytest.fixture
def session_host(host):
    return HostServices(users=host.users, db=host.db, groups=host.groups, authentication=SessionLoginNotifier())


def _client(plugin) -> TestClient:
    app = FastAPI()
    app.add_middleware(SessionMiddleware, secret_key="test-secret")
    app.include_router(create_auth_router(plugin))

    @app.get("/whoami")
    async def whoami(uid: int = Depends(require_login)):
        return {"uid": uid}

    return TestClient(app, follow_redirects=False)


def test_login_redirects_to_provider(config, session_host):
    plugin = SSOOAuth(config, session_host, client=FakeRemoteClient(userinfo_response(WIKI_USERINFO)))
    r = _client(plugin).get("/auth/wiki")

    assert r.status_code == 302
    assert r.headers["Location"].startswith(AUTHORIZE_URL)
    assert "redirect_uri=https://forum.example.org/auth/wiki/callback" in r.headers["Location"]


def test_callback_logs_user_in(config, session_host):
    plugin = SSOOAuth(config, session_host, client=FakeRemoteClient(userinfo_response(WIKI_USERINFO)))
    c = _client(plugin)

    assert c.get("/whoami").status_code == 401

    r = c.get("/auth/wiki/callback")
    assert r.status_code in (302, 307)
    assert r.headers["Location"] == "/"

    r = c.get("/whoami")
    assert r.status_code == 200
    assert r.json() == {"uid": 1}
    assert session_host.db.objects["wikiId:uid"] == {"123": 1}


def test_callback_provider_error_is_400(config, session_host):
    client = FakeRemoteClient(userinfo_response(WIKI_USERINFO), error=OAuthError(error="access_denied"))
    r = _client(SSOOAuth(config, session_host, client=client)).get("/auth/wiki/callback")

    assert r.status_code == 400
    assert "access_denied" in r.json()["error"]
    assert session_host.users.users == {}


def test_callback_malformed_profile_is_401(config, session_host):
    client = FakeRemoteClient(userinfo_response({"query": {"userinfo": {"name": "alice"}}}))
    c = _client(SSOOAuth(config, session_host, client=client))

    r = c.get("/auth/wiki/callback")

    assert r.status_code == 401
    assert r.json() == {"error": "Authentication failed"}
    assert session_host.users.users == {}
    assert c.get("/whoami").status_code == 401


def test_callback_user_route_http_error_is_401(config, session_host):
    client = FakeRemoteClient(userinfo_response({"error": "denied"}, status_code=500))
    r = _client(SSOOAuth(config, session_host, client=client)).get("/auth/wiki/callback")
    assert r.status_code == 401


def test_invalid_config_mounts_no_routes(config, session_host):
    plugin = SSOOAuth(replace(config, name=""), session_host, client=FakeRemoteClient(userinfo_response({})))
    c = _client(plugin)
    assert c.get("/auth/wiki").status_code == 404
    assert c.get("/auth/wiki/callback").status_code == 404


def test_callback_custom_normalizer_failure_is_401(config, session_host):
    def normalize(data):
        return data["unexpected"]

    client = FakeRemoteClient(userinfo_response(WIKI_USERINFO))
    r = _client(SSOOAuth(config, session_host, normalize=normalize, client=client)).get("/auth/wiki/callback")

    assert r.status_code == 401
    assert r.json() == {"error": "Authentication failed"}
    assert session_host.users.users == {}
