"""
FastAPI demo host: OAuth single sign-on against a MediaWiki (or OAuth2) provider.

Decisions:
- .env is loaded before importing sso_oauth so OAUTH__* and URL are available when
  the provider config is resolved (Ruff E402 suppressed for that).
- Users, object storage and groups are in-memory; a real forum host passes its own
  services in HostServices.
- Session secret from SESSION_SECRET env; default "change-me" is for dev only.
"""

import os

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware

load_dotenv()

# Load .env before sso_oauth so OAUTH__* and URL are set; Ruff E402.
from sso_oauth import HostServices, SSOOAuth, create_auth_router, resolve_provider_config  # noqa: E402
from sso_oauth.log import setup_logging  # noqa: E402
from sso_oauth.memory import InMemoryGroupService, InMemoryObjectStore, InMemoryUserStore  # noqa: E402
from sso_oauth.session import SessionLoginNotifier, current_uid, require_login  # noqa: E402

SESSION_SECRET = os.getenv("SESSION_SECRET", "change-me")

setup_logging()

host = HostServices(
    users=InMemoryUserStore(),
    db=InMemoryObjectStore(),
    groups=InMemoryGroupService(),
    authentication=SessionLoginNotifier(),
)
plugin = SSOOAuth(resolve_provider_config(), host)

app = FastAPI()
# Authlib keeps the OAuth request token / state in the session.
app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET)
app.include_router(create_auth_router(plugin))


@app.get("/")
async def home(request: Request):
    uid = current_uid(request)
    return {"logged_in": uid is not None, "uid": uid}


@app.get("/me")
async def me(uid: int = Depends(require_login)):
    """Return the logged-in user's exported fields, including the provider id."""
    params = plugin.whitelist_fields({"uid": uid, "whitelist": ["uid", "username", "email"]})
    return {field: await host.users.get_user_field(uid, field) for field in params["whitelist"]}
