"""
OAuth handshake strategy for the configured provider.

Uses Authlib's Starlette client for the OAuth 1.0a or OAuth2 handshake (Authlib
switches to OAuth 1 when a request-token URL is registered). The user profile is
fetched by a ProfileFetcher passed in at construction, so providers only need a
different normalizer, not a different strategy.
"""

from dataclasses import dataclass, field

import httpx
from authlib.integrations.starlette_client import OAuth

from .config import ProviderConfig, StrategyKind
from .errors import ParseError
from .profile import NormalizedProfile, Normalizer, parse_user_return
from .protocol import ProfileFetcher


class UserRouteProfileFetcher:
    """GET the provider's user route with the access token and normalize the body."""

    def __init__(self, user_route: str, provider: str, normalize: Normalizer = parse_user_return):
        self.user_route = user_route
        self.provider = provider
        self.normalize = normalize

    async def fetch_profile(self, client, token: dict) -> NormalizedProfile:
        resp: httpx.Response = await client.get(self.user_route, token=token)
        resp.raise_for_status()
        try:
            data = resp.json()
        except ValueError as e:
            raise ParseError(f"User info response is not valid JSON: {e}") from e
        try:
            profile = self.normalize(data)
        except ParseError:
            raise
        except Exception as e:
            # Custom normalizers may fail with KeyError, TypeError, ...
            raise ParseError(f"Could not normalize user info: {e!r}") from e
        if not profile.id or not profile.emails or not profile.emails[0]:
            raise ParseError("Normalized profile requires an id and an email")
        return profile.with_provider(self.provider)


def build_remote_client(config: ProviderConfig):
    """Register an Authlib client for the provider on a fresh OAuth registry."""
    oauth = OAuth()
    if config.kind is StrategyKind.OAUTH1:
        return oauth.register(
            name=config.name,
            client_id=config.client_id,
            client_secret=config.client_secret,
            request_token_url=config.request_token_url,
            access_token_url=config.access_token_url,
            authorize_url=config.authorize_url,
        )
    return oauth.register(
        name=config.name,
        client_id=config.client_id,
        client_secret=config.client_secret,
        access_token_url=config.access_token_url,
        authorize_url=config.authorize_url,
        client_kwargs={"scope": " ".join(sorted(config.scope))} if config.scope else {},
    )


class OAuthStrategy:
    """Redirect to the provider and turn its callback into a NormalizedProfile."""

    def __init__(self, config: ProviderConfig, client, fetcher: ProfileFetcher):
        self.name = config.name
        self.config = config
        self.client = client
        self.fetcher = fetcher

    async def login_redirect(self, request):
        """Return RedirectResponse to the provider's authorize page."""
        return await self.client.authorize_redirect(request, self.config.callback_url)

    async def handle_callback(self, request) -> NormalizedProfile:
        """Exchange the callback for a token and fetch the user's profile."""
        token = await self.client.authorize_access_token(request)
        return await self.fetcher.fetch_profile(self.client, token)


@dataclass(frozen=True)
class StrategyDescriptor:
    """What the host shows on its login page, plus the strategy that serves it."""

    name: str
    url: str
    callback_url: str
    icon: str
    scope: list
    strategy: OAuthStrategy = field(default=None, compare=False, repr=False)
