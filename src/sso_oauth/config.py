"""
Provider configuration for the SSO OAuth plugin.

Settings come from environment variables (loaded from .env by the host app):
OAUTH__ROOT, OAUTH__NAME, OAUTH__TYPE, OAUTH__KEY (or OAUTH__ID), OAUTH__SECRET,
OAUTH__SCOPE, OAUTH__ICON, OAUTH__AUTHORIZE_URL, OAUTH__TOKEN_URL,
OAUTH__USER_ROUTE and URL (the host's public URL).

Never put the key/secret pair in code; keep it in the environment.
"""

import enum
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional, Union

from .errors import ConfigError

DEFAULT_ROOT = "https://en.wikipedia.org/w/"
DEFAULT_NAME = "wiki"
DEFAULT_ICON = "fa-wikipedia-w"


class StrategyKind(str, enum.Enum):
    OAUTH1 = "oauth"
    OAUTH2 = "oauth2"


@dataclass(frozen=True)
class ProviderConfig:
    """Immutable provider settings, built once at startup."""

    name: str
    # Unknown types are kept as the raw string so validation can report them.
    kind: Union[StrategyKind, str]
    authorize_url: str
    access_token_url: str
    client_id: Optional[str]
    client_secret: Optional[str]
    user_route: str
    callback_url: str
    request_token_url: Optional[str] = None
    scope: FrozenSet[str] = field(default_factory=frozenset)
    raw_scope: str = ""
    icon: str = DEFAULT_ICON

    @property
    def field_name(self) -> str:
        """Per-user field holding the external id, e.g. "wikiId"."""
        return f"{self.name}Id"

    @property
    def mapping_key(self) -> str:
        """Reverse mapping key (external id -> uid), e.g. "wikiId:uid"."""
        return f"{self.field_name}:uid"

    @property
    def scope_list(self) -> list:
        # Unset scope yields [""], as the host expects a split list.
        return self.raw_scope.split(",")


def script_path(root: Optional[str]) -> str:
    """Return the provider root URL with a trailing slash."""
    path = root or DEFAULT_ROOT
    if not path.endswith("/"):
        path += "/"
    return path


def _kind(raw: str) -> Union[StrategyKind, str]:
    try:
        return StrategyKind(raw)
    except ValueError:
        return raw


def resolve_provider_config(env: Optional[Mapping[str, str]] = None) -> ProviderConfig:
    """Build a ProviderConfig from environment variables. Does not validate."""
    env = os.environ if env is None else env
    root = script_path(env.get("OAUTH__ROOT"))
    name = env.get("OAUTH__NAME", DEFAULT_NAME)
    kind = _kind(env.get("OAUTH__TYPE", StrategyKind.OAUTH1.value))
    raw_scope = env.get("OAUTH__SCOPE", "")

    if kind is StrategyKind.OAUTH2:
        request_token_url = None
        authorize_url = env.get("OAUTH__AUTHORIZE_URL", "")
        access_token_url = env.get("OAUTH__TOKEN_URL", "")
    else:
        # MediaWiki Special:OAuth endpoints under the script path
        request_token_url = root + "index.php?title=Special:OAuth/initiate"
        access_token_url = root + "index.php?title=Special:OAuth/token"
        authorize_url = root + "index.php?title=Special:OAuth/authorize"

    user_route = env.get(
        "OAUTH__USER_ROUTE",
        root + "api.php?action=query&meta=userinfo&uiprop=email&format=json",
    )
    host_url = env.get("URL", "").rstrip("/")

    return ProviderConfig(
        name=name,
        kind=kind,
        request_token_url=request_token_url,
        authorize_url=authorize_url,
        access_token_url=access_token_url,
        client_id=env.get("OAUTH__KEY") or env.get("OAUTH__ID"),
        client_secret=env.get("OAUTH__SECRET"),
        user_route=user_route,
        callback_url=f"{host_url}/auth/{name}/callback",
        scope=frozenset(s.strip() for s in raw_scope.split(",") if s.strip()),
        raw_scope=raw_scope,
        icon=env.get("OAUTH__ICON", DEFAULT_ICON),
    )


def validate_provider_config(config: ProviderConfig) -> None:
    """
    Raise ConfigError for the first failing check: name, strategy type, user route.
    """
    if not config.name:
        raise ConfigError("Please specify a name for your OAuth provider")
    if config.kind not in (StrategyKind.OAUTH1, StrategyKind.OAUTH2):
        raise ConfigError("Please specify an OAuth strategy to utilise")
    if not config.user_route:
        raise ConfigError("User Route required")
