"""
SSO OAuth plugin.

Authenticates forum users against an OAuth 1.0a / OAuth2 provider and links the
provider identity to a local account. Exposes the plugin facade (SSOOAuth), config
resolution, the profile normalizer, account linking and the FastAPI auth router.
"""

from .config import ProviderConfig, StrategyKind, resolve_provider_config, validate_provider_config
from .errors import ConfigError, LoginError, ParseError, SSOError
from .login import AccountLinker, LocalAccount, LoginPayload
from .plugin import SSOOAuth
from .profile import NormalizedProfile, parse_user_return
from .protocol import HostServices
from .router import create_auth_router
from .strategy import OAuthStrategy, StrategyDescriptor, UserRouteProfileFetcher

__all__ = [
    "SSOOAuth",
    "ProviderConfig",
    "StrategyKind",
    "resolve_provider_config",
    "validate_provider_config",
    "SSOError",
    "ConfigError",
    "ParseError",
    "LoginError",
    "AccountLinker",
    "LocalAccount",
    "LoginPayload",
    "NormalizedProfile",
    "parse_user_return",
    "HostServices",
    "OAuthStrategy",
    "StrategyDescriptor",
    "UserRouteProfileFetcher",
    "create_auth_router",
]
