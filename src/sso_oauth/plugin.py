"""
SSOOAuth: the plugin object the host calls at its extension points.

get_strategy, parse_user_return, login, delete_user_data and whitelist_fields mirror
the host's hooks; complete_login is the handshake success path used by the router.
"""

import logging
from typing import Any, List, Optional

from .config import ProviderConfig, validate_provider_config
from .errors import ConfigError, LoginError
from .login import AccountLinker, LocalAccount, LoginPayload
from .profile import NormalizedProfile, Normalizer, parse_user_return
from .protocol import HostServices
from .strategy import OAuthStrategy, StrategyDescriptor, UserRouteProfileFetcher, build_remote_client

logger = logging.getLogger(__name__)


class SSOOAuth:
    def __init__(
        self,
        config: ProviderConfig,
        host: HostServices,
        normalize: Normalizer = parse_user_return,
        client=None,
    ):
        """
        Validate config once; an invalid config is logged here and disables the
        provider. client overrides the Authlib client (built lazily otherwise).
        """
        self.config = config
        self.host = host
        self.normalize = normalize
        self.linker = AccountLinker(config, host)
        self._client = client
        self.config_error: Optional[ConfigError] = None
        try:
            validate_provider_config(config)
        except ConfigError as e:
            logger.error("[sso-oauth] %s", e)
            self.config_error = e

    @property
    def config_ok(self) -> bool:
        return self.config_error is None

    def build_strategy(self) -> OAuthStrategy:
        client = self._client if self._client is not None else build_remote_client(self.config)
        fetcher = UserRouteProfileFetcher(self.config.user_route, self.config.name, self.normalize)
        return OAuthStrategy(self.config, client, fetcher)

    def get_strategy(self, strategies: List[StrategyDescriptor]) -> List[StrategyDescriptor]:
        """Append this provider's strategy to strategies; ConfigError if disabled."""
        if not self.config_ok:
            raise ConfigError("OAuth Configuration is invalid")

        name = self.config.name
        strategies.append(
            StrategyDescriptor(
                name=name,
                url=f"/auth/{name}",
                callback_url=f"/auth/{name}/callback",
                icon=self.config.icon,
                scope=self.config.scope_list,
                strategy=self.build_strategy(),
            )
        )
        return strategies

    def parse_user_return(self, data: Any) -> NormalizedProfile:
        return self.normalize(data)

    async def login(self, payload: LoginPayload) -> LocalAccount:
        return await self.linker.login(payload)

    async def get_uid_by_oauth_id(self, oauth_id: str) -> Optional[int]:
        return await self.linker.get_uid_by_oauth_id(oauth_id)

    async def delete_user_data(self, data: dict) -> None:
        await self.linker.delete_user_data(data["uid"])

    def whitelist_fields(self, params: dict) -> dict:
        return self.linker.whitelist_fields(params)

    async def complete_login(self, strategy: OAuthStrategy, request) -> LocalAccount:
        """Callback -> profile -> local account, then notify the host of the login."""
        profile = await strategy.handle_callback(request)
        account = await self.login(profile.to_login_payload())
        try:
            await self.host.authentication.on_successful_login(request, account.uid)
        except Exception as exc:
            raise LoginError(str(exc)) from exc
        return account
