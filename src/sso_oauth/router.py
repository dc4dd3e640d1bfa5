"""
FastAPI auth router: /auth/<name> and /auth/<name>/callback for each strategy.

Routes are only mounted when the provider configuration is valid; otherwise the
router is empty and the configuration error has already been logged.
"""

import logging

import httpx
from authlib.integrations.starlette_client import OAuthError
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse

from .errors import ConfigError, LoginError, ParseError
from .plugin import SSOOAuth
from .strategy import StrategyDescriptor

logger = logging.getLogger(__name__)


def create_auth_router(plugin: SSOOAuth, success_url: str = "/") -> APIRouter:
    """Create an APIRouter serving the OAuth handshake for the plugin's strategies."""
    router = APIRouter()
    try:
        strategies = plugin.get_strategy([])
    except ConfigError:
        return router

    for descriptor in strategies:
        _add_strategy_routes(router, plugin, descriptor, success_url)
    return router


def _add_strategy_routes(router: APIRouter, plugin: SSOOAuth, descriptor: StrategyDescriptor, success_url: str):
    strategy = descriptor.strategy

    @router.get(descriptor.url, name=f"{descriptor.name}_login")
    async def login(request: Request):
        """Redirect the user to the provider's authorize page."""
        return await strategy.login_redirect(request)

    @router.get(descriptor.callback_url, name=f"{descriptor.name}_callback")
    async def callback(request: Request):
        """Complete the handshake, resolve the local account and redirect."""
        try:
            await plugin.complete_login(strategy, request)
        except OAuthError as e:
            return JSONResponse({"error": str(e)}, status_code=400)
        except (ParseError, LoginError, httpx.HTTPError):
            logger.exception("[sso-oauth] %s login failed", descriptor.name)
            return JSONResponse({"error": "Authentication failed"}, status_code=401)
        return RedirectResponse(url=success_url)
