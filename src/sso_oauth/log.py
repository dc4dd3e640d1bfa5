"""
Logging setup for hosts that run the plugin standalone (e.g. the demo app).

Plugin modules log through logging.getLogger(__name__) under the "sso_oauth"
namespace with an "[sso-oauth]" message prefix. LOG_LEVEL sets the root level;
SSO_OAUTH_LOG_LEVEL, when set, overrides it for the plugin's loggers only.
"""

import logging
import os
from typing import Optional

PLUGIN_LOGGER = "sso_oauth"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-8s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def level_from_env(var: str, default: Optional[str] = "INFO") -> Optional[int]:
    """Parse a level name from var; unknown names fall back to default."""
    name = (os.getenv(var) or "").strip().upper()
    level = logging.getLevelName(name) if name else None
    if isinstance(level, int):
        return level
    return logging.getLevelName(default) if default else None


def setup_logging() -> None:
    """Configure logging once. Safe to call again (pytest, uvicorn add their own handlers)."""
    root = logging.getLogger()
    root.setLevel(level_from_env("LOG_LEVEL"))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

    plugin_level = level_from_env("SSO_OAUTH_LOG_LEVEL", default=None)
    logging.getLogger(PLUGIN_LOGGER).setLevel(plugin_level if plugin_level is not None else logging.NOTSET)
