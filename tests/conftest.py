from typing import List, Tuple

import pytest

from sso_oauth import HostServices, SSOOAuth, resolve_provider_config
from sso_oauth.memory import InMemoryGroupService, InMemoryObjectStore, InMemoryUserStore

ENV = {
    "OAUTH__ROOT": "https://wiki.example.org/w",
    "OAUTH__NAME": "wiki",
    "OAUTH__KEY": "consumer-key",
    "OAUTH__SECRET": "consumer-secret",
    "URL": "https://forum.example.org/",
}


class RecordingNotifier:
    def __init__(self):
        self.logins: List[Tuple[object, int]] = []

    async def on_successful_login(self, request, uid: int) -> None:
        self.logins.append((request, uid))


@pytest.fixture
def config():
    return resolve_provider_config(ENV)


@pytest.fixture
def host():
    return HostServices(
        users=InMemoryUserStore(),
        db=InMemoryObjectStore(),
        groups=InMemoryGroupService(),
        authentication=RecordingNotifier(),
    )


@pytest.fixture
def plugin(config, host):
    return SSOOAuth(config, host)
