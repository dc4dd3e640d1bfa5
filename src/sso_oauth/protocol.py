"""
Protocols for the host services the plugin calls into, and for profile fetching.

The host application supplies user storage, a key-value object store, group
membership and a successful-login notifier. All storage calls are async.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .profile import NormalizedProfile


@runtime_checkable
class UserStore(Protocol):
    """Host user accounts."""

    async def get_uid_by_email(self, email: str) -> Optional[int]:
        ...

    async def create(self, data: dict) -> int:
        """Create an account from {"username", "email"}; return its uid."""
        ...

    async def get_user_field(self, uid: int, field: str) -> Optional[str]:
        ...

    async def set_user_field(self, uid: int, field: str, value: str) -> None:
        ...

    async def delete_user_field(self, uid: int, field: str) -> None:
        ...


@runtime_checkable
class ObjectStore(Protocol):
    """Host key-value hashes (key -> {field: value})."""

    async def get_object_field(self, key: str, field: str) -> Any:
        ...

    async def set_object_field(self, key: str, field: str, value: Any) -> None:
        ...

    async def delete_object_field(self, key: str, field: str) -> None:
        ...


@runtime_checkable
class GroupService(Protocol):
    async def join(self, group_name: str, uid: int) -> None:
        ...


@runtime_checkable
class LoginNotifier(Protocol):
    """Host hook called once a login has resolved to a local uid."""

    async def on_successful_login(self, request, uid: int) -> None:
        ...


@runtime_checkable
class ProfileFetcher(Protocol):
    """Fetch the user profile for an access token from the provider."""

    async def fetch_profile(self, client, token: dict) -> "NormalizedProfile":
        ...


@dataclass(frozen=True)
class HostServices:
    users: UserStore
    db: ObjectStore
    groups: GroupService
    authentication: LoginNotifier
