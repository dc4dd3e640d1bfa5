"""
Identity resolution: map an external OAuth identity onto a local account.

Links are stored twice: the per-user field "<name>Id" holds the external id, and the
object "<name>Id:uid" maps external id -> uid. Both are written on first login and
removed together when the host deletes the user.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .errors import LoginError

if TYPE_CHECKING:
    from .config import ProviderConfig
    from .protocol import HostServices

logger = logging.getLogger(__name__)

ADMIN_GROUP = "administrators"


@dataclass(frozen=True)
class LoginPayload:
    oauth_id: str
    handle: str
    email: str
    is_admin: bool = False


@dataclass(frozen=True)
class LocalAccount:
    uid: int


class AccountLinker:
    """Find or create the local account for an external identity and link it."""

    def __init__(self, config: "ProviderConfig", host: "HostServices"):
        self.config = config
        self.host = host

    async def get_uid_by_oauth_id(self, oauth_id: str) -> Optional[int]:
        uid = await self.host.db.get_object_field(self.config.mapping_key, oauth_id)
        return None if uid is None else int(uid)

    async def login(self, payload: LoginPayload) -> LocalAccount:
        """
        Resolve payload to a local account.

        An existing link always wins over the email fallback, so a changed email on
        the provider side never creates a second account. Repeated logins with the
        same external id return the same uid without touching storage.
        """
        if not payload.oauth_id or not payload.email:
            raise LoginError("Login payload requires an external id and an email")

        try:
            uid = await self.get_uid_by_oauth_id(payload.oauth_id)
        except Exception as exc:
            raise LoginError(str(exc)) from exc
        if uid is not None:
            logger.debug("[sso-oauth] %s %s resolved to uid %s", self.config.name, payload.oauth_id, uid)
            return LocalAccount(uid=uid)

        try:
            # Email fallback for users who registered before linking this provider
            uid = await self.host.users.get_uid_by_email(payload.email)
            if not uid:
                uid = await self.host.users.create({"username": payload.handle, "email": payload.email})
                logger.info("[sso-oauth] created uid %s for %s", uid, payload.handle)

            await self._link(uid, payload.oauth_id)

            if payload.is_admin:
                await self.host.groups.join(ADMIN_GROUP, uid)
        except Exception as exc:
            raise LoginError(str(exc)) from exc

        return LocalAccount(uid=uid)

    async def _link(self, uid: int, oauth_id: str) -> None:
        """
        Write the user field and the reverse mapping together.

        An account reached by email may already carry another external id; its
        reverse entry is dropped so the old id cannot resolve to this uid. If the
        mapping write fails the user field is removed again.
        """
        field_name = self.config.field_name
        previous = await self.host.users.get_user_field(uid, field_name)
        if previous and previous != oauth_id:
            await self.host.db.delete_object_field(self.config.mapping_key, previous)
            logger.info("[sso-oauth] replaced %s link %s for uid %s", self.config.name, previous, uid)

        await self.host.users.set_user_field(uid, field_name, oauth_id)
        try:
            await self.host.db.set_object_field(self.config.mapping_key, oauth_id, uid)
        except Exception:
            await self.host.users.delete_user_field(uid, field_name)
            raise
        logger.info("[sso-oauth] linked %s %s to uid %s", self.config.name, oauth_id, uid)

    async def delete_user_data(self, uid: int) -> None:
        """Remove the reverse mapping for uid. Must run before the host purges the user."""
        oauth_id = await self.host.users.get_user_field(uid, self.config.field_name)
        if not oauth_id:
            return
        await self.host.db.delete_object_field(self.config.mapping_key, oauth_id)
        logger.info("[sso-oauth] removed %s link %s for uid %s", self.config.name, oauth_id, uid)

    def whitelist_fields(self, params: dict) -> dict:
        """Expose "<name>Id" on exported user records; delete_user_data reads it back."""
        params["whitelist"].append(self.config.field_name)
        return params
