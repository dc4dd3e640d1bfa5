"""
Normalize a provider's user-info response into the profile shape the host needs.

The host requires an id, a display name and at least one email; everything else is
optional. parse_user_return is written for MediaWiki's userinfo API and is the part
most integrators replace (pass another normalizer to SSOOAuth).
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Tuple

from .errors import ParseError
from .login import LoginPayload


@dataclass(frozen=True)
class NormalizedProfile:
    id: str
    display_name: str
    emails: Tuple[str, ...]
    is_admin: bool = False
    provider: str = ""

    def with_provider(self, provider: str) -> "NormalizedProfile":
        return replace(self, provider=provider)

    def to_login_payload(self) -> LoginPayload:
        return LoginPayload(
            oauth_id=self.id,
            handle=self.display_name,
            email=self.emails[0],
            is_admin=self.is_admin,
        )


Normalizer = Callable[[Any], NormalizedProfile]


def parse_user_return(data: Any) -> NormalizedProfile:
    """Map a MediaWiki userinfo payload (optionally wrapped in query.userinfo)."""
    if not isinstance(data, Mapping):
        raise ParseError("User info response is not an object")

    query = data.get("query")
    if isinstance(query, Mapping) and isinstance(query.get("userinfo"), Mapping):
        data = query["userinfo"]

    user_id = data.get("id")
    if user_id is None or user_id == "":
        raise ParseError("User info response has no id")
    email = data.get("email")
    if not email:
        raise ParseError("User info response has no email")

    return NormalizedProfile(
        id=str(user_id),
        display_name=data.get("name") or "",
        emails=(email,),
        # To promote users automatically, map a provider claim here, e.g.
        # is_admin=bool(data.get("isAdmin")),
    )
