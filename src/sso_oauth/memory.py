"""
In-memory host services for the demo app and tests.

They follow the host semantics the plugin relies on: object fields are hashes keyed
by name, user creation rejects duplicate usernames and malformed emails.
"""

from typing import Any, Dict, Optional, Set


class InMemoryUserStore:
    def __init__(self):
        self.users: Dict[int, Dict[str, Any]] = {}
        self._next_uid = 1

    async def get_uid_by_email(self, email: str) -> Optional[int]:
        email = email.lower()
        for uid, fields in self.users.items():
            if (fields.get("email") or "").lower() == email:
                return uid
        return None

    async def create(self, data: dict) -> int:
        username = data.get("username")
        email = data.get("email") or ""
        if not username:
            raise ValueError("invalid-username")
        if any(u.get("username") == username for u in self.users.values()):
            raise ValueError("username-taken")
        if email and "@" not in email:
            raise ValueError("invalid-email")

        uid = self._next_uid
        self._next_uid += 1
        self.users[uid] = {"uid": uid, "username": username, "email": email}
        return uid

    async def get_user_field(self, uid: int, field: str) -> Optional[str]:
        return self.users.get(uid, {}).get(field)

    async def set_user_field(self, uid: int, field: str, value: str) -> None:
        if uid not in self.users:
            raise KeyError(f"no-user {uid}")
        self.users[uid][field] = value

    async def delete_user_field(self, uid: int, field: str) -> None:
        self.users.get(uid, {}).pop(field, None)


class InMemoryObjectStore:
    def __init__(self):
        self.objects: Dict[str, Dict[str, Any]] = {}

    async def get_object_field(self, key: str, field: str) -> Any:
        return self.objects.get(key, {}).get(field)

    async def set_object_field(self, key: str, field: str, value: Any) -> None:
        self.objects.setdefault(key, {})[field] = value

    async def delete_object_field(self, key: str, field: str) -> None:
        self.objects.get(key, {}).pop(field, None)


class InMemoryGroupService:
    def __init__(self):
        self.members: Dict[str, Set[int]] = {}

    async def join(self, group_name: str, uid: int) -> None:
        self.members.setdefault(group_name, set()).add(uid)
