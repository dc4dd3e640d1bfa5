"""
Session-backed login notifier and FastAPI dependency for the demo host.

A real host supplies its own LoginNotifier; this one records the resolved uid in
request.session (Starlette SessionMiddleware).
"""

import time
from typing import Optional

from fastapi import HTTPException, Request


class SessionLoginNotifier:
    async def on_successful_login(self, request: Request, uid: int) -> None:
        request.session["uid"] = uid
        request.session["login_at"] = int(time.time())


def current_uid(request: Request) -> Optional[int]:
    """Return the logged-in uid from the session, or None."""
    return request.session.get("uid")


async def require_login(request: Request) -> int:
    """Dependency: request must carry a logged-in session. Returns the uid."""
    uid = current_uid(request)
    if uid is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return uid
