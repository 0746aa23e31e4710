"""
Caller identity for the HTTP routes.

Authentication itself happens in front of this service: a trusted proxy
sets the X-User-Id header for signed-in users. Generation works for guests,
saved changelogs need a user, so there are two separate dependencies.
"""

from typing import Optional

from fastapi import Header, HTTPException

USER_HEADER = "X-User-Id"


def optional_user(x_user_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Return the caller's user id, or None for guests."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


def require_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Return the caller's user id, rejecting guests with 401."""
    user_id = optional_user(x_user_id)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id
