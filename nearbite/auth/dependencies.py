from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from .context import ANONYMOUS, Authenticated, UserContext


def get_user_context(request: Request) -> UserContext:
    """Return the verified user from the session, or ``ANONYMOUS``.

    The session is populated by the external sign-in service, which stores
    ``{"user_id": ..., "role": ...}`` under ``"user"``.
    """
    user = request.session.get("user") or {}
    user_id = user.get("user_id")
    if user_id is None or user_id == "":
        return ANONYMOUS
    return Authenticated(user_id=str(user_id))


def require_user(user: UserContext = Depends(get_user_context)) -> Authenticated:
    """Raise 401 if no user is signed in."""
    if not isinstance(user, Authenticated):
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(request: Request) -> dict:
    """Raise 401 if not signed in, 403 if not admin."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
