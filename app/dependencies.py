"""Shared dependencies: per-request store, current user, role guards."""
from typing import Iterator

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.models.user import User, UserRole
from app.services.auth import decode_token_with_error
from app.store.base import Store

security = HTTPBearer(auto_error=False)


def get_store(request: Request) -> Iterator[Store]:
    store = request.app.state.storage.open()
    try:
        yield store
    finally:
        store.close()


def get_current_user(
    store: Store = Depends(get_store),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    if not credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")
    token_str = (credentials.credentials or "").strip()
    payload, _ = decode_token_with_error(token_str)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")
    user = store.get_user(user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_optional_user(
    store: Store = Depends(get_store),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User | None:
    """Public endpoints that show more to the owner (e.g. their draft events)."""
    if not credentials:
        return None
    payload, _ = decode_token_with_error((credentials.credentials or "").strip())
    if not payload:
        return None
    try:
        user = store.get_user(int(payload.get("sub")))
    except (TypeError, ValueError):
        return None
    return user if user and user.is_active else None


def require_sponsor(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.sponsor:
        raise HTTPException(status_code=403, detail="Sponsor role required")
    return current_user


def require_organizer(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.organizer:
        raise HTTPException(status_code=403, detail="Organizer role required")
    return current_user


def require_agent(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.agent:
        raise HTTPException(status_code=403, detail="Agent role required")
    return current_user
