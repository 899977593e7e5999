"""
Shared FastAPI dependencies.

User identity is established upstream (the gateway in front of the API
verifies the session) and forwarded in the X-User-Id and X-User-Role headers.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from pydantic import BaseModel

from config import settings
from services.geocoding_client import GeocodingClient
from services.history_store import JsonFileKeyValueStore, KeyValueStore


class CurrentUser(BaseModel):
    """Caller identity forwarded by the gateway"""
    user_id: str
    is_admin: bool = False


def get_optional_user(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None)
) -> Optional[CurrentUser]:
    """Identity if one was forwarded, else None (anonymous browsing)"""
    if not x_user_id:
        return None
    return CurrentUser(user_id=x_user_id, is_admin=(x_user_role or "").lower() == "admin")


def get_current_user(user: Optional[CurrentUser] = Depends(get_optional_user)) -> CurrentUser:
    """Require a signed-in user"""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header"
        )
    return user


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Require an admin user"""
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user


@lru_cache
def get_geocoder() -> GeocodingClient:
    return GeocodingClient()


@lru_cache
def get_history_store() -> KeyValueStore:
    return JsonFileKeyValueStore(settings.history_store_path)
