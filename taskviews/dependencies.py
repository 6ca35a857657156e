# File: /taskviews/dependencies.py | Version: 1.0 | Path: /taskviews/dependencies.py
from typing import Optional

from fastapi import Header, HTTPException, status

from taskviews.core.errors import InvalidStoreKeyError
from taskviews.db.session import get_db
from taskviews.store.persistence import validate_store_key

__all__ = ["get_current_owner", "get_db", "valid_store_key"]


def get_current_owner(x_user_id: Optional[str] = Header(default=None)) -> str:
    # Identity is resolved by the gateway in front of this service.
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    return x_user_id.strip()


def valid_store_key(store_key: str) -> str:
    try:
        return validate_store_key(store_key)
    except InvalidStoreKeyError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
