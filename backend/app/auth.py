"""Caller identity resolution.

Authentication itself lives upstream (gateway / session middleware). It hands
the resolved user id to this service in the ``X-User-Id`` header; deployments
with another scheme override ``get_current_user_id``.
"""

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.db.dependencies import get_db
from app.services.catalog import get_user


def get_current_user_id(
    x_user_id: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> int | None:
    """Return the caller's user id, or None when no known identity is attached."""

    if x_user_id is None:
        return None
    try:
        user_id = int(x_user_id.strip())
    except ValueError:
        return None
    if user_id < 1 or get_user(db, user_id) is None:
        return None
    return user_id
