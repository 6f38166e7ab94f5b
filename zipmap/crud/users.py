# zipmap/crud/users.py
from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.user import User

USER_FIELDS = ("id", "name", "zip", "latitude", "longitude", "timezone")
MUTABLE_FIELDS = frozenset(USER_FIELDS) - {"id"}


def _to_record(user: User) -> dict[str, Any]:
    # Records are documents: fields that were never set are left out rather
    # than serialized as null.
    record: dict[str, Any] = {}
    for field in USER_FIELDS:
        value = getattr(user, field)
        if value is not None:
            record[field] = value
    return record


def list_users(db: Session) -> dict[str, dict[str, Any]]:
    """
    Return every stored user keyed by id (empty dict when there are none).
    """
    users = db.execute(select(User)).scalars().all()
    return {user.id: _to_record(user) for user in users}


def get_user(db: Session, user_id: str) -> dict[str, Any] | None:
    user = db.get(User, user_id)
    if user is None:
        return None
    return _to_record(user)


def create_user(db: Session, record: dict[str, Any]) -> dict[str, Any]:
    """
    Persist a complete user record under its own ``id``.
    """
    data = {k: v for k, v in record.items() if k in USER_FIELDS}
    if not data.get("id"):
        raise ValueError("id is required to store a user")
    obj = User(**data)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return _to_record(obj)


def update_user(db: Session, user_id: str, fields: dict[str, Any]) -> None:
    """
    Apply a partial update. Fields not named in ``fields`` keep their stored
    values; unknown keys and the id are ignored.
    """
    user = db.get(User, user_id)
    if user is None:
        return
    changed = False
    for key, value in fields.items():
        if key not in MUTABLE_FIELDS:
            continue
        setattr(user, key, value)
        changed = True
    if changed:
        db.commit()


def delete_user(db: Session, user_id: str) -> None:
    """
    Remove the user if it exists. Deleting an unknown id is not an error.
    """
    user = db.get(User, user_id)
    if user is None:
        return
    db.delete(user)
    db.commit()
