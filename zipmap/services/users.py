"""Create and update flows for user records.

Both flows geocode before anything is written, so a ZIP the provider does not
know never leaves a half-updated record behind. Database calls are blocking and
run in the threadpool; only the geocoding is awaited on the event loop.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol
from uuid import uuid4

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ..core.errors import NotFoundError, UserValidationError, ZipNotFoundError
from ..core.validation import validate_user, zip5, zip_format_errors
from ..crud import users as users_crud
from ..schemas.lookup import GeoResult
from ..schemas.user import UserInput

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found."


class Geocoder(Protocol):
    async def get_geo_data(self, zip5: str) -> GeoResult | None: ...


async def _geocode(geocoder: Geocoder, zip_code: str) -> GeoResult:
    geo = await geocoder.get_geo_data(zip5(zip_code))
    if geo is None:
        raise ZipNotFoundError(zip_code)
    return geo


async def create_user(db: Session, geocoder: Geocoder, body: Mapping[str, Any]) -> dict[str, Any]:
    submitted = UserInput.from_body(body)
    errors = validate_user(submitted.model_dump())
    if errors:
        raise UserValidationError(errors)

    geo = await _geocode(geocoder, submitted.zip)
    record = {
        "id": str(uuid4()),
        "name": submitted.name,
        "zip": submitted.zip,
        **geo.model_dump(),
    }
    created = await run_in_threadpool(users_crud.create_user, db, record)
    logger.info("Created user %s", created["id"], extra={"extra_data": {"user_id": created["id"]}})
    return created


def get_user_or_404(db: Session, user_id: str) -> dict[str, Any]:
    user = users_crud.get_user(db, user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND)
    return user


async def update_user(db: Session, geocoder: Geocoder, user_id: str, body: Mapping[str, Any]) -> dict[str, Any]:
    """Merge name/zip into the stored user, re-geocoding only on a new zip.

    Blank or missing fields mean "keep the stored value".
    """
    existing = await run_in_threadpool(get_user_or_404, db, user_id)
    submitted = UserInput.from_body(body)
    if submitted.zip is not None:
        errors = zip_format_errors(submitted.zip)
        if errors:
            raise UserValidationError(errors)

    changes: dict[str, Any] = {
        "name": submitted.name or existing.get("name"),
        "zip": submitted.zip or existing.get("zip"),
    }
    if submitted.zip and submitted.zip != existing.get("zip"):
        geo = await _geocode(geocoder, submitted.zip)
        changes.update(geo.model_dump())

    await run_in_threadpool(users_crud.update_user, db, user_id, changes)
    return await run_in_threadpool(get_user_or_404, db, user_id)
