from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..core.errors import error_boundary
from ..core.payload import read_json_body
from ..crud import users as users_crud
from ..db.session import get_db
from ..deps.lookups import get_weather_client
from ..services import users as users_service
from ..services.openweather import OpenWeatherClient

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=201)
async def api_create(
    request: Request,
    db: Session = Depends(get_db),
    weather: OpenWeatherClient = Depends(get_weather_client),
):
    with error_boundary("create_user", "Failed to create user.", include_details=True):
        body = await read_json_body(request)
        user = await users_service.create_user(db, weather, body)
    return JSONResponse(user, status_code=201)


@router.get("")
def api_list(db: Session = Depends(get_db)):
    with error_boundary("list_users", "Failed to fetch users."):
        users = users_crud.list_users(db)
    return JSONResponse(users)


@router.get("/{user_id}")
def api_get(user_id: str, db: Session = Depends(get_db)):
    with error_boundary("get_user", "Failed to fetch user."):
        user = users_service.get_user_or_404(db, user_id)
    return JSONResponse(user)


@router.put("/{user_id}")
async def api_update(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    weather: OpenWeatherClient = Depends(get_weather_client),
):
    with error_boundary("update_user", "Failed to update user."):
        body = await read_json_body(request)
        user = await users_service.update_user(db, weather, user_id, body)
    return JSONResponse(user)


@router.delete("/{user_id}", status_code=204)
def api_delete(user_id: str, db: Session = Depends(get_db)):
    with error_boundary("delete_user", "Failed to delete user."):
        users_crud.delete_user(db, user_id)
    return Response(status_code=204)
