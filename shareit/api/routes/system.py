from fastapi import APIRouter, Depends, Request, Response

from shareit.core.config import Settings
from shareit.core.dependencies import get_app_settings
from shareit.services.system_services import check_db_service, client_config, ping

router = APIRouter()


@router.get("/ping")
async def get_ping():
    return await ping()


@router.head("/ping")
async def head_ping():
    return Response(status_code=200)


@router.get("/config")
async def config(settings: Settings = Depends(get_app_settings)):
    return client_config(settings)


@router.get("/health/db")
async def check_db(request: Request):
    return await check_db_service(request.app.state.engine)
