from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from shareit.core.config import Settings


async def check_db_service(engine: AsyncEngine):
    try:
        async with engine.connect() as conn:
            await conn.exec_driver_sql("SELECT 1")
        return {"db": True, "message": "Database is connected"}
    except SQLAlchemyError as e:
        return {"db": False, "error": str(e)}


async def ping():
    return {
        "status": "ok",
        "message": "Backend is running",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


def client_config(settings: Settings):
    return {
        "apiUrl": settings.API_URL,
        "remoteApiUrl": settings.REMOTE_API_URL,
        "localApiUrl": settings.LOCAL_API_URL
    }
