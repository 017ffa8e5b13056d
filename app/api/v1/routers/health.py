import asyncio
import time

from fastapi import APIRouter

from app.core.config import settings
from app.core.database import check_database_connection

router = APIRouter(tags=["Health"])

STARTED_AT = time.monotonic()


async def check_db(timeout: float = 1.0) -> bool:
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(check_database_connection), timeout
        )
    except Exception:
        return False


@router.get("/health")
async def health() -> dict:
    db_ok = await check_db()
    return {
        "status": "ok" if db_ok else "degraded",
        "database": "ok" if db_ok else "error",
        "version": settings.PROJECT_VERSION,
        "uptime_seconds": round(time.monotonic() - STARTED_AT, 1),
    }
