# marketplace/routers/health.py
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health():
    return {"ok": True}


@router.get("/db")
async def health_db(db: AsyncSession = Depends(get_session)):
    try:
        result = await db.execute(text("select 1"))
        return {"ok": True, "db": result.scalar_one()}
    except SQLAlchemyError as e:
        # surface the error so we know exactly what's wrong
        return {"ok": False, "error": str(e)}
