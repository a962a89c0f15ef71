# marketplace/routers/admin.py
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..deps import get_profile
from ..models import BestClientOut, BestProfessionOut
from ..reports import best_clients, best_profession
from ..tables import Profile

router = APIRouter(prefix="/admin", tags=["admin"])


def _check_range(start: date, end: date):
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")


@router.get("/best-profession", response_model=BestProfessionOut)
async def get_best_profession(
    start: date = Query(...),
    end: date = Query(...),
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_session),
):
    _check_range(start, end)
    best = await best_profession(db, start, end)
    if best is None:
        raise HTTPException(status_code=404, detail="No paid jobs in this period")
    profession, earned = best
    return BestProfessionOut(profession=profession, earned=earned)


@router.get("/best-clients", response_model=List[BestClientOut])
async def get_best_clients(
    start: date = Query(...),
    end: date = Query(...),
    limit: int = Query(default=2, ge=1, le=100),
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_session),
):
    _check_range(start, end)
    return [BestClientOut(**row) for row in await best_clients(db, start, end, limit)]
