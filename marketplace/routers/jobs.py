# marketplace/routers/jobs.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..deps import get_profile
from ..ledger import list_unpaid_jobs
from ..models import ApiJob, PaymentOut
from ..payments import pay_job
from ..tables import Profile

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("/unpaid", response_model=List[ApiJob])
async def unpaid_jobs(
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_session),
):
    return await list_unpaid_jobs(db, profile.id)


@router.post("/{job_id}/pay", response_model=PaymentOut)
async def pay(
    job_id: int,
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_session),
):
    result = await pay_job(db, profile, job_id)
    return PaymentOut(status=result.status, job_id=result.job_id, amount=result.amount)
