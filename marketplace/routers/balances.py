# marketplace/routers/balances.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..deposits import deposit
from ..deps import get_profile
from ..models import BalanceOut, DepositIn, DepositOut
from ..tables import Profile

router = APIRouter(prefix="/balances", tags=["balances"])


@router.post("/deposit/{user_id}", response_model=DepositOut)
async def deposit_balance(
    user_id: int,
    payload: DepositIn,
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_session),
):
    result = await deposit(db, profile, user_id, payload.amount)
    return DepositOut(payload=BalanceOut(balance=result.balance))
