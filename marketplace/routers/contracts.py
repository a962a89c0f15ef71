# marketplace/routers/contracts.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..deps import get_profile
from ..errors import NotFound, Unauthenticated
from ..ledger import find_contract, list_active_contracts
from ..models import ApiContract
from ..tables import Profile

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.get("/{contract_id}", response_model=ApiContract)
async def get_contract(
    contract_id: int,
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_session),
):
    contract = await find_contract(db, contract_id)
    if contract is None:
        raise NotFound("Contract not found")
    if profile.id not in (contract.client_id, contract.contractor_id):
        raise Unauthenticated("Contract does not belong to this profile")
    return contract


@router.get("", response_model=List[ApiContract])
async def list_contracts(
    profile: Profile = Depends(get_profile),
    db: AsyncSession = Depends(get_session),
):
    return await list_active_contracts(db, profile.id)
