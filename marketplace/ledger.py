# marketplace/ledger.py
"""
Store primitives the payment and deposit engines are built on.

Every read that feeds a balance decision can take row locks (``for_update``),
and ``atomic`` scopes one operation to exactly one transaction.
"""
import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncIterator, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import TransactionFailed
from .money import to_money
from .tables import Contract, ContractStatus, Job, Profile

log = logging.getLogger("uvicorn.error")

# ids are 64-bit integer keys; anything larger cannot name a stored row
MAX_ID = 2**63 - 1


@asynccontextmanager
async def atomic(session: AsyncSession, operation: str) -> AsyncIterator[AsyncSession]:
    """Run the block as one transaction: commit on success, roll back on any error.

    Store errors are logged and re-raised as ``TransactionFailed``; domain
    errors pass through untouched (after the rollback).
    """
    try:
        if session.in_transaction():
            # close out reads done while resolving the request (e.g. the actor)
            await session.commit()
        async with session.begin():
            yield session
    except SQLAlchemyError as e:
        log.exception(f"{operation} rolled back after store error")
        raise TransactionFailed() from e


def _storable(row_id: int) -> bool:
    return -MAX_ID - 1 <= row_id <= MAX_ID


def profile_id_of(profile: Profile) -> int:
    # the identity key survives a rollback; attribute access would reload the expired row
    identity = inspect(profile).identity
    return identity[0] if identity else profile.id


def _involves(profile_id: int):
    return or_(Contract.client_id == profile_id, Contract.contractor_id == profile_id)


def _active():
    return Contract.status != ContractStatus.TERMINATED


async def find_profile(session: AsyncSession, profile_id: int, for_update: bool = False) -> Optional[Profile]:
    if not _storable(profile_id):
        return None
    stmt = select(Profile).where(Profile.id == profile_id).execution_options(populate_existing=True)
    if for_update:
        stmt = stmt.with_for_update()
    return (await session.execute(stmt)).scalar_one_or_none()


async def lock_profiles(session: AsyncSession, profile_ids: Iterable[int]) -> Dict[int, Profile]:
    # ascending id order so two transfers between the same pair cannot deadlock
    stmt = (
        select(Profile)
        .where(Profile.id.in_(sorted(set(profile_ids))))
        .order_by(Profile.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return {p.id: p for p in (await session.execute(stmt)).scalars()}


async def find_job_with_contract(
    session: AsyncSession, job_id: int, for_update: bool = False
) -> Optional[Tuple[Job, Contract]]:
    if not _storable(job_id):
        return None
    stmt = (
        select(Job, Contract)
        .join(Contract, Job.contract_id == Contract.id)
        .where(Job.id == job_id)
        .execution_options(populate_existing=True)
    )
    if for_update:
        stmt = stmt.with_for_update()
    row = (await session.execute(stmt)).first()
    if row is None:
        return None
    return row[0], row[1]


async def find_contract(session: AsyncSession, contract_id: int) -> Optional[Contract]:
    if not _storable(contract_id):
        return None
    return await session.get(Contract, contract_id)


async def list_active_contracts(session: AsyncSession, profile_id: int) -> List[Contract]:
    stmt = select(Contract).where(_involves(profile_id), _active()).order_by(Contract.id)
    return list((await session.execute(stmt)).scalars())


def _unpaid_jobs_stmt(columns, profile_id: int):
    return (
        select(*columns)
        .select_from(Job)
        .join(Contract, Job.contract_id == Contract.id)
        .where(Job.paid.is_(False), _active(), _involves(profile_id))
    )


async def list_unpaid_jobs(session: AsyncSession, profile_id: int) -> List[Job]:
    stmt = _unpaid_jobs_stmt([Job], profile_id).order_by(Job.id)
    return list((await session.execute(stmt)).scalars())


async def sum_unpaid_jobs(session: AsyncSession, profile_id: int) -> Decimal:
    """Total price of unpaid jobs on non-terminated contracts where the profile is either party."""
    stmt = _unpaid_jobs_stmt([func.coalesce(func.sum(Job.price), 0)], profile_id)
    return to_money((await session.execute(stmt)).scalar_one())
