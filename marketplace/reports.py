# marketplace/reports.py
"""Admin reporting over paid jobs. Read-only; results are not validated further."""
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .money import to_money
from .tables import Contract, Job, Profile


def payment_window(start: date, end: date) -> Tuple[datetime, datetime]:
    """Half-open [start 00:00, day after end 00:00) so ``end`` is inclusive."""
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


def _paid_between(start: date, end: date):
    lower, upper = payment_window(start, end)
    return (Job.paid.is_(True), Job.payment_date >= lower, Job.payment_date < upper)


async def best_profession(session: AsyncSession, start: date, end: date) -> Optional[Tuple[str, Decimal]]:
    earned = func.sum(Job.price)
    stmt = (
        select(Profile.profession, earned)
        .select_from(Job)
        .join(Contract, Job.contract_id == Contract.id)
        .join(Profile, Contract.contractor_id == Profile.id)
        .where(*_paid_between(start, end))
        .group_by(Profile.profession)
        .order_by(earned.desc(), Profile.profession)
        .limit(1)
    )
    row = (await session.execute(stmt)).first()
    if row is None:
        return None
    return row[0], to_money(row[1])


async def best_clients(session: AsyncSession, start: date, end: date, limit: int = 2) -> List[dict]:
    paid = func.sum(Job.price)
    stmt = (
        select(Profile.id, Profile.first_name, Profile.last_name, paid)
        .select_from(Job)
        .join(Contract, Job.contract_id == Contract.id)
        .join(Profile, Contract.client_id == Profile.id)
        .where(*_paid_between(start, end))
        .group_by(Profile.id, Profile.first_name, Profile.last_name)
        .order_by(paid.desc(), Profile.id)
        .limit(limit)
    )
    return [
        {"id": pid, "full_name": f"{first} {last}", "paid": to_money(total)}
        for pid, first, last, total in (await session.execute(stmt)).all()
    ]
