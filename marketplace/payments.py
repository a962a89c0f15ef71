# marketplace/payments.py
"""
Payment engine: settle one job by moving its price from the client's balance
to the contractor's balance.

The whole settlement is a single transaction. The job row and both profiles
are read FOR UPDATE, and the paid flag is flipped with a compare-and-set so
two payers racing on the same job cannot both win even on stores that ignore
row locks.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from .errors import AlreadyPaid, ForbiddenRole, InsufficientFunds, NotOwner, Unauthenticated
from .ledger import atomic, find_job_with_contract, find_profile, lock_profiles, profile_id_of
from .money import format_money, to_money, utcnow
from .tables import Job, Profile, Role

log = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class PaymentResult:
    job_id: int
    amount: Decimal
    client_balance: Decimal
    status: str = "paid"


def require_client(actor: Profile) -> None:
    match actor.role:
        case Role.CLIENT:
            return
        case Role.CONTRACTOR:
            raise ForbiddenRole()
        case _:
            raise ForbiddenRole(f"Unsupported role: {actor.role!r}")


async def pay_job(session: AsyncSession, actor: Profile, job_id: int) -> PaymentResult:
    actor_id = profile_id_of(actor)

    async with atomic(session, f"payment of job {job_id}"):
        # role is checked against the same snapshot the transfer commits from
        actor = await find_profile(session, actor_id)
        if actor is None:
            raise Unauthenticated()
        require_client(actor)

        found = await find_job_with_contract(session, job_id, for_update=True)
        # a missing job has no owning client, so it reads the same as someone else's job
        if found is None or found[1].client_id != actor.id:
            raise NotOwner()
        job, contract = found
        if job.paid:
            raise AlreadyPaid()

        parties = await lock_profiles(session, [contract.client_id, contract.contractor_id])
        client = parties[contract.client_id]
        contractor = parties[contract.contractor_id]

        price = to_money(job.price)
        if to_money(client.balance) < price:
            raise InsufficientFunds(
                f"Balance {format_money(client.balance)} is below the job price {format_money(price)}"
            )

        claimed = await session.execute(
            update(Job)
            .where(Job.id == job.id, Job.paid.is_(False))
            .values(paid=True, payment_date=utcnow())
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount != 1:
            raise AlreadyPaid()

        client.balance = to_money(client.balance - price)
        contractor.balance = to_money(contractor.balance + price)
        await session.flush()

    log.info(
        f"Paid job {job_id}: {format_money(price)} from profile {client.id} to profile {contractor.id}"
    )
    return PaymentResult(job_id=job_id, amount=price, client_balance=client.balance)
