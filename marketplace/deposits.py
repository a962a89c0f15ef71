# marketplace/deposits.py
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from sqlalchemy.ext.asyncio import AsyncSession

from .errors import DepositCeilingExceeded, ForbiddenTarget, InvalidAmount, Unauthenticated
from .ledger import atomic, find_profile, profile_id_of, sum_unpaid_jobs
from .money import floor_money, format_money, to_money
from .payments import require_client
from .tables import Profile

log = logging.getLogger("uvicorn.error")

# a client may deposit at most this share of their outstanding unpaid work
CEILING_DIVISOR = 4


@dataclass(frozen=True)
class DepositResult:
    profile_id: int
    amount: Decimal
    balance: Decimal


def _as_cents(amount) -> Decimal:
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise InvalidAmount(f"Not a valid amount: {amount!r}")
    if not value.is_finite() or value <= 0:
        raise InvalidAmount()
    if value != to_money(value):
        raise InvalidAmount("Deposit amount cannot have fractions of a cent")
    return value


async def deposit(session: AsyncSession, actor: Profile, target_profile_id: int, amount) -> DepositResult:
    """Credit ``amount`` to the actor's own balance.

    The actor is re-read with its row locked, and the ceiling (a quarter of
    the actor's unpaid job total) is computed inside the same transaction
    that writes the balance.
    """
    actor_id = profile_id_of(actor)

    async with atomic(session, f"deposit into profile {actor_id}"):
        profile = await find_profile(session, actor_id, for_update=True)
        if profile is None:
            raise Unauthenticated()
        require_client(profile)
        if profile.id != target_profile_id:
            raise ForbiddenTarget()
        amount = _as_cents(amount)

        total_unpaid = await sum_unpaid_jobs(session, profile.id)
        ceiling = total_unpaid / CEILING_DIVISOR
        if amount > ceiling:
            # rounded down so the suggested amount is always accepted
            raise DepositCeilingExceeded(suggestion=format_money(floor_money(ceiling)))

        profile.balance = to_money(profile.balance + amount)
        await session.flush()

    log.info(f"Deposited {format_money(amount)} into profile {profile.id}; balance {format_money(profile.balance)}")
    return DepositResult(profile_id=profile.id, amount=amount, balance=profile.balance)
