"""
Shared fixtures: a throwaway SQLite database per test, seeded with a small
marketplace.

Profiles
  1 Alice  client      100.00   contracts 1 (with Carol), 2 (with Dan)
  2 Bob    client       10.00   contracts 3 (terminated, Carol), 4 (Dan)
  3 Carol  contractor   20.00   Programmer
  4 Dan    contractor    5.00   Musician
  5 Eve    client        0.00   no contracts

Jobs
  1 contract 1  50.00 unpaid
  2 contract 1 150.00 unpaid
  3 contract 2  30.00 paid 2026-01-15
  4 contract 3 500.00 unpaid (terminated contract)
  5 contract 4  40.00 unpaid
  6 contract 4  25.00 paid 2026-02-10
  7 contract 1  80.00 paid 2026-03-05
"""
from datetime import datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from marketplace import db
from marketplace.ledger import find_profile
from marketplace.main import app
from marketplace.tables import Contract, ContractStatus, Job, Profile, Role

ALICE, BOB, CAROL, DAN, EVE = 1, 2, 3, 4, 5


def _seed_rows():
    # parents first; the tables declare no relationships for the unit of work to sort on
    profiles = [
        Profile(id=ALICE, first_name="Alice", last_name="Archer", profession="Architect",
                role=Role.CLIENT, balance=Decimal("100.00")),
        Profile(id=BOB, first_name="Bob", last_name="Baker", profession="Baker",
                role=Role.CLIENT, balance=Decimal("10.00")),
        Profile(id=CAROL, first_name="Carol", last_name="Coder", profession="Programmer",
                role=Role.CONTRACTOR, balance=Decimal("20.00")),
        Profile(id=DAN, first_name="Dan", last_name="Drummer", profession="Musician",
                role=Role.CONTRACTOR, balance=Decimal("5.00")),
        Profile(id=EVE, first_name="Eve", last_name="Evans", profession="Editor",
                role=Role.CLIENT, balance=Decimal("0.00")),
    ]
    contracts = [
        Contract(id=1, terms="website", status=ContractStatus.IN_PROGRESS, client_id=ALICE, contractor_id=CAROL),
        Contract(id=2, terms="wedding band", status=ContractStatus.NEW, client_id=ALICE, contractor_id=DAN),
        Contract(id=3, terms="old app", status=ContractStatus.TERMINATED, client_id=BOB, contractor_id=CAROL),
        Contract(id=4, terms="jingle", status=ContractStatus.IN_PROGRESS, client_id=BOB, contractor_id=DAN),
    ]
    jobs = [
        Job(id=1, description="landing page", price=Decimal("50.00"), paid=False, contract_id=1),
        Job(id=2, description="checkout flow", price=Decimal("150.00"), paid=False, contract_id=1),
        Job(id=3, description="first dance", price=Decimal("30.00"), paid=True,
            payment_date=datetime(2026, 1, 15, 10, 0), contract_id=2),
        Job(id=4, description="legacy port", price=Decimal("500.00"), paid=False, contract_id=3),
        Job(id=5, description="radio jingle", price=Decimal("40.00"), paid=False, contract_id=4),
        Job(id=6, description="demo tape", price=Decimal("25.00"), paid=True,
            payment_date=datetime(2026, 2, 10, 9, 30), contract_id=4),
        Job(id=7, description="analytics", price=Decimal("80.00"), paid=True,
            payment_date=datetime(2026, 3, 5, 12, 0), contract_id=1),
    ]
    return [profiles, contracts, jobs]


@pytest_asyncio.fixture
async def database(tmp_path):
    engine = db.configure(f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}")
    await db.init_models()
    async with db.session_factory()() as session:
        for rows in _seed_rows():
            session.add_all(rows)
            await session.flush()
        await session.commit()
    yield engine
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with db.session_factory()() as session:
        yield session


@pytest.fixture
def new_session(database):
    """Open extra sessions (separate connections) for concurrency and read-back checks."""
    return db.session_factory()


@pytest_asyncio.fixture
async def client(database):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


async def load_actor(session, profile_id):
    # release the read transaction; SQLite transactions hold the write lock
    actor = await find_profile(session, profile_id)
    await session.commit()
    return actor


async def balances(new_session, *profile_ids):
    async with new_session() as s:
        return [(await find_profile(s, pid)).balance for pid in profile_ids]
