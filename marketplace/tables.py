# marketplace/tables.py
import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

MONEY = Numeric(12, 2)


class Base(DeclarativeBase):
    pass


class Role(str, enum.Enum):
    CLIENT = "client"
    CONTRACTOR = "contractor"


class ContractStatus(str, enum.Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    TERMINATED = "terminated"


def _values(enum_cls):
    return [member.value for member in enum_cls]


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_profiles_balance_non_negative"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(120))
    last_name: Mapped[str] = mapped_column(String(120))
    profession: Mapped[str] = mapped_column(String(120))
    role: Mapped[Role] = mapped_column(Enum(Role, name="profile_role", values_callable=_values))
    balance: Mapped[Decimal] = mapped_column(MONEY, default=Decimal("0.00"))


class Contract(Base):
    __tablename__ = "contracts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    terms: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[ContractStatus] = mapped_column(
        Enum(ContractStatus, name="contract_status", values_callable=_values),
        default=ContractStatus.NEW,
    )
    client_id: Mapped[int] = mapped_column(ForeignKey("profiles.id"), index=True)
    contractor_id: Mapped[int] = mapped_column(ForeignKey("profiles.id"), index=True)


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (CheckConstraint("price >= 0", name="ck_jobs_price_non_negative"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    description: Mapped[str] = mapped_column(Text, default="")
    price: Mapped[Decimal] = mapped_column(MONEY)
    paid: Mapped[bool] = mapped_column(Boolean, default=False)
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    contract_id: Mapped[int] = mapped_column(ForeignKey("contracts.id"), index=True)
