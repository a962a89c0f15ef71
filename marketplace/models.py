# marketplace/models.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .tables import ContractStatus


class ApiContract(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    terms: str
    status: ContractStatus
    client_id: int
    contractor_id: int


class ApiJob(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    price: Decimal
    paid: bool
    payment_date: Optional[datetime] = None
    contract_id: int


class DepositIn(BaseModel):
    amount: Decimal


class PaymentOut(BaseModel):
    status: str = "paid"
    job_id: int
    amount: Decimal


class BalanceOut(BaseModel):
    balance: Decimal


class DepositOut(BaseModel):
    payload: BalanceOut


class BestProfessionOut(BaseModel):
    profession: str
    earned: Decimal


class BestClientOut(BaseModel):
    id: int
    full_name: str = Field(serialization_alias="fullName")
    paid: Decimal
