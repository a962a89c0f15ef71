# marketplace/errors.py
"""
Failures surfaced by the payment and deposit engines.

Three families:
  - AuthorizationError: caller may not do this (no side effects).
  - StateError: business rule rejected the request (no side effects).
  - TransactionFailed: the store could not commit; everything was rolled back.

Each carries the HTTP status the routing layer answers with.
"""
from typing import Any, Dict, Optional


class MarketplaceError(Exception):
    status_code = 500
    message = "Request failed"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.message
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)


class AuthorizationError(MarketplaceError):
    pass


class StateError(MarketplaceError):
    status_code = 422


class Unauthenticated(AuthorizationError):
    status_code = 401
    message = "Unknown or missing profile"


class ForbiddenRole(AuthorizationError):
    status_code = 400
    message = "Only clients can perform this operation"


class NotOwner(AuthorizationError):
    status_code = 401
    message = "Job not found for this client"


class ForbiddenTarget(AuthorizationError):
    status_code = 422
    message = "Deposits are only allowed into your own balance"


class AlreadyPaid(StateError):
    message = "Job is already paid"


class InsufficientFunds(StateError):
    message = "Insufficient balance to pay for this job"


class InvalidAmount(StateError):
    message = "Deposit amount must be greater than zero"


class DepositCeilingExceeded(StateError):
    message = "Deposit exceeds 25% of outstanding unpaid jobs"

    def __init__(self, suggestion: str):
        super().__init__(f"{self.message}; the maximum deposit is {suggestion}", suggestion=suggestion)
        self.suggestion = suggestion


class NotFound(MarketplaceError):
    status_code = 404
    message = "Not found"


class TransactionFailed(MarketplaceError):
    status_code = 500
    message = "Transaction failed"
