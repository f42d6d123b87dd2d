"""Failure kinds raised by sale operations.

Every error aborts the triggering call. The store rolls back whatever the
call staged, so callers can resubmit with corrected inputs.
"""


class SaleError(Exception):
    """Base class for all sale failures."""

    code = "SaleError"
    default_message = "Sale operation failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class Unauthorized(SaleError):
    code = "Unauthorized"
    default_message = "Caller is not the contract owner"


class AlreadyInitialized(SaleError):
    code = "AlreadyInitialized"
    default_message = "Contract is already initialized"


class NotInitialized(SaleError):
    code = "NotInitialized"
    default_message = "Contract is not initialized"


class MaxSupplyReached(SaleError):
    code = "MaxSupplyReached"
    default_message = "Exceeds max supply"


class SaleNotStarted(SaleError):
    code = "SaleNotStarted"
    default_message = "Presale not started"


class NotEligible(SaleError):
    code = "NotEligible"
    default_message = "Caller is not on an allowlist"


class InsufficientFunds(SaleError):
    code = "InsufficientFunds"
    default_message = "Insufficient deposit"


class TokenAlreadyExists(SaleError):
    code = "TokenAlreadyExists"
    default_message = "Token already exists"


class PoolExhausted(SaleError):
    code = "PoolExhausted"
    default_message = "No identifiers left to draw"


class InvalidAccountId(SaleError, ValueError):
    code = "InvalidAccountId"
    default_message = "Invalid account id"
