"""Phased, allowlist-gated sale of a fixed identifier range.

Components (leaves first):
- entropy: clock and draw-index capabilities
- pool: identifier pool with ordered draw-without-replacement
- allowlist: privileged / standard membership sets
- phase: sale phase, eligibility and price floor
- ledger: atomic mint and per-account accounting
- contract: initialization, admin, mint and query surfaces
"""

from .allowlist import AllowlistRegistry
from .collaborators import (
    EventSink,
    LoggingEventSink,
    MemoryEventSink,
    OwnershipRegistry,
    StoreOwnershipRegistry,
)
from .contract import SaleContract
from .entropy import ClockEntropy, FrozenClock, SystemClock
from .errors import (
    AlreadyInitialized,
    InsufficientFunds,
    InvalidAccountId,
    MaxSupplyReached,
    NotEligible,
    NotInitialized,
    PoolExhausted,
    SaleError,
    SaleNotStarted,
    TokenAlreadyExists,
    Unauthorized,
)
from .ledger import MintLedger, build_token_metadata
from .phase import PhaseGate
from .pool import IdentifierPool

__all__ = [
    "SaleContract",
    "AllowlistRegistry",
    "IdentifierPool",
    "MintLedger",
    "PhaseGate",
    "build_token_metadata",
    # Collaborators
    "EventSink",
    "LoggingEventSink",
    "MemoryEventSink",
    "OwnershipRegistry",
    "StoreOwnershipRegistry",
    # Time
    "ClockEntropy",
    "FrozenClock",
    "SystemClock",
    # Errors
    "SaleError",
    "Unauthorized",
    "AlreadyInitialized",
    "NotInitialized",
    "MaxSupplyReached",
    "SaleNotStarted",
    "NotEligible",
    "InsufficientFunds",
    "TokenAlreadyExists",
    "PoolExhausted",
    "InvalidAccountId",
]
