"""Sale models for Mintgate.

This module contains:
- Enums: SalePhase, AllowlistTier
- Accounts: account id validation helpers
- Metadata: ContractMetadata, TokenMetadata
- Records: TokenRecord, Admission, BatchResult
- Events: NftMintLog, EventLog
"""

import re
from enum import Enum
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, Field

# Name and version of the token standard the mint events follow.
NFT_STANDARD_NAME = "nep171"
NFT_METADATA_SPEC = "nft-1.0.0"

EVENT_LOG_PREFIX = "EVENT_JSON:"

# Royalty shares are expressed in basis points of this total.
ROYALTY_TOTAL_BPS = 10_000


# =============================================================================
# Enums
# =============================================================================


class SalePhase(str, Enum):
    """Point in the sale timeline, derived from the clock on every call."""

    NOT_STARTED = "not_started"
    PRESALE = "presale"
    PUBLIC = "public"

    @property
    def code(self) -> int:
        """Numeric sale state (0 = not started, 1 = presale, 2 = public)."""
        return _PHASE_CODES[self]


_PHASE_CODES = {
    SalePhase.NOT_STARTED: 0,
    SalePhase.PRESALE: 1,
    SalePhase.PUBLIC: 2,
}


class AllowlistTier(str, Enum):
    """Allowlist membership class."""

    PRIVILEGED = "privileged"
    STANDARD = "standard"


# =============================================================================
# Accounts
# =============================================================================

_ACCOUNT_ID_RE = re.compile(r"^(([a-z\d]+[-_])*[a-z\d]+\.)*([a-z\d]+[-_])*[a-z\d]+$")
ACCOUNT_ID_MIN_LEN = 2
ACCOUNT_ID_MAX_LEN = 64


def is_valid_account_id(value: str) -> bool:
    """Check an account id against the naming rules.

    Lowercase alphanumerics separated by single ``-`` or ``_``, optionally
    split into dot-separated parts, 2 to 64 characters overall.
    """
    if not isinstance(value, str):
        return False
    if not ACCOUNT_ID_MIN_LEN <= len(value) <= ACCOUNT_ID_MAX_LEN:
        return False
    return bool(_ACCOUNT_ID_RE.match(value))


def _check_account_id(value: str) -> str:
    if not is_valid_account_id(value):
        raise ValueError(f"Invalid account id: {value!r}")
    return value


AccountId = Annotated[str, AfterValidator(_check_account_id)]


# =============================================================================
# Metadata
# =============================================================================


class ContractMetadata(BaseModel):
    """Collection-level metadata stored once at initialization."""

    spec: str = NFT_METADATA_SPEC
    name: str = "Mintgate Genesis"
    symbol: str = "MGG"
    icon: str | None = None
    base_uri: str | None = None
    reference: str | None = None
    reference_hash: str | None = None


class TokenMetadata(BaseModel):
    """Descriptive metadata derived for a single minted token."""

    title: str | None = None
    description: str | None = None
    media: str | None = None
    media_hash: str | None = None
    copies: int | None = None
    issued_at: int | None = Field(
        default=None, description="Unix epoch in milliseconds"
    )
    expires_at: int | None = None
    starts_at: int | None = None
    updated_at: int | None = None
    extra: str | None = None
    reference: str | None = None
    reference_hash: str | None = None


# =============================================================================
# Records
# =============================================================================


class TokenRecord(BaseModel):
    """Ownership record created by a successful mint.

    ``drawn_id`` is the numeric identifier consumed from the pool for this
    mint, which equals ``token_id`` unless an override id was supplied.
    """

    token_id: str
    owner_id: AccountId
    royalty: dict[str, int] = Field(default_factory=dict)
    approved_account_ids: dict[str, int] = Field(default_factory=dict)
    next_approval_id: int = 0
    drawn_id: int = Field(ge=1)
    sequence: int = Field(ge=1)
    metadata: TokenMetadata = Field(default_factory=TokenMetadata)

    @property
    def is_override(self) -> bool:
        return self.token_id != str(self.drawn_id)


class Admission(BaseModel):
    """Outcome of a successful phase gate evaluation."""

    phase: SalePhase
    tier: AllowlistTier | None = None
    floor: int = Field(ge=0, description="Minimum deposit in yocto units")


class BatchResult(BaseModel):
    """Per-account outcome of a batch allowlist operation."""

    applied: list[str] = Field(default_factory=list)
    rejected: list[str] = Field(default_factory=list)


# =============================================================================
# Events
# =============================================================================


class NftMintLog(BaseModel):
    """Payload entry of an ``nft_mint`` event."""

    owner_id: str
    token_ids: list[str]
    memo: str | None = None


class EventLog(BaseModel):
    """Structured event emitted for every successful mint.

    The serialized line doubles as the receipt returned to the caller.
    """

    standard: str = NFT_STANDARD_NAME
    version: str = NFT_METADATA_SPEC
    event: str = "nft_mint"
    data: list[NftMintLog]

    @classmethod
    def mint(cls, owner_id: str, token_ids: list[str], memo: str | None = None):
        return cls(
            data=[NftMintLog(owner_id=owner_id, token_ids=token_ids, memo=memo)]
        )

    def to_log_line(self) -> str:
        return f"{EVENT_LOG_PREFIX}{self.model_dump_json()}"

    @classmethod
    def from_log_line(cls, line: str) -> "EventLog":
        if not line.startswith(EVENT_LOG_PREFIX):
            raise ValueError(f"Not an event log line: {line[:40]!r}")
        return cls.model_validate_json(line[len(EVENT_LOG_PREFIX) :])

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
