"""All Pydantic models for Mintgate.

- sale.py: Phases, tiers, metadata, token records and mint events
"""

from .sale import (
    # Constants
    NFT_STANDARD_NAME,
    NFT_METADATA_SPEC,
    EVENT_LOG_PREFIX,
    ROYALTY_TOTAL_BPS,
    # Enums
    SalePhase,
    AllowlistTier,
    # Accounts
    AccountId,
    is_valid_account_id,
    # Metadata
    ContractMetadata,
    TokenMetadata,
    # Records
    TokenRecord,
    Admission,
    BatchResult,
    # Events
    NftMintLog,
    EventLog,
)

__all__ = [
    "NFT_STANDARD_NAME",
    "NFT_METADATA_SPEC",
    "EVENT_LOG_PREFIX",
    "ROYALTY_TOTAL_BPS",
    "SalePhase",
    "AllowlistTier",
    "AccountId",
    "is_valid_account_id",
    "ContractMetadata",
    "TokenMetadata",
    "TokenRecord",
    "Admission",
    "BatchResult",
    "NftMintLog",
    "EventLog",
]
