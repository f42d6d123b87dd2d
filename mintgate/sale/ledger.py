"""Mint ledger and per-account accounting.

A mint runs as one store transaction:

1. supply cap check
2. phase gate (eligibility + price floor)
3. draw from the identifier pool
4. resolve the token id (override verbatim, else the drawn identifier)
5. build the royalty split
6. insert the token record (unique token id)
7. notify the ownership registry
8. emit the mint event
9. bump the caller's counter for the current phase

Any failure rolls back every write made by the call, including the draw.
"""

import json
import logging
import sqlite3

from ..config import RoyaltyConfig, TokenConfig
from ..core.models import AllowlistTier, EventLog, TokenMetadata, TokenRecord
from ..storage import SaleStore
from .allowlist import AllowlistRegistry
from .collaborators import EventSink, OwnershipRegistry
from .errors import MaxSupplyReached, SaleError, TokenAlreadyExists
from .phase import PhaseGate
from .pool import IdentifierPool

logger = logging.getLogger(__name__)


def class_for_identifier(identifier: int, class_tiers: dict[str, int]) -> str | None:
    """Trait class of an identifier: the tier with the smallest bound covering it."""
    for label, max_id in sorted(class_tiers.items(), key=lambda item: item[1]):
        if identifier <= max_id:
            return label
    return None


def build_token_metadata(
    identifier: int, issued_at_ms: int, token: TokenConfig
) -> TokenMetadata:
    """Derive descriptive metadata for a drawn identifier."""
    trait = class_for_identifier(identifier, token.class_tiers)
    extra = None
    if trait is not None:
        extra = json.dumps({"attributes": [{"trait_type": "Class", "value": trait}]})

    media = None
    if token.media_base_url:
        media = f"{token.media_base_url.rstrip('/')}/{identifier}{token.media_extension}"
    reference = None
    if token.reference_base_url:
        reference = f"{token.reference_base_url.rstrip('/')}/{identifier}.json"

    return TokenMetadata(
        title=f"{token.title_prefix} #{identifier}",
        description=token.description or None,
        media=media,
        media_hash=token.media_hash or None,
        copies=1,
        issued_at=issued_at_ms,
        extra=extra,
        reference=reference,
        reference_hash=token.reference_hash or None,
    )


class MintLedger:
    """Orchestrates a mint and owns the only writes to token ownership state."""

    def __init__(
        self,
        store: SaleStore,
        pool: IdentifierPool,
        gate: PhaseGate,
        allowlists: AllowlistRegistry,
        ownership: OwnershipRegistry,
        sink: EventSink,
        royalty: RoyaltyConfig,
        token: TokenConfig,
    ):
        self.store = store
        self.pool = pool
        self.gate = gate
        self.allowlists = allowlists
        self.ownership = ownership
        self.sink = sink
        self.royalty = royalty
        self.token = token

    def royalty_split(self) -> dict[str, int]:
        # The holder's share (the remainder) is enforced by the ownership side.
        return {self.royalty.account: self.royalty.basis_points}

    def mint(
        self,
        token_id: str | None,
        receiver_id: str,
        *,
        deposit: int,
        caller: str,
        now_ms: int,
        cap: int,
    ) -> str:
        """Mint one token and return the serialized mint event as receipt.

        Raises:
            MaxSupplyReached, SaleNotStarted, NotEligible, InsufficientFunds,
            PoolExhausted, TokenAlreadyExists
        """
        try:
            with self.store.transaction():
                receipt = self._mint(
                    token_id,
                    receiver_id,
                    deposit=deposit,
                    caller=caller,
                    now_ms=now_ms,
                    cap=cap,
                )
        except SaleError as e:
            logger.info("Mint by %s rejected: %s (%s)", caller, e.code, e)
            raise
        return receipt

    def _mint(
        self,
        token_id: str | None,
        receiver_id: str,
        *,
        deposit: int,
        caller: str,
        now_ms: int,
        cap: int,
    ) -> str:
        if self.store.token_count() >= cap:
            raise MaxSupplyReached()

        admission = self.gate.admit(
            now_ms,
            deposit,
            privileged=self.allowlists.contains(AllowlistTier.PRIVILEGED, caller),
            standard=self.allowlists.contains(AllowlistTier.STANDARD, caller),
        )

        drawn = self.pool.draw()
        final_token_id = token_id if token_id is not None else str(drawn)

        record = TokenRecord(
            token_id=final_token_id,
            owner_id=receiver_id,
            royalty=self.royalty_split(),
            drawn_id=drawn,
            sequence=self.store.next_sequence(),
            metadata=build_token_metadata(drawn, now_ms, self.token),
        )
        try:
            self.store.insert_token(record)
        except sqlite3.IntegrityError as e:
            raise TokenAlreadyExists(
                f"Token already exists: {final_token_id!r}"
            ) from e

        self.ownership.notify_acquired(receiver_id, final_token_id)

        event = EventLog.mint(owner_id=receiver_id, token_ids=[final_token_id])
        self.sink.emit(event)

        count = self.store.increment_mint_count(caller, admission.phase)
        logger.info(
            "Minted %s (drawn %d) to %s in %s phase; %s has %d %s mint(s)",
            final_token_id,
            drawn,
            receiver_id,
            admission.phase.value,
            caller,
            count,
            admission.phase.value,
        )
        return event.to_log_line()
