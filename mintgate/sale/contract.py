"""Sale contract: initialization, admin, mint and query surfaces.

Example:
    store = SaleStore(":memory:")
    contract = SaleContract(store, clock=FrozenClock.at_ms(1_700_000_000_000))
    contract.initialize("owner.near")
    contract.add_privileged("alice.near", caller="owner.near")
    receipt = contract.mint(None, "alice.near", caller="alice.near", deposit=price)
"""

import logging
from dataclasses import asdict, replace
from typing import Iterable

from ..config import MintgateConfig, RoyaltyConfig, SaleConfig, get_config
from ..core.models import (
    ROYALTY_TOTAL_BPS,
    AllowlistTier,
    BatchResult,
    ContractMetadata,
    SalePhase,
    TokenMetadata,
    TokenRecord,
)
from ..storage import SaleStore
from .allowlist import AllowlistRegistry, require_account_id
from .collaborators import (
    EventSink,
    LoggingEventSink,
    OwnershipRegistry,
    StoreOwnershipRegistry,
)
from .entropy import Clock, ClockEntropy, EntropySource, SystemClock, now_ms
from .errors import AlreadyInitialized, NotInitialized
from .ledger import MintLedger
from .phase import PhaseGate
from .pool import IdentifierPool

logger = logging.getLogger(__name__)


class SaleContract:
    """Phased, allowlist-gated sale of a fixed identifier range.

    All state lives in the given ``SaleStore``. Sale terms (thresholds, price
    floors, royalty) are taken from config once, by ``initialize``, and read
    back from the store afterwards.

    The clock, entropy source, ownership registry and event sink are
    injectable; by default the draw index comes from the clock, ownership is
    indexed in the store and events go to the ``mintgate.events`` logger.
    """

    def __init__(
        self,
        store: SaleStore,
        *,
        config: MintgateConfig | None = None,
        clock: Clock | None = None,
        entropy: EntropySource | None = None,
        ownership: OwnershipRegistry | None = None,
        sink: EventSink | None = None,
    ):
        self.store = store
        self.config = config or get_config()
        self.clock = clock or SystemClock()
        self.entropy = entropy or ClockEntropy(self.clock)
        self.ownership = ownership or StoreOwnershipRegistry(store)
        self.sink = sink or LoggingEventSink()

        self.pool = IdentifierPool(store, self.entropy)

    # ── Initialization ──

    def initialize(
        self,
        owner_id: str,
        metadata: ContractMetadata | None = None,
        cap: int | None = None,
    ) -> None:
        """Set the owner, contract metadata, sale terms and identifier range.

        Callable once. Thresholds, prices and the royalty beneficiary are
        copied from the active config into the store here; later config
        changes do not affect an initialized sale.

        Raises:
            AlreadyInitialized: On a second call against the same store.
            InvalidAccountId: If owner_id or the royalty account is malformed.
            ValueError: On a non-positive cap, inverted thresholds or a
                royalty share outside 0..10000 basis points.
        """
        require_account_id(owner_id)
        cap = cap if cap is not None else self.config.sale.cap
        if cap < 1:
            raise ValueError(f"cap must be at least 1, got {cap}")

        sale = replace(self.config.sale, cap=cap)
        PhaseGate(sale)  # rejects inverted thresholds
        royalty = replace(self.config.royalty)
        require_account_id(royalty.account)
        if not 0 <= royalty.basis_points <= ROYALTY_TOTAL_BPS:
            raise ValueError(
                f"royalty basis_points must be within 0..{ROYALTY_TOTAL_BPS}, "
                f"got {royalty.basis_points}"
            )

        with self.store.transaction():
            if self.store.is_initialized():
                raise AlreadyInitialized()
            self.store.set_meta("owner_id", owner_id)
            self.store.set_meta("cap", cap)
            self.store.set_meta("sale_terms", asdict(sale))
            self.store.set_meta("royalty", asdict(royalty))
            self.store.save_contract_metadata(metadata or ContractMetadata())
            self.pool.seed(cap)

        logger.info("Initialized sale for owner %s with %d identifiers", owner_id, cap)

    @property
    def initialized(self) -> bool:
        return self.store.is_initialized()

    @property
    def owner_id(self) -> str:
        owner_id = self.store.get_meta("owner_id")
        if owner_id is None:
            raise NotInitialized()
        return owner_id

    @property
    def cap(self) -> int:
        cap = self.store.get_meta("cap")
        if cap is None:
            raise NotInitialized()
        return cap

    @property
    def sale_terms(self) -> SaleConfig:
        """Thresholds and price floors fixed at initialization."""
        data = self.store.get_meta("sale_terms")
        if data is None:
            raise NotInitialized()
        return SaleConfig(**data)

    @property
    def royalty_terms(self) -> RoyaltyConfig:
        """Royalty beneficiary and share fixed at initialization."""
        data = self.store.get_meta("royalty")
        if data is None:
            raise NotInitialized()
        return RoyaltyConfig(**data)

    @property
    def gate(self) -> PhaseGate:
        return PhaseGate(self.sale_terms)

    @property
    def allowlists(self) -> AllowlistRegistry:
        return AllowlistRegistry(self.store, self.owner_id)

    def _ledger(self) -> MintLedger:
        return MintLedger(
            store=self.store,
            pool=self.pool,
            gate=self.gate,
            allowlists=self.allowlists,
            ownership=self.ownership,
            sink=self.sink,
            royalty=self.royalty_terms,
            token=self.config.token,
        )

    # ── Mutating surface ──

    def mint(
        self,
        token_id: str | None,
        receiver_id: str,
        *,
        caller: str,
        deposit: int,
    ) -> str:
        """Mint one token to receiver_id, paid for by caller.

        A token_id override, including the empty string, is used verbatim.

        Returns:
            The ``EVENT_JSON:`` mint event line, which doubles as the receipt.
        """
        require_account_id(receiver_id)
        require_account_id(caller)
        if deposit < 0:
            raise ValueError(f"deposit must be non-negative, got {deposit}")

        return self._ledger().mint(
            token_id,
            receiver_id,
            deposit=deposit,
            caller=caller,
            now_ms=self.current_time(),
            cap=self.cap,
        )

    # ── Admin surface ──

    def add_privileged(self, account_id: str, *, caller: str) -> bool:
        return self.allowlists.add(AllowlistTier.PRIVILEGED, account_id, caller=caller)

    def remove_privileged(self, account_id: str, *, caller: str) -> bool:
        return self.allowlists.remove(
            AllowlistTier.PRIVILEGED, account_id, caller=caller
        )

    def add_privileged_batch(
        self, account_ids: Iterable[str], *, caller: str
    ) -> BatchResult:
        return self.allowlists.add_batch(
            AllowlistTier.PRIVILEGED, account_ids, caller=caller
        )

    def remove_privileged_batch(
        self, account_ids: Iterable[str], *, caller: str
    ) -> BatchResult:
        return self.allowlists.remove_batch(
            AllowlistTier.PRIVILEGED, account_ids, caller=caller
        )

    def add_standard(self, account_id: str, *, caller: str) -> bool:
        return self.allowlists.add(AllowlistTier.STANDARD, account_id, caller=caller)

    def remove_standard(self, account_id: str, *, caller: str) -> bool:
        return self.allowlists.remove(AllowlistTier.STANDARD, account_id, caller=caller)

    def add_standard_batch(
        self, account_ids: Iterable[str], *, caller: str
    ) -> BatchResult:
        return self.allowlists.add_batch(
            AllowlistTier.STANDARD, account_ids, caller=caller
        )

    def remove_standard_batch(
        self, account_ids: Iterable[str], *, caller: str
    ) -> BatchResult:
        return self.allowlists.remove_batch(
            AllowlistTier.STANDARD, account_ids, caller=caller
        )

    # ── Query surface ──

    def is_privileged(self, account_id: str) -> bool:
        return self.store.allowlist_contains(AllowlistTier.PRIVILEGED, account_id)

    def is_standard(self, account_id: str) -> bool:
        return self.store.allowlist_contains(AllowlistTier.STANDARD, account_id)

    def current_time(self) -> int:
        """Current time in Unix epoch milliseconds."""
        return now_ms(self.clock)

    def current_phase(self) -> SalePhase:
        return self.gate.phase_at(self.current_time())

    def remaining_identifiers(self) -> list[int]:
        return self.pool.remaining()

    def total_supply(self) -> int:
        return self.store.token_count()

    def presale_count(self, account_id: str) -> int:
        return self.store.get_mint_count(account_id, SalePhase.PRESALE)

    def public_count(self, account_id: str) -> int:
        return self.store.get_mint_count(account_id, SalePhase.PUBLIC)

    def all_metadata(self) -> list[TokenMetadata]:
        """Metadata of every minted token, in mint order."""
        return [record.metadata for record in self.store.all_tokens()]

    def get_token(self, token_id: str) -> TokenRecord | None:
        return self.store.get_token(token_id)

    def tokens_for_owner(self, owner_id: str) -> list[str]:
        return self.store.tokens_for_owner(owner_id)

    def contract_metadata(self) -> ContractMetadata:
        metadata = self.store.get_contract_metadata()
        if metadata is None:
            raise NotInitialized()
        return metadata
