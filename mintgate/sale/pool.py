"""Identifier pool: unallocated identifiers with ordered draw-without-replacement."""

import logging

from ..storage import SaleStore
from .entropy import EntropySource
from .errors import PoolExhausted

logger = logging.getLogger(__name__)


class IdentifierPool:
    """Identifiers in ``[1, cap]`` not yet issued.

    The pool is seeded once and only ever shrinks. A draw removes the entry at
    the entropy-chosen index and keeps the relative order of what remains.
    """

    def __init__(self, store: SaleStore, entropy: EntropySource):
        self.store = store
        self.entropy = entropy

    def seed(self, cap: int) -> None:
        if cap < 1:
            raise ValueError(f"cap must be at least 1, got {cap}")
        self.store.seed_pool(range(1, cap + 1))

    def draw(self) -> int:
        """Remove and return one identifier.

        Raises:
            PoolExhausted: If no identifiers remain.
        """
        size = self.store.pool_size()
        if size == 0:
            raise PoolExhausted()

        index = self.entropy.next_index(size)
        entry = self.store.pool_entry_at(index)
        if entry is None:
            raise IndexError(f"Entropy index {index} out of range for pool of {size}")
        position, identifier = entry
        self.store.delete_pool_entry(position)
        logger.debug("Drew identifier %d at index %d of %d", identifier, index, size)
        return identifier

    def remaining(self) -> list[int]:
        return self.store.pool_snapshot()

    def __len__(self) -> int:
        return self.store.pool_size()
