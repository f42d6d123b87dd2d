"""Allowlist registry: privileged and standard membership sets."""

import logging
from typing import Iterable

from ..core.models import AllowlistTier, BatchResult, is_valid_account_id
from ..storage import SaleStore
from .errors import InvalidAccountId, Unauthorized

logger = logging.getLogger(__name__)


def require_account_id(account_id: str) -> str:
    if not is_valid_account_id(account_id):
        raise InvalidAccountId(f"Invalid account id: {account_id!r}")
    return account_id


class AllowlistRegistry:
    """Owner-managed membership sets, one per tier.

    Adds and removes are idempotent. Batch variants handle each account on
    its own: an invalid entry is rejected and logged without blocking the
    rest of the batch.
    """

    def __init__(self, store: SaleStore, owner_id: str):
        self.store = store
        self.owner_id = owner_id

    def _assert_owner(self, caller: str) -> None:
        if caller != self.owner_id:
            raise Unauthorized(f"Unauthorized: {caller!r} is not the contract owner")

    def add(self, tier: AllowlistTier, account_id: str, *, caller: str) -> bool:
        """Add an account. Returns False when it was already listed."""
        self._assert_owner(caller)
        require_account_id(account_id)
        with self.store.transaction():
            added = self.store.allowlist_add(tier, account_id)
        if added:
            logger.info("Added %s to %s allowlist", account_id, tier.value)
        return added

    def remove(self, tier: AllowlistTier, account_id: str, *, caller: str) -> bool:
        """Remove an account. Removing a non-member is a no-op."""
        self._assert_owner(caller)
        with self.store.transaction():
            removed = self.store.allowlist_remove(tier, account_id)
        if removed:
            logger.info("Removed %s from %s allowlist", account_id, tier.value)
        return removed

    def add_batch(
        self, tier: AllowlistTier, account_ids: Iterable[str], *, caller: str
    ) -> BatchResult:
        self._assert_owner(caller)
        result = BatchResult()
        for account_id in account_ids:
            try:
                self.add(tier, account_id, caller=caller)
            except InvalidAccountId as e:
                logger.warning("Skipping %s allowlist entry: %s", tier.value, e)
                result.rejected.append(account_id)
            else:
                result.applied.append(account_id)
        return result

    def remove_batch(
        self, tier: AllowlistTier, account_ids: Iterable[str], *, caller: str
    ) -> BatchResult:
        self._assert_owner(caller)
        result = BatchResult()
        for account_id in account_ids:
            self.remove(tier, account_id, caller=caller)
            result.applied.append(account_id)
        return result

    def contains(self, tier: AllowlistTier, account_id: str) -> bool:
        return self.store.allowlist_contains(tier, account_id)

    def members(self, tier: AllowlistTier) -> list[str]:
        return self.store.allowlist_members(tier)
