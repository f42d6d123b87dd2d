"""Tests for allowlist administration."""

import pytest

from mintgate.core.models import AllowlistTier
from mintgate.sale import InvalidAccountId, Unauthorized

from .conftest import OWNER


class TestAdminGuard:
    def test_non_owner_cannot_add(self, contract):
        with pytest.raises(Unauthorized):
            contract.add_privileged("alice.near", caller="mallory.near")
        assert contract.is_privileged("alice.near") is False

    def test_non_owner_cannot_remove(self, contract):
        contract.add_standard("alice.near", caller=OWNER)
        with pytest.raises(Unauthorized):
            contract.remove_standard("alice.near", caller="mallory.near")
        assert contract.is_standard("alice.near") is True

    def test_batch_guard_runs_before_any_account(self, contract):
        with pytest.raises(Unauthorized):
            contract.add_standard_batch(
                ["alice.near", "bob.near"], caller="mallory.near"
            )
        assert contract.is_standard("alice.near") is False
        assert contract.is_standard("bob.near") is False


class TestMembership:
    def test_add_is_idempotent(self, contract):
        assert contract.add_privileged("alice.near", caller=OWNER) is True
        assert contract.add_privileged("alice.near", caller=OWNER) is False
        assert contract.is_privileged("alice.near") is True
        assert contract.allowlists.members(AllowlistTier.PRIVILEGED) == ["alice.near"]

    def test_remove_non_member_is_noop(self, contract):
        assert contract.remove_privileged("ghost.near", caller=OWNER) is False
        assert contract.is_privileged("ghost.near") is False

    def test_remove_member(self, contract):
        contract.add_privileged("alice.near", caller=OWNER)
        assert contract.remove_privileged("alice.near", caller=OWNER) is True
        assert contract.is_privileged("alice.near") is False

    def test_tiers_are_independent(self, contract):
        contract.add_privileged("alice.near", caller=OWNER)
        assert contract.is_privileged("alice.near") is True
        assert contract.is_standard("alice.near") is False

        contract.add_standard("alice.near", caller=OWNER)
        contract.remove_privileged("alice.near", caller=OWNER)
        assert contract.is_standard("alice.near") is True

    def test_invalid_account_rejected(self, contract):
        with pytest.raises(InvalidAccountId):
            contract.add_standard("Not An Account", caller=OWNER)

    def test_membership_queries_are_unrestricted(self, contract):
        # No caller needed for reads
        assert contract.is_standard("anyone.near") is False


class TestBatches:
    def test_add_batch_applies_each_account(self, contract):
        result = contract.add_standard_batch(
            ["alice.near", "bob.near", "alice.near"], caller=OWNER
        )
        assert result.rejected == []
        assert contract.allowlists.members(AllowlistTier.STANDARD) == [
            "alice.near",
            "bob.near",
        ]

    def test_invalid_entry_does_not_block_others(self, contract, caplog):
        with caplog.at_level("WARNING"):
            result = contract.add_privileged_batch(
                ["alice.near", "BAD ID", "bob.near"], caller=OWNER
            )

        assert result.applied == ["alice.near", "bob.near"]
        assert result.rejected == ["BAD ID"]
        assert contract.is_privileged("alice.near")
        assert contract.is_privileged("bob.near")
        assert "BAD ID" in caplog.text

    def test_remove_batch_tolerates_non_members(self, contract):
        contract.add_standard_batch(["alice.near", "bob.near"], caller=OWNER)
        result = contract.remove_standard_batch(
            ["alice.near", "ghost.near"], caller=OWNER
        )
        assert result.applied == ["alice.near", "ghost.near"]
        assert contract.allowlists.members(AllowlistTier.STANDARD) == ["bob.near"]

    def test_privileged_batch_remove(self, contract):
        contract.add_privileged_batch(["alice.near", "bob.near"], caller=OWNER)
        contract.remove_privileged_batch(["alice.near", "bob.near"], caller=OWNER)
        assert contract.allowlists.members(AllowlistTier.PRIVILEGED) == []
