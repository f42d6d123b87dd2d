"""Tests for the phase gate."""

import pytest

from mintgate.config import SaleConfig
from mintgate.core.models import AllowlistTier, SalePhase
from mintgate.sale import InsufficientFunds, NotEligible, PhaseGate, SaleNotStarted

from .conftest import (
    PRESALE_START,
    PRIVILEGED_PRICE,
    PUBLIC_PRICE,
    PUBLIC_START,
    STANDARD_PRICE,
)


@pytest.fixture
def gate():
    return PhaseGate(
        SaleConfig(
            presale_start=PRESALE_START,
            public_start=PUBLIC_START,
            privileged_price=PRIVILEGED_PRICE,
            standard_price=STANDARD_PRICE,
            public_price=PUBLIC_PRICE,
        )
    )


class TestPhaseAt:
    @pytest.mark.parametrize(
        "now,expected",
        [
            (PRESALE_START - 1, SalePhase.NOT_STARTED),
            (PRESALE_START, SalePhase.PRESALE),
            (PUBLIC_START - 1, SalePhase.PRESALE),
            (PUBLIC_START, SalePhase.PUBLIC),
            (PUBLIC_START + 10**9, SalePhase.PUBLIC),
        ],
    )
    def test_boundaries(self, gate, now, expected):
        assert gate.phase_at(now) is expected

    def test_phase_codes(self):
        assert SalePhase.NOT_STARTED.code == 0
        assert SalePhase.PRESALE.code == 1
        assert SalePhase.PUBLIC.code == 2

    def test_rejects_inverted_thresholds(self):
        with pytest.raises(ValueError):
            PhaseGate(SaleConfig(presale_start=10, public_start=5))


class TestAdmit:
    def test_before_presale_fails_for_everyone(self, gate):
        with pytest.raises(SaleNotStarted):
            gate.admit(
                PRESALE_START - 1, 10**30, privileged=True, standard=True
            )

    def test_presale_unlisted_fails_with_any_deposit(self, gate):
        with pytest.raises(NotEligible):
            gate.admit(PRESALE_START, 10**30, privileged=False, standard=False)

    def test_privileged_floor_is_inclusive(self, gate):
        admission = gate.admit(
            PRESALE_START, PRIVILEGED_PRICE, privileged=True, standard=False
        )
        assert admission.phase is SalePhase.PRESALE
        assert admission.tier is AllowlistTier.PRIVILEGED
        assert admission.floor == PRIVILEGED_PRICE

    def test_privileged_one_below_floor(self, gate):
        with pytest.raises(InsufficientFunds):
            gate.admit(
                PRESALE_START, PRIVILEGED_PRICE - 1, privileged=True, standard=False
            )

    def test_both_tiers_pay_privileged_floor(self, gate):
        admission = gate.admit(
            PRESALE_START, PRIVILEGED_PRICE, privileged=True, standard=True
        )
        assert admission.tier is AllowlistTier.PRIVILEGED
        assert admission.floor == PRIVILEGED_PRICE

    def test_standard_pays_standard_floor(self, gate):
        with pytest.raises(InsufficientFunds):
            gate.admit(
                PRESALE_START, STANDARD_PRICE - 1, privileged=False, standard=True
            )
        admission = gate.admit(
            PRESALE_START, STANDARD_PRICE, privileged=False, standard=True
        )
        assert admission.floor == STANDARD_PRICE

    def test_public_phase_open_to_anyone(self, gate):
        admission = gate.admit(
            PUBLIC_START, PUBLIC_PRICE, privileged=False, standard=False
        )
        assert admission.phase is SalePhase.PUBLIC
        assert admission.tier is None
        with pytest.raises(InsufficientFunds):
            gate.admit(PUBLIC_START, PUBLIC_PRICE - 1, privileged=False, standard=False)

    def test_tier_price_still_applies_in_public_phase(self, gate):
        admission = gate.admit(
            PUBLIC_START, PRIVILEGED_PRICE, privileged=True, standard=False
        )
        assert admission.floor == PRIVILEGED_PRICE

    def test_overpayment_accepted(self, gate):
        admission = gate.admit(
            PUBLIC_START, PUBLIC_PRICE * 100, privileged=False, standard=False
        )
        assert admission.floor == PUBLIC_PRICE
