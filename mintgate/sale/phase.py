"""Phase gate: sale phase, eligibility and price floor.

Everything here is a pure function of the clock reading, the caller's
allowlist membership and the configured thresholds. Nothing is cached
between calls.
"""

from ..config import SaleConfig
from ..core.models import Admission, AllowlistTier, SalePhase
from .errors import InsufficientFunds, NotEligible, SaleNotStarted


class PhaseGate:
    """Decides whether a caller may mint now and at what minimum deposit."""

    def __init__(self, sale: SaleConfig):
        if sale.public_start < sale.presale_start:
            raise ValueError(
                f"public_start ({sale.public_start}) precedes "
                f"presale_start ({sale.presale_start})"
            )
        self.sale = sale

    def phase_at(self, now_ms: int) -> SalePhase:
        if now_ms < self.sale.presale_start:
            return SalePhase.NOT_STARTED
        if now_ms < self.sale.public_start:
            return SalePhase.PRESALE
        return SalePhase.PUBLIC

    @staticmethod
    def tier_for(privileged: bool, standard: bool) -> AllowlistTier | None:
        """Highest tier the caller belongs to."""
        if privileged:
            return AllowlistTier.PRIVILEGED
        if standard:
            return AllowlistTier.STANDARD
        return None

    def price_floor(self, tier: AllowlistTier | None) -> int:
        if tier is AllowlistTier.PRIVILEGED:
            return self.sale.privileged_price
        if tier is AllowlistTier.STANDARD:
            return self.sale.standard_price
        return self.sale.public_price

    def admit(
        self,
        now_ms: int,
        deposit: int,
        *,
        privileged: bool,
        standard: bool,
    ) -> Admission:
        """Evaluate a mint attempt.

        Raises:
            SaleNotStarted: Before presale_start.
            NotEligible: During presale for a caller on neither allowlist.
            InsufficientFunds: Deposit below the caller's price floor.
        """
        phase = self.phase_at(now_ms)
        if phase is SalePhase.NOT_STARTED:
            raise SaleNotStarted()

        tier = self.tier_for(privileged, standard)
        if phase is SalePhase.PRESALE and tier is None:
            raise NotEligible()

        floor = self.price_floor(tier)
        if deposit < floor:
            raise InsufficientFunds(
                f"Insufficient deposit: attached {deposit}, required {floor}"
            )
        return Admission(phase=phase, tier=tier, floor=floor)
