"""Shared fixtures for sale tests."""

import pytest

from mintgate.config import MintgateConfig, RoyaltyConfig, SaleConfig, TokenConfig
from mintgate.sale import FrozenClock, MemoryEventSink, SaleContract
from mintgate.storage import SaleStore

ONE = 10**24

PRESALE_START = 1_700_000_000_000
PUBLIC_START = PRESALE_START + 3 * 60 * 60 * 1000

PRIVILEGED_PRICE = 7 * ONE
STANDARD_PRICE = 8 * ONE
PUBLIC_PRICE = 9 * ONE

OWNER = "owner.near"
ROYALTY_ACCOUNT = "royalties.near"


class SequenceEntropy:
    """Deterministic stand-in for the clock-derived draw index.

    Hands out scripted indexes (reduced modulo the bound), then 0 forever.
    """

    def __init__(self, indexes=()):
        self.indexes = list(indexes)
        self.bounds: list[int] = []

    def next_index(self, bound: int) -> int:
        self.bounds.append(bound)
        if self.indexes:
            return self.indexes.pop(0) % bound
        return 0


def make_config(cap: int = 666) -> MintgateConfig:
    return MintgateConfig(
        sale=SaleConfig(
            presale_start=PRESALE_START,
            public_start=PUBLIC_START,
            privileged_price=PRIVILEGED_PRICE,
            standard_price=STANDARD_PRICE,
            public_price=PUBLIC_PRICE,
            cap=cap,
        ),
        royalty=RoyaltyConfig(account=ROYALTY_ACCOUNT, basis_points=700),
        token=TokenConfig(
            title_prefix="Test",
            media_base_url="https://media.example/items/",
            reference_base_url="https://meta.example/items",
            class_tiers={"Common": 666, "Rare": 10},
        ),
    )


@pytest.fixture
def sale_config():
    return make_config()


@pytest.fixture
def store():
    s = SaleStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def clock():
    """Clock parked one second before presale opens."""
    return FrozenClock.at_ms(PRESALE_START - 1000)


@pytest.fixture
def entropy():
    return SequenceEntropy()


@pytest.fixture
def sink():
    return MemoryEventSink()


@pytest.fixture
def contract(store, sale_config, clock, entropy, sink):
    c = SaleContract(
        store, config=sale_config, clock=clock, entropy=entropy, sink=sink
    )
    c.initialize(OWNER)
    return c
