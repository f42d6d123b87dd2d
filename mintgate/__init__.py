"""Mintgate: phased, allowlist-gated minting of a fixed identifier range."""

__version__ = "0.1.0"

from .config import MintgateConfig, configure, get_config
from .sale import SaleContract, SaleError
from .storage import SaleStore

__all__ = [
    "__version__",
    "MintgateConfig",
    "configure",
    "get_config",
    "SaleContract",
    "SaleError",
    "SaleStore",
]
