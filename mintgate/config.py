"""Configuration management for Mintgate.

Config sections:
- sale: phase thresholds (ms), per-tier prices (yocto units), supply cap
- royalty: fixed beneficiary and share in basis points
- token: how per-token metadata is derived
- defaults: storage location

Config resolution order (highest priority first):
1. Programmatic (MintgateConfig constructed in code, configure())
2. Environment variables (MINTGATE_PRESALE_START, MINTGATE_DB_PATH, etc.)
3. Config file (~/.config/mintgate/config.json, managed by `mintgate config`)
4. Hardcoded defaults

A .env file in the working directory is loaded before env vars are read.
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv


logger = logging.getLogger(__name__)


# =============================================================================
# Config file location
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "mintgate"
CONFIG_FILE = CONFIG_DIR / "config.json"

# 1 whole coin in yocto units
ONE_COIN = 10**24


# =============================================================================
# Config dataclasses
# =============================================================================


@dataclass
class SaleConfig:
    """Sale timeline and pricing.

    Thresholds are Unix epoch milliseconds:
    - before presale_start: nobody can mint
    - presale_start <= t < public_start: allowlisted accounts only
    - t >= public_start: anyone
    """

    presale_start: int = 0
    public_start: int = 1656788400000
    privileged_price: int = 7 * ONE_COIN
    standard_price: int = 8 * ONE_COIN
    public_price: int = 8 * ONE_COIN
    cap: int = 666


@dataclass
class RoyaltyConfig:
    """Perpetual royalty attached to every minted token."""

    account: str = "treasury.near"
    basis_points: int = 700


@dataclass
class TokenConfig:
    """Per-token metadata derivation.

    class_tiers maps a trait label to the highest identifier carrying it,
    e.g. {"Legendary": 6, "Rare": 66, "Common": 666}.
    media_hash and reference_hash are base64 sha256 digests of the media
    and reference content, copied onto every token when set.
    """

    title_prefix: str = "Mintgate"
    description: str = ""
    media_base_url: str = ""
    media_extension: str = ".png"
    media_hash: str = ""
    reference_base_url: str = ""
    reference_hash: str = ""
    class_tiers: dict[str, int] = field(default_factory=dict)


@dataclass
class DefaultsConfig:
    """Non-sale default settings."""

    db_path: str = "./storage/mintgate.db"


# =============================================================================
# Main config class
# =============================================================================


@dataclass
class MintgateConfig:
    """Top-level mintgate configuration.

    Construct programmatically for package use, or load from config file for CLI use.

    Examples:
        # Package use, no files needed
        config = MintgateConfig(
            sale=SaleConfig(presale_start=1_700_000_000_000, public_start=1_700_010_800_000),
        )

        # CLI use, loads from ~/.config/mintgate/config.json
        config = MintgateConfig.load()
    """

    sale: SaleConfig = field(default_factory=SaleConfig)
    royalty: RoyaltyConfig = field(default_factory=RoyaltyConfig)
    token: TokenConfig = field(default_factory=TokenConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def load(cls) -> "MintgateConfig":
        """Load config from file + env vars.

        Priority: env var values > config.json values > defaults.
        """
        config = cls()

        # Layer 1: Load from config file if it exists
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    data = json.load(f)
                _apply_dict(config, data)
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Failed to load config from %s: %s", CONFIG_FILE, exc)

        # Layer 2: Env var overrides
        _ensure_dotenv()
        for env_name, (section, key) in _INT_ENV_VARS.items():
            if val := os.environ.get(env_name):
                try:
                    setattr(getattr(config, section), key, int(val))
                except ValueError:
                    logger.warning("Invalid %s=%r, ignoring", env_name, val)
        if val := os.environ.get("MINTGATE_ROYALTY_ACCOUNT"):
            config.royalty.account = val
        if val := os.environ.get("MINTGATE_DB_PATH"):
            config.defaults.db_path = val

        return config

    def save(self) -> None:
        """Save config to ~/.config/mintgate/config.json."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        data: dict[str, Any] = {
            "sale": asdict(self.sale),
            "royalty": asdict(self.royalty),
        }
        if self.token != TokenConfig():
            data["token"] = asdict(self.token)
        if self.defaults != DefaultsConfig():
            data["defaults"] = asdict(self.defaults)
        with open(CONFIG_FILE, "w") as f:
            json.dump(data, f, indent=2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for display."""
        return {
            "sale": asdict(self.sale),
            "royalty": asdict(self.royalty),
            "token": asdict(self.token),
            "defaults": asdict(self.defaults),
        }

    @property
    def db_path_resolved(self) -> Path:
        """Resolve database path."""
        path = Path(self.defaults.db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path


# Integer settings that can be overridden from the environment
_INT_ENV_VARS: dict[str, tuple[str, str]] = {
    "MINTGATE_PRESALE_START": ("sale", "presale_start"),
    "MINTGATE_PUBLIC_START": ("sale", "public_start"),
    "MINTGATE_PRIVILEGED_PRICE": ("sale", "privileged_price"),
    "MINTGATE_STANDARD_PRICE": ("sale", "standard_price"),
    "MINTGATE_PUBLIC_PRICE": ("sale", "public_price"),
    "MINTGATE_CAP": ("sale", "cap"),
    "MINTGATE_ROYALTY_BPS": ("royalty", "basis_points"),
}

INT_FIELDS = {
    "sale.presale_start",
    "sale.public_start",
    "sale.privileged_price",
    "sale.standard_price",
    "sale.public_price",
    "sale.cap",
    "royalty.basis_points",
}


# =============================================================================
# Config dict application
# =============================================================================


def _apply_dict(config: MintgateConfig, data: dict) -> None:
    """Apply a dict of values onto a MintgateConfig."""
    for section in ("sale", "royalty", "token", "defaults"):
        values = data.get(section)
        if not isinstance(values, dict):
            continue
        target = getattr(config, section)
        for k, v in values.items():
            if not hasattr(target, k):
                continue
            if f"{section}.{k}" in INT_FIELDS:
                v = int(v)
            setattr(target, k, v)


_dotenv_loaded = False


def _ensure_dotenv() -> None:
    """Load .env file into os.environ if not already loaded."""
    global _dotenv_loaded
    if not _dotenv_loaded:
        _dotenv_loaded = True
        dotenv_path = find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path=dotenv_path, override=False)


# =============================================================================
# Global config singleton
# =============================================================================

_config: MintgateConfig | None = None


def get_config() -> MintgateConfig:
    """Get the global MintgateConfig instance.

    First call loads from file + env vars. Subsequent calls return cached instance.
    Use configure() to replace the global config programmatically.
    """
    global _config
    if _config is None:
        _config = MintgateConfig.load()
    return _config


def configure(config: MintgateConfig) -> None:
    """Set the global MintgateConfig programmatically.

    Use this when mintgate is used as a package:
        from mintgate.config import configure, MintgateConfig, SaleConfig
        configure(MintgateConfig(sale=SaleConfig(public_start=0)))
    """
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global config (forces reload on next get_config())."""
    global _config
    _config = None
