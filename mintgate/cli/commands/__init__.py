"""CLI commands for Mintgate."""

from . import (
    init_cmd,
    mint,
    allowlist,
    status,
    config_cmd,
)

__all__ = [
    "init_cmd",
    "mint",
    "allowlist",
    "status",
    "config_cmd",
]
