"""SQLite-backed sale state.

``SaleStore`` is the single state aggregate behind a sale: the identifier
pool, allowlists, token records, the owner index and per-account mint
counters all live in one database so a mint commits or rolls back as a unit.
"""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator

from ..core.models import (
    AllowlistTier,
    ContractMetadata,
    SalePhase,
    TokenMetadata,
    TokenRecord,
)

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


class SaleStore:
    """SQLite-backed sale state store.

    Writes made inside ``transaction()`` are committed together on success
    and rolled back together on any exception. Mutating calls are serialized
    with a re-entrant lock, so nested ``transaction()`` blocks join the
    outermost one.
    """

    def __init__(self, path: Path | str = MEMORY_PATH):
        self.path = str(path)
        if self.path != MEMORY_PATH:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(self.path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        self._depth = 0
        self._set_pragmas()
        self.init_schema()

    def _set_pragmas(self) -> None:
        cursor = self.conn.cursor()
        if self.path != MEMORY_PATH:
            cursor.execute("PRAGMA journal_mode = WAL")
            cursor.execute("PRAGMA synchronous = NORMAL")
        cursor.execute("PRAGMA temp_store = MEMORY")
        self.conn.commit()

    def init_schema(self) -> None:
        """Create schema and indexes."""
        cursor = self.conn.cursor()
        cursor.executescript(
            """
            CREATE TABLE IF NOT EXISTS contract_meta (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS pool (
                position INTEGER PRIMARY KEY,
                identifier INTEGER NOT NULL UNIQUE
            );

            CREATE TABLE IF NOT EXISTS tokens (
                token_id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                drawn_id INTEGER NOT NULL,
                sequence INTEGER NOT NULL UNIQUE,
                royalty_json TEXT NOT NULL,
                approvals_json TEXT NOT NULL,
                next_approval_id INTEGER NOT NULL DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS token_metadata (
                token_id TEXT PRIMARY KEY,
                metadata_json TEXT NOT NULL,
                FOREIGN KEY (token_id) REFERENCES tokens(token_id)
            );

            CREATE TABLE IF NOT EXISTS owner_tokens (
                owner_id TEXT NOT NULL,
                token_id TEXT NOT NULL,
                PRIMARY KEY (owner_id, token_id)
            );

            CREATE TABLE IF NOT EXISTS allowlist (
                tier TEXT NOT NULL,
                account_id TEXT NOT NULL,
                PRIMARY KEY (tier, account_id)
            );

            CREATE TABLE IF NOT EXISTS mint_counts (
                account_id TEXT NOT NULL,
                phase TEXT NOT NULL,
                count INTEGER NOT NULL DEFAULT 0,
                PRIMARY KEY (account_id, phase)
            );

            CREATE INDEX IF NOT EXISTS idx_tokens_drawn ON tokens(drawn_id);
            CREATE INDEX IF NOT EXISTS idx_owner_tokens_owner ON owner_tokens(owner_id);
            """
        )
        self.conn.commit()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Context manager for batching writes into a single SQLite transaction.

        Commits on success, rolls back on exception. Only the outermost
        block commits or rolls back.
        """
        with self._lock:
            self._depth += 1
            try:
                yield
            except Exception:
                self._depth -= 1
                if self._depth == 0:
                    self.conn.rollback()
                raise
            else:
                self._depth -= 1
                if self._depth == 0:
                    self.conn.commit()

    # ── Contract metadata ──

    def set_meta(self, key: str, value: Any) -> None:
        self.conn.execute(
            "INSERT OR REPLACE INTO contract_meta (key, value) VALUES (?, ?)",
            (key, json.dumps(value)),
        )

    def get_meta(self, key: str, default: Any = None) -> Any:
        row = self.conn.execute(
            "SELECT value FROM contract_meta WHERE key = ?", (key,)
        ).fetchone()
        return json.loads(row["value"]) if row else default

    def is_initialized(self) -> bool:
        return self.get_meta("owner_id") is not None

    def save_contract_metadata(self, metadata: ContractMetadata) -> None:
        self.set_meta("contract_metadata", metadata.model_dump(mode="json"))

    def get_contract_metadata(self) -> ContractMetadata | None:
        data = self.get_meta("contract_metadata")
        return ContractMetadata.model_validate(data) if data is not None else None

    # ── Identifier pool ──

    def seed_pool(self, identifiers: Iterable[int]) -> None:
        self.conn.executemany(
            "INSERT INTO pool (position, identifier) VALUES (?, ?)",
            ((position, identifier) for position, identifier in enumerate(identifiers)),
        )

    def pool_size(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) AS cnt FROM pool").fetchone()
        return row["cnt"]

    def pool_entry_at(self, index: int) -> tuple[int, int] | None:
        """Return (position, identifier) of the index-th entry in pool order."""
        row = self.conn.execute(
            "SELECT position, identifier FROM pool ORDER BY position LIMIT 1 OFFSET ?",
            (index,),
        ).fetchone()
        return (row["position"], row["identifier"]) if row else None

    def delete_pool_entry(self, position: int) -> None:
        self.conn.execute("DELETE FROM pool WHERE position = ?", (position,))

    def pool_snapshot(self) -> list[int]:
        rows = self.conn.execute(
            "SELECT identifier FROM pool ORDER BY position"
        ).fetchall()
        return [row["identifier"] for row in rows]

    # ── Allowlists ──

    def allowlist_add(self, tier: AllowlistTier, account_id: str) -> bool:
        """Insert a member. Returns False if the account was already listed."""
        cursor = self.conn.execute(
            "INSERT OR IGNORE INTO allowlist (tier, account_id) VALUES (?, ?)",
            (tier.value, account_id),
        )
        return cursor.rowcount > 0

    def allowlist_remove(self, tier: AllowlistTier, account_id: str) -> bool:
        """Delete a member. Returns False if the account was not listed."""
        cursor = self.conn.execute(
            "DELETE FROM allowlist WHERE tier = ? AND account_id = ?",
            (tier.value, account_id),
        )
        return cursor.rowcount > 0

    def allowlist_contains(self, tier: AllowlistTier, account_id: str) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM allowlist WHERE tier = ? AND account_id = ?",
            (tier.value, account_id),
        ).fetchone()
        return row is not None

    def allowlist_members(self, tier: AllowlistTier) -> list[str]:
        rows = self.conn.execute(
            "SELECT account_id FROM allowlist WHERE tier = ? ORDER BY account_id",
            (tier.value,),
        ).fetchall()
        return [row["account_id"] for row in rows]

    # ── Tokens ──

    def insert_token(self, record: TokenRecord) -> None:
        """Insert a token record and its metadata.

        Raises:
            sqlite3.IntegrityError: If the token id is already taken.
        """
        self.conn.execute(
            """
            INSERT INTO tokens
                (token_id, owner_id, drawn_id, sequence, royalty_json,
                 approvals_json, next_approval_id)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.token_id,
                record.owner_id,
                record.drawn_id,
                record.sequence,
                json.dumps(record.royalty),
                json.dumps(record.approved_account_ids),
                record.next_approval_id,
            ),
        )
        self.conn.execute(
            "INSERT INTO token_metadata (token_id, metadata_json) VALUES (?, ?)",
            (record.token_id, record.metadata.model_dump_json()),
        )

    def token_exists(self, token_id: str) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM tokens WHERE token_id = ?", (token_id,)
        ).fetchone()
        return row is not None

    def token_count(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) AS cnt FROM tokens").fetchone()
        return row["cnt"]

    def next_sequence(self) -> int:
        row = self.conn.execute(
            "SELECT COALESCE(MAX(sequence), 0) AS seq FROM tokens"
        ).fetchone()
        return row["seq"] + 1

    def get_token(self, token_id: str) -> TokenRecord | None:
        row = self.conn.execute(
            """
            SELECT t.*, m.metadata_json
            FROM tokens t JOIN token_metadata m ON m.token_id = t.token_id
            WHERE t.token_id = ?
            """,
            (token_id,),
        ).fetchone()
        return _row_to_record(row) if row else None

    def all_tokens(self) -> list[TokenRecord]:
        """All token records in mint order."""
        rows = self.conn.execute(
            """
            SELECT t.*, m.metadata_json
            FROM tokens t JOIN token_metadata m ON m.token_id = t.token_id
            ORDER BY t.sequence
            """
        ).fetchall()
        return [_row_to_record(row) for row in rows]

    # ── Owner index ──

    def add_owner_token(self, owner_id: str, token_id: str) -> None:
        self.conn.execute(
            "INSERT OR IGNORE INTO owner_tokens (owner_id, token_id) VALUES (?, ?)",
            (owner_id, token_id),
        )

    def tokens_for_owner(self, owner_id: str) -> list[str]:
        rows = self.conn.execute(
            """
            SELECT o.token_id
            FROM owner_tokens o LEFT JOIN tokens t ON t.token_id = o.token_id
            WHERE o.owner_id = ?
            ORDER BY t.sequence
            """,
            (owner_id,),
        ).fetchall()
        return [row["token_id"] for row in rows]

    # ── Mint counters ──

    def increment_mint_count(self, account_id: str, phase: SalePhase) -> int:
        self.conn.execute(
            """
            INSERT INTO mint_counts (account_id, phase, count) VALUES (?, ?, 1)
            ON CONFLICT (account_id, phase) DO UPDATE SET count = count + 1
            """,
            (account_id, phase.value),
        )
        return self.get_mint_count(account_id, phase)

    def get_mint_count(self, account_id: str, phase: SalePhase) -> int:
        row = self.conn.execute(
            "SELECT count FROM mint_counts WHERE account_id = ? AND phase = ?",
            (account_id, phase.value),
        ).fetchone()
        return row["count"] if row else 0

    def close(self) -> None:
        """Close database connection."""
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def _row_to_record(row: sqlite3.Row) -> TokenRecord:
    return TokenRecord(
        token_id=row["token_id"],
        owner_id=row["owner_id"],
        drawn_id=row["drawn_id"],
        sequence=row["sequence"],
        royalty=json.loads(row["royalty_json"]),
        approved_account_ids=json.loads(row["approvals_json"]),
        next_approval_id=row["next_approval_id"],
        metadata=TokenMetadata.model_validate_json(row["metadata_json"]),
    )


def open_sale_store(path: Path | str) -> SaleStore:
    """Open (and create if needed) a sale store at path."""
    logger.debug("Opening sale store at %s", path)
    return SaleStore(path)
