"""
CertLedger -- Ledger Table DDL

Idempotent bootstrap of the certificate table for development and tests.
This is a one-shot CREATE IF NOT EXISTS, not a migration framework.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from asyncpg import Connection

logger = structlog.get_logger()

DEFAULT_TABLE = "certificate_ledger"

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")

# COLLATE "C" keeps ORDER BY id byte-wise, so ULIDs sort by creation time
# regardless of the database locale.
_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
    id               TEXT COLLATE "C" PRIMARY KEY,
    block_number     BIGINT NOT NULL CHECK (block_number >= 0),
    block_hash       TEXT NOT NULL,
    merkle_root      BYTEA NOT NULL,
    multi_sig        BYTEA NOT NULL,
    sig_started_at   TIMESTAMPTZ NOT NULL,
    sig_finished_at  TIMESTAMPTZ NOT NULL,
    CHECK (sig_started_at <= sig_finished_at)
)
"""


def validate_table_name(table: str) -> str:
    """Table names are interpolated into SQL, so only plain identifiers pass."""
    if not _IDENTIFIER.match(table):
        raise ValueError(f"Invalid ledger table name: {table!r}")
    return table


def table_ddl(table: str = DEFAULT_TABLE) -> str:
    return _TABLE_SQL.format(table=validate_table_name(table))


CERTIFICATE_LEDGER_DDL = table_ddl()


async def ensure_schema(conn: Connection, table: str = DEFAULT_TABLE) -> None:
    """Create the ledger table on the given connection if it is missing."""
    await conn.execute(table_ddl(table))
    logger.info("ledger_schema_initialised", table=table)
