"""Tests for the ledger table bootstrap."""

from __future__ import annotations

import pytest
from fakes import FakeConnection

from certledger.systems.ledger.schema import (
    CERTIFICATE_LEDGER_DDL,
    ensure_schema,
    table_ddl,
    validate_table_name,
)


def test_default_ddl_declares_all_columns():
    for column in (
        'id               TEXT COLLATE "C" PRIMARY KEY',
        "block_number     BIGINT NOT NULL",
        "merkle_root      BYTEA NOT NULL",
        "multi_sig        BYTEA NOT NULL",
        "sig_finished_at  TIMESTAMPTZ NOT NULL",
    ):
        assert column in CERTIFICATE_LEDGER_DDL
    assert "CREATE TABLE IF NOT EXISTS certificate_ledger" in CERTIFICATE_LEDGER_DDL


def test_custom_table_name():
    assert "CREATE TABLE IF NOT EXISTS certs_staging (" in table_ddl("certs_staging")


@pytest.mark.parametrize("name", ["", "Certs", "1certs", "certs-ledger", "certs;drop"])
def test_invalid_table_names(name):
    with pytest.raises(ValueError):
        validate_table_name(name)


@pytest.mark.asyncio
async def test_ensure_schema_executes_ddl():
    conn = FakeConnection()
    await ensure_schema(conn, table="certs_staging")

    query, args = conn.statements[0]
    assert query == table_ddl("certs_staging")
    assert args == ()
