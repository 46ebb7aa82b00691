"""
Test doubles for the certificate store.

FakeTable is an in-memory table with a primary key on id, shared by any
number of FakeConnections. FakeConnection mimics the slice of
asyncpg.Connection the store uses (execute / fetch with a timeout), including
the driver's refusal to run a second statement while one is in progress.
FailingStore raises a configured error from every operation.
"""

from __future__ import annotations

import asyncio
import re
from typing import Any

from asyncpg import exceptions as pg_exc

from certledger.primitives.certificate import CertificateRecord
from certledger.systems.ledger.errors import LedgerError

_LIMIT = re.compile(r"LIMIT (\d+)")


class FakeTable:
    def __init__(self) -> None:
        self.rows: dict[str, tuple[Any, ...]] = {}


class FakeConnection:
    def __init__(self, table: FakeTable | None = None, delay_s: float = 0.0) -> None:
        self.table = table if table is not None else FakeTable()
        self.statements: list[tuple[str, tuple[Any, ...]]] = []
        self.timeouts: list[float | None] = []
        self.delay_s = delay_s
        self.fail_with: BaseException | None = None
        # Statements currently executing; must drop back to 0 on every exit path
        self.in_flight = 0

    @property
    def rows(self) -> dict[str, tuple[Any, ...]]:
        return self.table.rows

    def seed_raw(self, row: tuple[Any, ...]) -> None:
        """Insert a row bypassing validation, e.g. to simulate corruption."""
        self.rows[row[0]] = row

    async def _run(self, work: Any, timeout: float | None) -> Any:
        if self.in_flight:
            work.close()
            raise pg_exc.InterfaceError(
                "cannot perform operation: another operation is in progress"
            )
        self.in_flight += 1
        try:
            if timeout is not None:
                return await asyncio.wait_for(work, timeout)
            return await work
        finally:
            self.in_flight -= 1

    async def _pause(self) -> None:
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.fail_with is not None:
            raise self.fail_with

    async def execute(self, query: str, *args: Any, timeout: float | None = None) -> str:
        self.statements.append((query, args))
        self.timeouts.append(timeout)
        return await self._run(self._execute(query, args), timeout)

    async def _execute(self, query: str, args: tuple[Any, ...]) -> str:
        await self._pause()
        if query.startswith("INSERT INTO"):
            if args[0] in self.rows:
                raise pg_exc.UniqueViolationError(
                    f'duplicate key value violates unique constraint "pkey" ({args[0]})'
                )
            self.rows[args[0]] = tuple(args)
            return "INSERT 0 1"
        return "CREATE TABLE"

    async def fetch(self, query: str, *args: Any, timeout: float | None = None) -> list[Any]:
        self.statements.append((query, args))
        self.timeouts.append(timeout)
        return await self._run(self._fetch(query, args), timeout)

    async def _fetch(self, query: str, args: tuple[Any, ...]) -> list[Any]:
        await self._pause()
        if "WHERE id = $1" in query:
            row = self.rows.get(args[0])
            return [row] if row is not None else []
        ordered = sorted(self.rows.values(), key=lambda r: r[0], reverse=True)
        if "ORDER BY id DESC" not in query:
            raise AssertionError(f"unexpected query: {query}")
        match = _LIMIT.search(query)
        if match:
            ordered = ordered[: int(match.group(1))]
        return ordered


class FailingStore:
    """Store double whose every operation raises the configured error."""

    def __init__(self, error: LedgerError) -> None:
        self.error = error
        self.calls: list[str] = []

    async def persist(self, tx: Any, record: CertificateRecord, *, timeout: float | None = None) -> None:
        self.calls.append("persist")
        raise self.error

    async def list_recent(self, tx: Any, *, timeout: float | None = None) -> list[CertificateRecord]:
        self.calls.append("list_recent")
        raise self.error

    async def get(
        self, tx: Any, certificate_id: str, *, timeout: float | None = None
    ) -> CertificateRecord | None:
        self.calls.append("get")
        raise self.error
