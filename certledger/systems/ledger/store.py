"""
CertLedger -- Certificate Store

Append-only persistence for finalised certificates.

Every operation takes the caller's transaction explicitly. The store holds
no connection, pool, or lock of its own, and never commits or rolls back:
begin/commit/rollback belong to whoever opened the transaction.

Recency is "largest id". That is only correct while the Aggregator mints ids
that are monotonic with creation order (see primitives.common.new_id).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

import structlog
from pydantic import ValidationError

from certledger.primitives.certificate import FIELD_ORDER, CertificateRecord
from certledger.systems.ledger.errors import DRIVER_ERRORS, DecodeError, translate
from certledger.systems.ledger.schema import DEFAULT_TABLE, validate_table_name

if TYPE_CHECKING:
    from asyncpg import Connection

    from certledger.config import LedgerConfig

logger = structlog.get_logger()

# Size of the window returned by list_recent.
RECENT_WINDOW = 20

_COLUMNS = ", ".join(FIELD_ORDER)
_PLACEHOLDERS = ", ".join(f"${i}" for i in range(1, len(FIELD_ORDER) + 1))


def decode_row(row: Sequence[Any], *, operation: str) -> CertificateRecord:
    """
    Decode one result row into a CertificateRecord.

    The row must carry exactly the seven FIELD_ORDER columns, positionally.
    Anything else (wrong arity, wrong types, a broken signing window) is a
    DecodeError.
    """
    values = tuple(row)
    raw_id = values[0] if values and isinstance(values[0], str) else None
    if len(values) != len(FIELD_ORDER):
        raise DecodeError(
            f"expected {len(FIELD_ORDER)} columns, got {len(values)}",
            operation=operation,
            certificate_id=raw_id,
        )
    try:
        return CertificateRecord.from_row(values)
    except (ValidationError, TypeError, ValueError) as exc:
        raise DecodeError(str(exc), operation=operation, certificate_id=raw_id) from exc


class CertificateStore:
    """
    Persist and list certificates over a caller-supplied transaction.

    `timeout` is the default deadline, in seconds, for every statement.
    A per-call `timeout` overrides it; None means unbounded.
    """

    def __init__(self, table: str = DEFAULT_TABLE, timeout: float | None = None) -> None:
        self._table = validate_table_name(table)
        self._timeout = timeout
        self._insert_sql = (
            f"INSERT INTO {self._table} ({_COLUMNS}) VALUES ({_PLACEHOLDERS})"
        )
        self._recent_sql = (
            f"SELECT {_COLUMNS} FROM {self._table} "
            f"ORDER BY id DESC LIMIT {RECENT_WINDOW}"
        )
        self._get_sql = f"SELECT {_COLUMNS} FROM {self._table} WHERE id = $1"
        self._logger = logger.bind(component="certificate_store", table=self._table)

    @classmethod
    def from_config(cls, config: LedgerConfig) -> CertificateStore:
        return cls(table=config.table, timeout=config.timeout_s)

    @property
    def table(self) -> str:
        return self._table

    def _deadline(self, timeout: float | None) -> float | None:
        return timeout if timeout is not None else self._timeout

    # ─── Write ────────────────────────────────────────────────────

    async def persist(
        self,
        tx: Connection,
        record: CertificateRecord,
        *,
        timeout: float | None = None,
    ) -> None:
        """
        Insert one certificate. Does not commit.

        Raises ConstraintViolationError if the id already exists. The insert
        is a single statement, so a failure leaves no row behind.
        """
        try:
            await tx.execute(self._insert_sql, *record.as_row(), timeout=self._deadline(timeout))
        except DRIVER_ERRORS as exc:
            error = translate(exc, operation="persist", certificate_id=record.id)
            self._logger.warning(
                "certificate_persist_failed",
                certificate_id=record.id,
                error_type=type(error).__name__,
                error=str(exc),
            )
            raise error from exc

        self._logger.info(
            "certificate_persisted",
            certificate_id=record.id,
            block_number=record.block_number,
        )

    # ─── Read ─────────────────────────────────────────────────────

    async def list_recent(
        self,
        tx: Connection,
        *,
        timeout: float | None = None,
    ) -> list[CertificateRecord]:
        """
        Return the newest RECENT_WINDOW certificates, ordered by id descending.

        An empty ledger yields an empty list. The read is all-or-nothing:
        if any row fails to decode, nothing is returned.
        """
        rows = await self._fetch("list_recent", tx, self._recent_sql, timeout=timeout)
        try:
            records = [decode_row(row, operation="list_recent") for row in rows]
        except DecodeError as exc:
            self._logger.error(
                "certificate_decode_failed",
                operation="list_recent",
                certificate_id=exc.certificate_id,
                error=str(exc),
            )
            raise

        self._logger.debug("certificate_window_read", count=len(records))
        return records

    async def get(
        self,
        tx: Connection,
        certificate_id: str,
        *,
        timeout: float | None = None,
    ) -> CertificateRecord | None:
        """Look up one certificate by id. None if it was never persisted."""
        rows = await self._fetch(
            "get", tx, self._get_sql, certificate_id,
            timeout=timeout, certificate_id=certificate_id,
        )
        if not rows:
            return None
        try:
            return decode_row(rows[0], operation="get")
        except DecodeError as exc:
            self._logger.error(
                "certificate_decode_failed",
                operation="get",
                certificate_id=certificate_id,
                error=str(exc),
            )
            raise

    async def _fetch(
        self,
        operation: str,
        tx: Connection,
        sql: str,
        *args: Any,
        timeout: float | None,
        certificate_id: str | None = None,
    ) -> list[Any]:
        # A single fetch reads the bounded result in one round trip; the
        # driver closes the portal on every exit path, cancellation included.
        try:
            return await tx.fetch(sql, *args, timeout=self._deadline(timeout))
        except DRIVER_ERRORS as exc:
            error = translate(exc, operation=operation, certificate_id=certificate_id)
            self._logger.warning(
                "certificate_query_failed",
                operation=operation,
                certificate_id=certificate_id,
                error_type=type(error).__name__,
                error=str(exc),
            )
            raise error from exc
