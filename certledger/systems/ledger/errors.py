"""
CertLedger -- Ledger Error Hierarchy

All exceptions raised by the certificate store.

Namespace: certledger.systems.ledger.errors

The store never swallows or retries a failure. Each driver exception is
translated exactly once, here, and re-raised with the original chained as
__cause__. Commit and rollback stay with the caller's transaction boundary.

  ConnectivityError         transport or connection lost
  ConstraintViolationError  duplicate certificate id on insert
  QueryError                malformed statement, engine-side failure, or a
                            connection misused by the caller
  DecodeError               stored row could not become a CertificateRecord
  ContextCanceledError      caller's deadline expired or statement cancelled

asyncio.CancelledError is never translated: task cancellation propagates
untouched so the caller's cancel scope still sees it.
"""

from __future__ import annotations

import asyncio

from asyncpg import exceptions as pg_exc


class LedgerError(RuntimeError):
    """Base for all certificate store errors."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        certificate_id: str | None = None,
    ) -> None:
        self.operation = operation
        self.certificate_id = certificate_id
        context = f"{operation}"
        if certificate_id is not None:
            context += f" id={certificate_id}"
        super().__init__(f"[{context}] {message}")


class ConnectivityError(LedgerError):
    """The connection to the database failed or was lost mid-statement."""


class ConstraintViolationError(LedgerError):
    """
    A certificate with the same id already exists.

    The insert is a single statement, so no partial write occurred.
    """


class QueryError(LedgerError):
    """The statement failed inside the engine."""


class DecodeError(LedgerError):
    """A stored row could not be decoded into a CertificateRecord."""


class ContextCanceledError(LedgerError):
    """The caller's deadline expired before the statement completed."""


# Exceptions a statement call may raise that we translate. Anything else is
# a programming error and propagates as-is.
DRIVER_ERRORS: tuple[type[BaseException], ...] = (
    pg_exc.PostgresError,
    pg_exc.InterfaceError,
    asyncio.TimeoutError,
    OSError,
)


def translate(
    exc: BaseException,
    *,
    operation: str,
    certificate_id: str | None = None,
) -> LedgerError:
    """Map a driver exception onto the ledger taxonomy."""
    error_cls: type[LedgerError]
    if isinstance(exc, pg_exc.UniqueViolationError):
        error_cls = ConstraintViolationError
    # TimeoutError is an OSError subclass on 3.11+, so check it first.
    elif isinstance(exc, (asyncio.TimeoutError, pg_exc.QueryCanceledError)):
        error_cls = ContextCanceledError
    # Only transport failures count as connectivity. Other InterfaceErrors
    # (busy connection, finished transaction, bad parameter encoding) are
    # caller misuse and fall through to QueryError.
    elif isinstance(
        exc,
        (pg_exc.PostgresConnectionError, pg_exc.ConnectionDoesNotExistError, OSError),
    ):
        error_cls = ConnectivityError
    else:
        error_cls = QueryError

    detail = str(exc) or type(exc).__name__
    return error_cls(detail, operation=operation, certificate_id=certificate_id)
