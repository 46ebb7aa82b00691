"""Tests for driver-exception translation into the ledger taxonomy."""

from __future__ import annotations

import asyncio

import pytest
from asyncpg import exceptions as pg_exc

from certledger.systems.ledger.errors import (
    ConnectivityError,
    ConstraintViolationError,
    ContextCanceledError,
    LedgerError,
    QueryError,
    translate,
)


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (pg_exc.UniqueViolationError("duplicate key"), ConstraintViolationError),
        (asyncio.TimeoutError(), ContextCanceledError),
        (pg_exc.QueryCanceledError("canceling statement"), ContextCanceledError),
        (pg_exc.ConnectionDoesNotExistError("connection was closed"), ConnectivityError),
        (pg_exc.ConnectionFailureError("server closed the connection"), ConnectivityError),
        (ConnectionRefusedError("refused"), ConnectivityError),
        (pg_exc.DataError("invalid input for query argument $2"), QueryError),
        (
            pg_exc.InterfaceError("cannot perform operation: another operation is in progress"),
            QueryError,
        ),
        (
            pg_exc.InterfaceError("cannot use Connection.transaction() in a manually started transaction"),
            QueryError,
        ),
        (pg_exc.SyntaxOrAccessError("syntax error"), QueryError),
        (pg_exc.UndefinedTableError("relation does not exist"), QueryError),
    ],
)
def test_translate(exc, expected):
    error = translate(exc, operation="persist")
    assert type(error) is expected
    assert isinstance(error, LedgerError)


def test_annotates_operation_and_id():
    error = translate(
        pg_exc.UniqueViolationError("duplicate key"),
        operation="persist",
        certificate_id="01HX",
    )
    assert error.operation == "persist"
    assert error.certificate_id == "01HX"
    assert str(error).startswith("[persist id=01HX] ")


def test_message_falls_back_to_exception_name():
    error = translate(asyncio.TimeoutError(), operation="list_recent")
    assert str(error) == "[list_recent] TimeoutError"
