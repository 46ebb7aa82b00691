"""
CertLedger -- Ledger

The certificate store, its error taxonomy, table DDL, and the list message
form served to verifying clients.
"""

from certledger.systems.ledger.errors import (
    ConnectivityError,
    ConstraintViolationError,
    ContextCanceledError,
    DecodeError,
    LedgerError,
    QueryError,
)
from certledger.systems.ledger.messages import (
    CertificateListItemMessage,
    CertificateListItemMessageMetadata,
    CertificateListMessage,
    to_list_item,
    to_list_message,
)
from certledger.systems.ledger.schema import (
    CERTIFICATE_LEDGER_DDL,
    DEFAULT_TABLE,
    ensure_schema,
)
from certledger.systems.ledger.store import RECENT_WINDOW, CertificateStore, decode_row

__all__ = [
    "CERTIFICATE_LEDGER_DDL",
    "DEFAULT_TABLE",
    "RECENT_WINDOW",
    "CertificateListItemMessage",
    "CertificateListItemMessageMetadata",
    "CertificateListMessage",
    "CertificateStore",
    "ConnectivityError",
    "ConstraintViolationError",
    "ContextCanceledError",
    "DecodeError",
    "LedgerError",
    "QueryError",
    "decode_row",
    "ensure_schema",
    "to_list_item",
    "to_list_message",
]
