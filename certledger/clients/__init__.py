"""
CertLedger -- External Service Clients

Connection management for PostgreSQL.
"""

from certledger.clients.postgres import PostgresClient

__all__ = ["PostgresClient"]
