"""
CertLedger -- Observability Infrastructure

Structured logging.
"""

from certledger.telemetry.logging import setup_logging

__all__ = ["setup_logging"]
