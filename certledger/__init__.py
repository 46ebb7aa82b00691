"""
CertLedger -- Certificate Persistence

Transactional store for finalized threshold-signature certificates.
"""

__version__ = "0.1.0"
