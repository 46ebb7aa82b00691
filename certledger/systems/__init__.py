"""
CertLedger -- Systems
"""
