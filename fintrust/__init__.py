"""
FinTrust - Source Package

Institutional money transparency toolkit: ingest financial records,
sign them, verify them later, and show how a budget flows down to
departments and projects.

DESIGN PRINCIPLES:
1. Every ingested record carries a signature
2. Every ingest and verification leaves a trace in the audit log
3. Integrity failures are events, not crashes
4. Malformed budget data is refused loudly
5. The signature is a simulation, not real cryptographic authenticity
"""

__version__ = "1.0.0"
__author__ = "FinTrust Team"
