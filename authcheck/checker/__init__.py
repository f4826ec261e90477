"""
Checker package for the email authentication checker.

Provides DNS validation modules for SPF, DMARC, DKIM, MX, BIMI and
MTA-STS records, the DKIM provider registry, and the orchestrating engine.
"""
