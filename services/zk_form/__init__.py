"""
zk-form Service
===============

Verifies zero-knowledge proofs submitted with form entries and appends the
verified attributes to the app's spreadsheet.

This service provides:
- Proof verification through the external verification service
- Vault id deduplication
- Spreadsheet row assembly from auth, claim and form fields

Version: 0.1.0
"""

__version__ = "0.1.0"
