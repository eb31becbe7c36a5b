"""
zk-form Services
================

Services:
- zk_form: Proof-verified form submissions recorded to spreadsheets
"""

__all__ = [
    "zk_form",
]
