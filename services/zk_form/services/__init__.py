"""
zk-form Services
================

Business logic for verifying and recording zk-form submissions.

Services:
- SubmissionService: Verification, deduplication and row assembly

Version: 0.1.0
"""

from services.zk_form.services.submission import (
    SubmissionError,
    SubmissionService,
    build_columns,
    find_claim,
)


__all__ = [
    "SubmissionError",
    "SubmissionService",
    "build_columns",
    "find_claim",
]
