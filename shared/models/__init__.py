"""
Shared Models
=============

Pydantic models shared across zk-form services.

Models:
- Common response models (ErrorResponse, HealthResponse)
- Submission models (SubmissionField, SubmissionRequest, SubmissionResponse)
"""

from shared.models.common import (
    ErrorResponse,
    HealthResponse,
)
from shared.models.submission import (
    SubmissionField,
    SubmissionRequest,
    SubmissionResponse,
    SubmissionStatus,
)

__all__ = [
    # Common
    "ErrorResponse",
    "HealthResponse",
    # Submission
    "SubmissionField",
    "SubmissionRequest",
    "SubmissionResponse",
    "SubmissionStatus",
]
