"""
zk-form Shared Library
======================

Common utilities, configurations, and abstractions shared across zk-form services.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - models: Shared Pydantic models
    - spaces: Application registry (spaces and apps)
    - store: Spreadsheet record stores (mock/Google Sheets)
    - zk: Proof verification service client

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "zk-form Team"

from shared.config import settings
from shared.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
