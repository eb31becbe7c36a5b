"""
Spaces Module
=============

Application registry: spaces and the apps configured inside them.

Usage:
    from shared.spaces import get_space_registry

    space = get_space_registry().get_space("sismo")
    app = space.find_app("newsletter")
"""

from shared.spaces.models import (
    App,
    AuthRequest,
    AuthType,
    ClaimRequest,
    ClaimType,
    FormField,
    Space,
    ZkFormApp,
    auth_type_column,
)
from shared.spaces.registry import (
    SpaceNotFoundError,
    SpaceRegistry,
    get_space_registry,
)

__all__ = [
    # Models
    "App",
    "AuthRequest",
    "AuthType",
    "ClaimRequest",
    "ClaimType",
    "FormField",
    "Space",
    "ZkFormApp",
    "auth_type_column",
    # Registry
    "SpaceNotFoundError",
    "SpaceRegistry",
    "get_space_registry",
]
