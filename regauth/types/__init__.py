"""
Types package for regauth.
"""

from regauth.types.registry import (
    DEFAULT_REGISTRY,
    PULL,
    PUSH,
    Registry,
    registry_scope,
    repository_scope,
)

__all__ = [
    "DEFAULT_REGISTRY",
    "PULL",
    "PUSH",
    "Registry",
    "registry_scope",
    "repository_scope",
]
