"""
Registry and scope types for regauth.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_REGISTRY = "index.docker.io"

PULL = "pull"
PUSH = "push"
CATALOG = "*"

_LOCAL_HOST = re.compile(r"^(localhost|127\.\d+\.\d+\.\d+|\[::1\])(:\d*)?$")


class Registry(BaseModel):
    """
    The registry host that bearer tokens are issued for.
    
    ``name`` is ``host`` or ``host:port`` exactly as users type it,
    e.g. ``gcr.io`` or ``localhost:5000``.
    """
    model_config = ConfigDict(frozen=True)
    
    name: str = Field(
        default=DEFAULT_REGISTRY,
        description="Registry host, optionally with a port"
    )
    
    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value:
            raise ValueError("registry name must not be empty")
        if "://" in value:
            raise ValueError(f"registry name must not include a scheme: {value!r}")
        if "/" in value or any(ch.isspace() for ch in value):
            raise ValueError(f"invalid registry name: {value!r}")
        return value
    
    @classmethod
    def parse(cls, name: Optional[str]) -> "Registry":
        """Parse a registry name, defaulting to Docker Hub."""
        if not name or name == "docker.io":
            return cls()
        return cls(name=name)
    
    def registry_str(self) -> str:
        """Return the registry name as a host[:port] string."""
        return self.name
    
    def is_local(self) -> bool:
        """True for loopback registries, which are pinged over http too."""
        return bool(_LOCAL_HOST.match(self.name))
    
    def __str__(self) -> str:
        return self.name


def repository_scope(repository: str, *actions: str) -> str:
    """
    Build a repository scope string.
    
    >>> repository_scope("library/ubuntu", PULL, PUSH)
    'repository:library/ubuntu:pull,push'
    """
    if not actions:
        actions = (PULL,)
    return f"repository:{repository}:{','.join(actions)}"


def registry_scope() -> str:
    """Scope needed to list a registry's catalog."""
    return f"registry:catalog:{CATALOG}"
