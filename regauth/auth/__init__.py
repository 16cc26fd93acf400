"""
Credentials and authentication errors for regauth.
"""

from .interfaces import (
    Anonymous,
    AuthConfig,
    Authenticator,
    Basic,
    Bearer,
    CredentialType,
    FromConfig,
    from_identity_token,
)
from .exceptions import (
    AuthenticationError,
    InvalidRealmError,
    TokenResponseError,
    UnsupportedChallengeError,
)

__all__ = [
    # Interfaces
    "Authenticator",
    "AuthConfig",
    "CredentialType",
    
    # Implementations
    "Anonymous",
    "Basic",
    "Bearer",
    "FromConfig",
    "from_identity_token",
    
    # Exceptions
    "AuthenticationError",
    "InvalidRealmError",
    "TokenResponseError",
    "UnsupportedChallengeError",
]
