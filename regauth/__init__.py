"""
regauth - bearer token authentication for container registry clients

regauth provides httpx transports that exchange long-lived registry
credentials for short-lived bearer tokens, following the Docker registry
token and OAuth2 protocols.
"""

__version__ = "0.1.0"
__description__ = "Bearer token authentication for container registry clients"

# Core imports for easy access
from regauth.auth.interfaces import (
    Anonymous,
    AuthConfig,
    Authenticator,
    Basic,
    Bearer,
    CredentialType,
    FromConfig,
)
from regauth.transport.basic import BasicTransport
from regauth.transport.bearer import BearerTransport
from regauth.transport.factory import new_transport
from regauth.types.registry import Registry
from regauth.utils.config import Config
from regauth.utils.exceptions import RegauthError

__all__ = [
    # Transports
    "BasicTransport",
    "BearerTransport",
    "new_transport",
    
    # Credentials
    "Anonymous",
    "AuthConfig",
    "Authenticator",
    "Basic",
    "Bearer",
    "CredentialType",
    "FromConfig",
    
    # Types
    "Registry",
    
    # Utils
    "Config",
    "RegauthError",
    
    # Version info
    "__version__",
]
