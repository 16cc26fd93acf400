"""
Utilities package for regauth.
"""

from regauth.utils.config import Config, get_config, set_config, reset_config
from regauth.utils.exceptions import (
    RegauthError,
    ConfigurationError,
    CommunicationError,
)

__all__ = [
    # Config
    "Config",
    "get_config",
    "set_config",
    "reset_config",
    
    # Exceptions
    "RegauthError",
    "ConfigurationError",
    "CommunicationError",
]
