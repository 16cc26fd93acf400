"""
Regauth exception classes for better error handling.
"""

from typing import Any, Dict, Optional


class RegauthError(Exception):
    """Base exception for all regauth errors."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(RegauthError):
    """Raised when there's a configuration problem."""
    pass


class CommunicationError(RegauthError):
    """Base class for errors talking to a registry or token service."""
    pass
