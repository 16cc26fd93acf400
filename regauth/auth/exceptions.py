"""
Authentication exceptions.
"""

from regauth.utils.exceptions import RegauthError


class AuthenticationError(RegauthError):
    """Raised when authentication fails."""
    pass


class InvalidRealmError(AuthenticationError):
    """Raised when a token service realm is not an absolute http(s) URL."""
    pass


class TokenResponseError(AuthenticationError):
    """Raised when a token service response carries no usable token."""
    pass


class UnsupportedChallengeError(AuthenticationError):
    """Raised when a registry challenges with an unknown auth scheme."""
    pass
