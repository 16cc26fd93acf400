"""
Credential interfaces for regauth.

An ``Authenticator`` hands out the long-lived credential that is exchanged
for short-lived registry tokens. Implementations may read from a keychain,
a docker config file or the environment; the transports only ever call
``authorization()``.
"""

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CredentialType(Enum):
    """Shape of a long-lived credential."""
    ANONYMOUS = "anonymous"
    PASSWORD = "password"
    IDENTITY_TOKEN = "identity_token"


@dataclass(frozen=True)
class AuthConfig:
    """Authorization materials for a single registry."""
    username: Optional[str] = None
    password: Optional[str] = None
    auth: Optional[str] = None  # base64 "username:password"
    identity_token: Optional[str] = None  # OAuth2 refresh token
    registry_token: Optional[str] = None  # bearer token for the registry
    
    @property
    def credential_type(self) -> CredentialType:
        """Classify the credential, identity tokens taking precedence."""
        if self.identity_token:
            return CredentialType.IDENTITY_TOKEN
        if (self.username and self.password) or self.auth:
            return CredentialType.PASSWORD
        return CredentialType.ANONYMOUS
    
    def basic_credentials(self) -> Optional[str]:
        """Return the base64 ``username:password`` pair, if any."""
        if self.auth:
            return self.auth
        if self.username or self.password:
            raw = f"{self.username or ''}:{self.password or ''}"
            return base64.b64encode(raw.encode("utf-8")).decode("ascii")
        return None
    
    def __repr__(self) -> str:
        return f"AuthConfig(credential_type={self.credential_type.value!r})"


class Authenticator(ABC):
    """
    Abstract source of registry credentials.
    
    ``authorization()`` may raise; callers propagate the error unchanged.
    """
    
    @abstractmethod
    def authorization(self) -> AuthConfig:
        """Return the current authorization materials."""
        pass


class Anonymous(Authenticator):
    """No credentials at all."""
    
    def authorization(self) -> AuthConfig:
        return AuthConfig()


@dataclass(frozen=True, repr=False)
class Basic(Authenticator):
    """Username and password."""
    username: str
    password: str
    
    def authorization(self) -> AuthConfig:
        return AuthConfig(username=self.username, password=self.password)
    
    def __repr__(self) -> str:
        return f"Basic(username={self.username!r})"


@dataclass(frozen=True, repr=False)
class Bearer(Authenticator):
    """A short-lived registry token returned by a token service."""
    token: str
    
    def authorization(self) -> AuthConfig:
        return AuthConfig(registry_token=self.token)
    
    def __repr__(self) -> str:
        return "Bearer(token=<redacted>)"


@dataclass(frozen=True)
class FromConfig(Authenticator):
    """Serve a fixed AuthConfig."""
    config: AuthConfig
    
    def authorization(self) -> AuthConfig:
        return self.config


def from_identity_token(identity_token: str) -> Authenticator:
    """Build the authenticator used after a token service rotates a refresh token."""
    return FromConfig(AuthConfig(identity_token=identity_token))
