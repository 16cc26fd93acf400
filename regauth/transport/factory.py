"""
Construction of an authenticating transport for a registry.
"""

from typing import Optional, Sequence

import httpx
import structlog

from regauth.auth.exceptions import AuthenticationError, UnsupportedChallengeError
from regauth.auth.interfaces import Authenticator
from regauth.transport.basic import BasicTransport
from regauth.transport.bearer import BearerTransport
from regauth.transport.ping import ANONYMOUS, BASIC, BEARER, ping
from regauth.types.registry import Registry
from regauth.utils.config import Config, get_config

logger = structlog.get_logger(__name__)


def new_transport(
    registry: Registry,
    auth: Authenticator,
    inner: Optional[httpx.BaseTransport] = None,
    scopes: Sequence[str] = (),
    config: Optional[Config] = None,
) -> httpx.BaseTransport:
    """
    Ping ``registry`` and wrap ``inner`` in whatever auth it asks for.
    
    For bearer registries a first token is fetched right away, so
    credential problems surface here rather than on the first request.
    
    Args:
        registry: Registry to talk to
        auth: Long-lived credential for the registry
        inner: Transport performing the HTTP exchange (defaults to httpx.HTTPTransport)
        scopes: Scopes to request tokens for
        config: Configuration object (uses global config if None)
        
    Returns:
        Transport suitable for ``httpx.Client(transport=...)``
    """
    config = config or get_config()
    owns_inner = inner is None
    inner = inner or httpx.HTTPTransport()
    
    try:
        return _authenticating_transport(registry, auth, inner, scopes, config)
    except BaseException:
        # Nothing else holds a transport created here
        if owns_inner:
            inner.close()
        raise


def _authenticating_transport(
    registry: Registry,
    auth: Authenticator,
    inner: httpx.BaseTransport,
    scopes: Sequence[str],
    config: Config,
) -> httpx.BaseTransport:
    pr = ping(registry, inner, insecure=config.insecure, config=config)
    challenge = pr.challenge
    logger.info(
        "Creating transport",
        registry=registry.registry_str(),
        scheme=pr.scheme,
        challenge=challenge.scheme,
    )
    
    if challenge.scheme == ANONYMOUS:
        return inner
    
    if challenge.scheme == BASIC:
        return BasicTransport(inner, auth, target=registry.registry_str(), config=config)
    
    if challenge.scheme == BEARER:
        if not challenge.realm:
            raise AuthenticationError(
                "malformed bearer challenge: missing realm",
                {"parameters": challenge.parameters},
            )
        transport = BearerTransport(
            inner,
            auth,
            registry,
            realm=challenge.realm,
            service=challenge.service,
            scopes=scopes,
            scheme=pr.scheme,
            config=config,
        )
        transport.refresh()
        return transport
    
    raise UnsupportedChallengeError(
        f"unrecognized challenge: {challenge.scheme}",
        {"registry": registry.registry_str()},
    )
