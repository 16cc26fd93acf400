"""
Transport that attaches HTTP Basic credentials for a single target host.
"""

from typing import Optional

import httpx
import structlog

from regauth.auth.interfaces import AuthConfig, Authenticator
from regauth.transport.hosts import canonical_address
from regauth.utils.config import Config, get_config

logger = structlog.get_logger(__name__)


def authorization_header(auth: AuthConfig) -> Optional[str]:
    """Return the Authorization header value for ``auth``, if it has one."""
    if auth.auth:
        return f"Basic {auth.auth}"
    if auth.registry_token:
        return f"Bearer {auth.registry_token}"
    basic = auth.basic_credentials()
    if basic:
        return f"Basic {basic}"
    return None


def request_targets(request: httpx.Request, target: str) -> bool:
    """True if the request's Host header or URL netloc canonicalizes to ``target``."""
    scheme = request.url.scheme
    wanted = canonical_address(target, scheme)
    return wanted in (
        canonical_address(request.headers.get("Host", ""), scheme),
        canonical_address(request.url.netloc.decode("ascii"), scheme),
    )


class BasicTransport(httpx.BaseTransport):
    """
    Wrap ``inner`` and authenticate requests sent to ``target``.
    
    Requests to any other host (e.g. a redirect to blob storage) are
    forwarded without credentials. The inner transport is shared and is
    not closed by this wrapper.
    """
    
    def __init__(
        self,
        inner: httpx.BaseTransport,
        auth: Authenticator,
        target: str,
        config: Optional[Config] = None,
    ):
        self.inner = inner
        self.auth = auth
        self.target = target
        self.config = config or get_config()
        self._logger = logger.bind(target=target)
    
    def handle_request(self, request: httpx.Request) -> httpx.Response:
        if request_targets(request, self.target):
            header = authorization_header(self.auth.authorization())
            if header:
                request.headers["Authorization"] = header
        else:
            self._logger.debug("Not sending credentials to foreign host", host=request.url.host)
        
        request.headers["User-Agent"] = self.config.user_agent
        return self.inner.handle_request(request)
