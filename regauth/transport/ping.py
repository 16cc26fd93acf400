"""
Registry preflight ping.

``GET /v2/`` tells us which scheme a registry answers on and, through the
``WWW-Authenticate`` header of a 401, how it wants to be authenticated.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import httpx
import structlog

from regauth.transport.errors import check_error
from regauth.types.registry import Registry
from regauth.utils.config import Config, get_config
from regauth.utils.exceptions import CommunicationError

logger = structlog.get_logger(__name__)

ANONYMOUS = "anonymous"
BASIC = "basic"
BEARER = "bearer"

_PARAM = re.compile(r'([\w-]+)\s*=\s*(?:"((?:[^"\\]|\\.)*)"|([^\s,]*))')
_ESCAPE = re.compile(r"\\(.)")


@dataclass(frozen=True)
class Challenge:
    """A parsed WWW-Authenticate challenge."""
    scheme: str
    parameters: Dict[str, str] = field(default_factory=dict)
    
    @property
    def realm(self) -> Optional[str]:
        return self.parameters.get("realm")
    
    @property
    def service(self) -> str:
        return self.parameters.get("service", "")


@dataclass(frozen=True)
class PingResponse:
    """Outcome of probing a registry."""
    scheme: str
    challenge: Challenge


def parse_challenge(header: Optional[str]) -> Challenge:
    """
    Parse a ``WWW-Authenticate`` header value.
    
    Example:
        ``Bearer realm="https://auth.docker.io/token",service="registry.docker.io"``
    
    Args:
        header: Raw header value (may be empty)
        
    Returns:
        Challenge with a lower-cased scheme and parameter names
    """
    header = (header or "").strip()
    if not header:
        return Challenge(scheme=ANONYMOUS)
    
    scheme, _, rest = header.partition(" ")
    parameters = {}
    for match in _PARAM.finditer(rest):
        name, quoted, token = match.groups()
        value = _ESCAPE.sub(r"\1", quoted) if quoted is not None else token
        parameters[name.lower()] = value
    
    return Challenge(scheme=scheme.lower(), parameters=parameters)


def ping(
    registry: Registry,
    inner: httpx.BaseTransport,
    insecure: bool = False,
    config: Optional[Config] = None,
) -> PingResponse:
    """
    Ping ``registry`` over https, then http when allowed.
    
    Plain http is only tried for ``insecure`` or loopback registries.
    
    Raises:
        TransportError: If the registry answers with neither 200 nor 401
        httpx.HTTPError: If no scheme could be reached
    """
    config = config or get_config()
    schemes: List[str] = ["https"]
    if insecure or registry.is_local():
        schemes.append("http")
    
    log = logger.bind(registry=registry.registry_str())
    last_error: Optional[httpx.HTTPError] = None
    
    for scheme in schemes:
        request = httpx.Request(
            "GET",
            f"{scheme}://{registry.registry_str()}/v2/",
            headers={"User-Agent": config.user_agent},
            extensions={"timeout": httpx.Timeout(config.default_timeout).as_dict()},
        )
        try:
            response = inner.handle_request(request)
        except httpx.HTTPError as e:
            log.debug("Ping failed", scheme=scheme, error=str(e))
            last_error = e
            continue
        
        response.request = request
        try:
            if response.status_code == 200:
                return PingResponse(scheme=scheme, challenge=Challenge(scheme=ANONYMOUS))
            if response.status_code == 401:
                challenge = parse_challenge(response.headers.get("WWW-Authenticate"))
                log.debug("Registry challenged", scheme=scheme, challenge=challenge.scheme)
                return PingResponse(scheme=scheme, challenge=challenge)
            check_error(response, 200, 401)
        finally:
            response.close()
    
    if last_error is None:
        raise CommunicationError(f"no scheme to ping for {registry}")
    raise last_error
