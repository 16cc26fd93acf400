"""
Authenticating httpx transports for container registries.
"""

from regauth.transport.basic import BasicTransport
from regauth.transport.bearer import BearerTransport
from regauth.transport.errors import Diagnostic, TransportError, check_error
from regauth.transport.factory import new_transport
from regauth.transport.hosts import canonical_address
from regauth.transport.ping import Challenge, PingResponse, parse_challenge, ping

__all__ = [
    "BasicTransport",
    "BearerTransport",
    "Challenge",
    "Diagnostic",
    "PingResponse",
    "TransportError",
    "canonical_address",
    "check_error",
    "new_transport",
    "parse_challenge",
    "ping",
]
