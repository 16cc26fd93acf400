"""
Host and port canonicalization.

Registry hosts show up as ``hostname``, ``hostname:port``, ``ipv4``,
``ipv4:port``, ``ipv6`` or ``[ipv6]:port``. Comparing them requires a
single ``host:port`` form with the scheme's default port filled in.
"""

from typing import Optional, Tuple

from regauth.utils.exceptions import ConfigurationError

DEFAULT_PORTS = {
    "http": "80",
    "https": "443",
}


def default_port(scheme: str) -> str:
    """Return the default port for ``scheme``."""
    try:
        return DEFAULT_PORTS[scheme]
    except KeyError:
        raise ConfigurationError(
            f"Unsupported scheme: {scheme!r}",
            {"supported": sorted(DEFAULT_PORTS)}
        )


def split_host_port(host: str) -> Tuple[str, Optional[str]]:
    """
    Split ``host`` into hostname and port.
    
    The forms are tried in order: bracketed IPv6 with a port, bracketed
    IPv6 without one, bare IPv6, host with a port, bare host. The port is
    ``None`` when absent and ``""`` when explicitly empty (``host:``).
    
    Raises:
        ValueError: If a bracketed address is malformed
    """
    if host.startswith("["):
        end = host.find("]")
        if end == -1:
            raise ValueError(f"missing ']' in address: {host!r}")
        hostname, rest = host[1:end], host[end + 1:]
        if not rest:
            return hostname, None
        if rest.startswith(":") and ":" not in rest[1:]:
            return hostname, rest[1:]
        raise ValueError(f"unexpected characters after ']' in address: {host!r}")
    
    if host.count(":") >= 2:
        return host, None
    
    if ":" in host:
        hostname, port = host.split(":", 1)
        return hostname, port
    
    return host, None


def join_host_port(hostname: str, port: str) -> str:
    """Join hostname and port, bracketing IPv6 literals."""
    if ":" in hostname:
        return f"[{hostname}]:{port}"
    return f"{hostname}:{port}"


def canonical_address(host: str, scheme: str) -> str:
    """
    Return ``host`` as lower-cased ``hostname:port``, filling in the default port.
    
    Unparseable addresses are returned unchanged so they never compare
    equal to a well-formed one.
    """
    port_for_scheme = default_port(scheme)
    try:
        hostname, port = split_host_port(host)
    except ValueError:
        return host
    return join_host_port(hostname.lower(), port or port_for_scheme)
