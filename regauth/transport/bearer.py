"""
Bearer token transport for container registries.

A registry that answers ``401`` with ``WWW-Authenticate: Bearer`` expects the
client to fetch a short-lived token from a separate token service (the realm)
and to retry with ``Authorization: Bearer <token>``. ``BearerTransport`` does
that exchange below ``httpx.Client``, so every request made through the client
is authenticated transparently.

Which token flow a registry supports cannot be told from the protocol, so the
transport relies on the shape of the stored credential and falls back to the
other flow when the first one fails.
"""

import json
from typing import Callable, List, Optional, Sequence

import httpx
import structlog

from regauth.auth.exceptions import InvalidRealmError, TokenResponseError
from regauth.auth.interfaces import (
    Authenticator,
    Bearer,
    CredentialType,
    from_identity_token,
)
from regauth.transport.basic import BasicTransport
from regauth.transport.errors import check_error
from regauth.transport.hosts import DEFAULT_PORTS, canonical_address
from regauth.types.registry import Registry
from regauth.utils.config import Config, get_config
from regauth.utils.exceptions import ConfigurationError, RegauthError

logger = structlog.get_logger(__name__)

# Failures of the first token flow that trigger the fallback flow
FALLBACK_ERRORS = (RegauthError, httpx.HTTPError, httpx.InvalidURL)


class BearerTransport(httpx.BaseTransport):
    """
    Transport that exchanges long-lived credentials for registry tokens.

    The transport owns its bearer token and credential: both are replaced
    by ``refresh()``. It does not serialize refreshes, so concurrent
    requests that all receive 401 may each refresh the token.
    """

    def __init__(
        self,
        inner: httpx.BaseTransport,
        basic: Authenticator,
        registry: Registry,
        realm: str,
        service: str = "",
        scopes: Sequence[str] = (),
        scheme: str = "https",
        bearer: Optional[Bearer] = None,
        config: Optional[Config] = None,
    ):
        """
        Initialize the bearer transport.

        Args:
            inner: Transport that performs the actual HTTP exchange
            basic: Long-lived credential exchanged for bearer tokens
            registry: Registry that bearer tokens are sent to
            realm: URL of the token service
            service: Service name announced by the registry challenge
            scopes: Scopes requested for each token
            scheme: Scheme the registry answered on (``http`` or ``https``)
            bearer: Token to start with, if one is already known
            config: Configuration object (uses global config if None)
        """
        if scheme not in DEFAULT_PORTS:
            raise ConfigurationError(f"Unsupported registry scheme: {scheme!r}")

        self.inner = inner
        self.registry = registry
        self.realm = realm
        self.service = service
        self.scopes = tuple(scopes)
        self.scheme = scheme
        self.config = config or get_config()

        self._basic = basic
        self._bearer = bearer
        self._logger = logger.bind(registry=registry.registry_str(), realm=realm)

    @property
    def bearer(self) -> Optional[Bearer]:
        """The bearer token currently attached to registry requests."""
        return self._bearer

    @property
    def basic(self) -> Authenticator:
        """The long-lived credential used for the next refresh."""
        return self._basic

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        response = self._send(request)

        # The token may have expired: refresh once and retry once
        if response.status_code == 401:
            self._logger.info("Registry returned 401, refreshing token", url=str(request.url))
            response.close()
            self.refresh()
            return self._send(request)

        return response

    def close(self) -> None:
        self.inner.close()

    def _send(self, request: httpx.Request) -> httpx.Response:
        # httpx.Client follows redirects above the transport layer, so this
        # check runs again for every hop and the token never leaves the registry.
        # A redirect may also leave the Host header stale, hence the URL check.
        if self._is_registry_request(request):
            if self._bearer is not None:
                auth = self._bearer.authorization()
                request.headers["Authorization"] = f"Bearer {auth.registry_token}"

            # The scheme found by ping only applies to the registry itself,
            # not to a token server or blob storage.
            if request.url.scheme != self.scheme:
                request.url = request.url.copy_with(scheme=self.scheme)

        request.headers["User-Agent"] = self.config.user_agent
        return self.inner.handle_request(request)

    def _is_registry_request(self, request: httpx.Request) -> bool:
        registry_host = canonical_address(self.registry.registry_str(), self.scheme)
        header_host = canonical_address(request.headers.get("Host", ""), self.scheme)
        url_host = canonical_address(request.url.netloc.decode("ascii"), self.scheme)
        return registry_host in (header_host, url_host)

    def refresh(self) -> None:
        """
        Fetch a new bearer token from the realm.

        Raises:
            TokenResponseError: If the token service returned no token
            TransportError: If the token service rejected both flows
        """
        auth = self._basic.authorization()
        first, second = self._flows(auth.credential_type)

        self._logger.debug(
            "Refreshing bearer token",
            credential_type=auth.credential_type.value,
            first_flow=first.__name__,
        )

        try:
            content = first()
        except FALLBACK_ERRORS as e:
            self._logger.debug(
                "Token flow failed, trying fallback",
                flow=first.__name__,
                fallback=second.__name__,
                error=str(e),
            )
            content = second()

        self._apply_token_response(content)
        self._logger.info("Bearer token refreshed")

    def _flows(self, credential_type: CredentialType) -> List[Callable[[], bytes]]:
        # An identity token means the credential was issued for the OAuth2 flow
        if credential_type is CredentialType.IDENTITY_TOKEN:
            return [self._refresh_oauth, self._refresh_basic]
        return [self._refresh_basic, self._refresh_oauth]

    def _apply_token_response(self, content: bytes) -> None:
        try:
            response = json.loads(content)
        except ValueError as e:
            raise TokenResponseError(
                f"invalid bearer response: {e}:\n{content.decode('utf-8', errors='replace')}",
                {"body": content},
            )
        if not isinstance(response, dict):
            response = {}

        # Some registries set access_token instead of token
        token = response.get("access_token") or response.get("token")
        if not token or not isinstance(token, str):
            raise TokenResponseError(
                f"no token in bearer response:\n{content.decode('utf-8', errors='replace')}",
                {"body": content},
            )

        # Future refreshes use the rotated refresh token instead of the password
        refresh_token = response.get("refresh_token")
        if refresh_token and isinstance(refresh_token, str):
            self._logger.debug("Token service issued a refresh token")
            self._basic = from_identity_token(refresh_token)

        self._bearer = Bearer(token=token)

    def _realm_url(self) -> httpx.URL:
        url = httpx.URL(self.realm)
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidRealmError(f"invalid realm: {self.realm!r}", {"realm": self.realm})
        return url

    def _fetch(self, transport: httpx.BaseTransport, request: httpx.Request) -> bytes:
        request.headers["User-Agent"] = self.config.user_agent
        request.extensions["timeout"] = httpx.Timeout(self.config.default_timeout).as_dict()

        response = transport.handle_request(request)
        response.request = request
        try:
            check_error(response, 200)
            return response.read()
        finally:
            response.close()

    def _refresh_oauth(self) -> bytes:
        """https://docs.docker.com/registry/spec/auth/oauth/"""
        auth = self._basic.authorization()
        url = self._realm_url().copy_with(query=None)

        form = {
            "scope": " ".join(self.scopes),
            "service": self.service,
            "client_id": self.config.client_id,
        }
        if auth.identity_token:
            form["grant_type"] = "refresh_token"
            form["refresh_token"] = auth.identity_token
        elif auth.username and auth.password:
            form["grant_type"] = "password"
            form["username"] = auth.username
            form["password"] = auth.password
            form["access_type"] = "offline"

        request = httpx.Request("POST", url, data=form)
        return self._fetch(self.inner, request)

    def _refresh_basic(self) -> bytes:
        """https://docs.docker.com/registry/spec/auth/token/"""
        url = self._realm_url()
        transport = BasicTransport(
            self.inner,
            self._basic,
            target=url.netloc.decode("ascii"),
            config=self.config,
        )

        url = url.copy_with(params={"scope": list(self.scopes), "service": self.service})
        request = httpx.Request("GET", url)
        return self._fetch(transport, request)
