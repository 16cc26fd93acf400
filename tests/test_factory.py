"""
Tests for new_transport.
"""

import httpx
import pytest

from helpers import ClosableTransport, Recorder, token_response
from regauth.auth.exceptions import AuthenticationError, UnsupportedChallengeError
from regauth.auth.interfaces import Basic
from regauth.transport.basic import BasicTransport
from regauth.transport.bearer import BearerTransport
from regauth.transport.errors import TransportError
from regauth.transport.factory import new_transport
from regauth.types.registry import Registry

REGISTRY = Registry(name="registry.example.com")


def challenging(header):
    def handler(request):
        return httpx.Response(401, headers={"WWW-Authenticate": header})
    return handler


class TestNewTransport:
    
    def test_bearer_registry(self, test_config):
        recorder = Recorder()
        recorder.route("registry.example.com", challenging(
            'Bearer realm="https://auth.example.com/token",service="registry.example.com"'
        ))
        recorder.route("auth.example.com", lambda request: token_response(token="seeded"))
        
        transport = new_transport(
            REGISTRY,
            Basic("user", "pass"),
            inner=recorder.transport(),
            scopes=["repository:foo:pull"],
            config=test_config,
        )
        
        assert isinstance(transport, BearerTransport)
        assert transport.realm == "https://auth.example.com/token"
        assert transport.service == "registry.example.com"
        assert transport.scopes == ("repository:foo:pull",)
        assert transport.scheme == "https"
        assert transport.bearer.token == "seeded"
    
    def test_basic_registry(self, test_config):
        recorder = Recorder()
        recorder.route("registry.example.com", challenging('Basic realm="registry"'))
        
        transport = new_transport(REGISTRY, Basic("user", "pass"), inner=recorder.transport(), config=test_config)
        
        assert isinstance(transport, BasicTransport)
        assert transport.target == "registry.example.com"
    
    def test_anonymous_registry(self, test_config):
        inner = httpx.MockTransport(lambda request: httpx.Response(200))
        
        assert new_transport(REGISTRY, Basic("user", "pass"), inner=inner, config=test_config) is inner
    
    def test_bearer_without_realm(self, test_config):
        inner = httpx.MockTransport(challenging('Bearer service="registry.example.com"'))
        
        with pytest.raises(AuthenticationError, match="missing realm"):
            new_transport(REGISTRY, Basic("user", "pass"), inner=inner, config=test_config)
    
    def test_unknown_challenge(self, test_config):
        inner = httpx.MockTransport(challenging("Negotiate"))
        
        with pytest.raises(UnsupportedChallengeError):
            new_transport(REGISTRY, Basic("user", "pass"), inner=inner, config=test_config)


class TestTransportOwnership:
    """new_transport closes a transport it created when it fails."""

    def test_created_transport_closed_on_failure(self, monkeypatch, test_config):
        recorder = Recorder()
        recorder.route("registry.example.com", challenging(
            'Bearer realm="https://auth.example.com/token",service="registry.example.com"'
        ))
        recorder.route("auth.example.com", lambda request: httpx.Response(403))
        created = ClosableTransport(recorder)
        monkeypatch.setattr(httpx, "HTTPTransport", lambda *args, **kwargs: created)

        with pytest.raises(TransportError):
            new_transport(REGISTRY, Basic("user", "pass"), config=test_config)

        assert created.closed

    def test_created_transport_closed_on_unknown_challenge(self, monkeypatch, test_config):
        created = ClosableTransport(challenging("Negotiate"))
        monkeypatch.setattr(httpx, "HTTPTransport", lambda *args, **kwargs: created)

        with pytest.raises(UnsupportedChallengeError):
            new_transport(REGISTRY, Basic("user", "pass"), config=test_config)

        assert created.closed

    def test_created_transport_kept_on_success(self, monkeypatch, test_config):
        created = ClosableTransport(lambda request: httpx.Response(200))
        monkeypatch.setattr(httpx, "HTTPTransport", lambda *args, **kwargs: created)

        assert new_transport(REGISTRY, Basic("user", "pass"), config=test_config) is created
        assert not created.closed

    def test_caller_transport_left_open(self, test_config):
        inner = ClosableTransport(challenging("Negotiate"))

        with pytest.raises(UnsupportedChallengeError):
            new_transport(REGISTRY, Basic("user", "pass"), inner=inner, config=test_config)

        assert not inner.closed
