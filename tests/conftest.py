"""
Pytest configuration and fixtures for regauth tests.
"""

import logging

import pytest
import structlog

from helpers import REALM, REGISTRY_HOST, SCOPE, SERVICE, Recorder
from regauth.auth.interfaces import Basic
from regauth.transport.bearer import BearerTransport
from regauth.types.registry import Registry
from regauth.utils.config import Config, reset_config


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Only let warnings through structlog during tests."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def test_config():
    """Create a test configuration."""
    return Config(
        user_agent="regauth-test",
        client_id="regauth-test-client",
        default_timeout=5.0,
        insecure=False,
        log_level="DEBUG",
        log_format="text",
    )


@pytest.fixture(autouse=True)
def reset_global_config():
    """Reset global configuration after each test."""
    yield
    reset_config()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def make_transport(recorder, test_config):
    """Build a BearerTransport for registry.example.com over the recorder."""
    def factory(**overrides) -> BearerTransport:
        options = dict(
            inner=recorder.transport(),
            basic=Basic(username="user", password="pass"),
            registry=Registry(name=REGISTRY_HOST),
            realm=REALM,
            service=SERVICE,
            scopes=[SCOPE],
            scheme="https",
            config=test_config,
        )
        options.update(overrides)
        return BearerTransport(**options)
    return factory
