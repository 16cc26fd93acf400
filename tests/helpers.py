"""
Shared helpers for regauth tests.
"""

import base64
import json
from typing import Callable, Dict, List
from urllib.parse import parse_qs

import httpx

REGISTRY_HOST = "registry.example.com"
REALM = "https://auth.example.com/token"
SERVICE = "registry.example.com"
SCOPE = "repository:foo:pull"


class Recorder:
    """
    Route requests by host to handlers and remember what was sent.
    
    Headers and URLs are copied at send time because a retried request
    is the same object with different headers.
    """
    
    def __init__(self):
        self.handlers: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.calls: List[dict] = []
    
    def route(self, host: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handlers[host] = handler
    
    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append({
            "method": request.method,
            "url": request.url,
            "headers": dict(request.headers),
            "content": request.content,
        })
        return self.handlers[request.url.host](request)
    
    def calls_to(self, host: str) -> List[dict]:
        return [c for c in self.calls if c["url"].host == host]
    
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def basic_header(username: str, password: str) -> str:
    raw = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


def form_of(call: dict) -> Dict[str, str]:
    """Decode a recorded form-encoded body into single values."""
    return {k: v[0] for k, v in parse_qs(call["content"].decode("ascii")).items()}


def token_response(status_code: int = 200, **fields) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(fields).encode("utf-8"))


def registry_requiring(token: str) -> Callable[[httpx.Request], httpx.Response]:
    """A registry that accepts only ``Bearer <token>``."""
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers.get("Authorization") == f"Bearer {token}":
            return httpx.Response(200, json={"name": "foo", "tags": ["latest"]})
        return httpx.Response(
            401,
            headers={"WWW-Authenticate": f'Bearer realm="{REALM}",service="{SERVICE}"'},
            json={"errors": [{"code": "UNAUTHORIZED", "message": "authentication required"}]},
        )
    return handler


class TrackingStream(httpx.SyncByteStream):
    """Response body that remembers whether it was closed."""
    
    def __init__(self, content: bytes):
        self.content = content
        self.closed = False
    
    def __iter__(self):
        yield self.content
    
    def close(self) -> None:
        self.closed = True


class ClosableTransport(httpx.MockTransport):
    """Mock transport that remembers whether it was closed."""
    
    closed = False
    
    def close(self) -> None:
        self.closed = True
