"""
Classification of unexpected registry and token service responses.
"""

import json
from dataclasses import dataclass
from typing import Any, List, Optional

import httpx

from regauth.utils.exceptions import CommunicationError

# Error codes from the registry API that are worth retrying
TEMPORARY_CODES = {"UNAVAILABLE", "TOOMANYREQUESTS"}
TEMPORARY_STATUSES = {408, 429, 500, 502, 503, 504}


@dataclass(frozen=True)
class Diagnostic:
    """One entry of a registry error body."""
    code: str
    message: str = ""
    detail: Any = None
    
    def __str__(self) -> str:
        text = f"{self.code}: {self.message}" if self.message else self.code
        if self.detail is not None:
            text = f"{text}; {self.detail}"
        return text


class TransportError(CommunicationError):
    """Raised when a response does not carry an expected status code."""
    
    def __init__(
        self,
        status_code: int,
        body: str = "",
        errors: Optional[List[Diagnostic]] = None,
        url: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.errors = errors or []
        self.url = url
        super().__init__(
            self._format_message(),
            {"status_code": status_code, "url": url, "body": body},
        )
    
    def _format_message(self) -> str:
        if self.errors:
            return "; ".join(str(e) for e in self.errors)
        target = f" from {self.url}" if self.url else ""
        message = f"unexpected status code {self.status_code}{target}"
        if self.body:
            message = f"{message}: {self.body}"
        return message
    
    def is_temporary(self) -> bool:
        """True when retrying the request might succeed."""
        if self.errors:
            return all(e.code in TEMPORARY_CODES for e in self.errors)
        return self.status_code in TEMPORARY_STATUSES


def _parse_diagnostics(body: str) -> List[Diagnostic]:
    try:
        payload = json.loads(body)
    except ValueError:
        return []
    if not isinstance(payload, dict) or not isinstance(payload.get("errors"), list):
        return []
    
    diagnostics = []
    for entry in payload["errors"]:
        if isinstance(entry, dict) and entry.get("code"):
            diagnostics.append(Diagnostic(
                code=str(entry["code"]),
                message=str(entry.get("message") or ""),
                detail=entry.get("detail"),
            ))
    return diagnostics


def check_error(response: httpx.Response, *expected: int) -> None:
    """
    Raise TransportError unless ``response`` has one of the expected statuses.
    
    The response body is read so the error can describe it.
    
    Args:
        response: Response to inspect
        *expected: Acceptable status codes
        
    Raises:
        TransportError: If the status code is not expected
    """
    if response.status_code in expected:
        return None
    
    body = response.read().decode("utf-8", errors="replace")
    try:
        url = str(response.request.url)
    except RuntimeError:
        url = None
    raise TransportError(
        status_code=response.status_code,
        body=body,
        errors=_parse_diagnostics(body),
        url=url,
    )
