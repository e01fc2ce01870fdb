# site_audit/probes/base.py
"""
Result types shared by all probes.

A probe never raises to its caller: it returns a :class:`ProbeResult` that
holds exactly one of a success payload, a failure marker or a skip marker.
Failures and skips carry a machine-checkable :class:`FailureKind`.
"""
from __future__ import annotations

import asyncio
import errno
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from aiohttp import ClientConnectorError, ClientResponseError, ContentTypeError

__all__ = ("FailureKind", "ProbeError", "ProbeResult", "classify_exception")


class FailureKind(str, Enum):
    CONNECTION_REFUSED = "connection_refused"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    PARSE_ERROR = "parse_error"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class ProbeError(Exception):
    """Failure at the boundary of an external call, tagged with its kind."""

    def __init__(self, kind: FailureKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


def _is_connection_refused(exc: BaseException) -> bool:
    os_error = getattr(exc, "os_error", None)
    if isinstance(os_error, ConnectionRefusedError):
        return True
    return getattr(os_error, "errno", None) == errno.ECONNREFUSED


def classify_exception(exc: BaseException) -> FailureKind:
    """Map an arbitrary exception to a :class:`FailureKind`."""
    if isinstance(exc, ProbeError):
        return exc.kind
    if isinstance(exc, ConnectionRefusedError):
        return FailureKind.CONNECTION_REFUSED
    if isinstance(exc, ClientConnectorError):
        if _is_connection_refused(exc):
            return FailureKind.CONNECTION_REFUSED
        return FailureKind.UNAVAILABLE
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return FailureKind.TIMEOUT
    if isinstance(exc, (ValueError, ContentTypeError, KeyError, TypeError)):
        return FailureKind.PARSE_ERROR
    if isinstance(exc, ClientResponseError):
        if exc.status == 429:
            return FailureKind.RATE_LIMITED
        return FailureKind.HTTP_ERROR
    return FailureKind.UNKNOWN


@dataclass(slots=True)
class ProbeResult:
    """Outcome of one probe. Build it with :meth:`ok`, :meth:`failed` or :meth:`skip`."""

    payload: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    skipped: bool = False
    reason: Optional[str] = None
    kind: Optional[FailureKind] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        present = sum((self.payload is not None, self.error is not None, self.skipped))
        if present != 1:
            raise ValueError("ProbeResult needs exactly one of payload, error or skip")

    @classmethod
    def ok(cls, payload: Dict[str, Any]) -> ProbeResult:
        return cls(payload=payload)

    @classmethod
    def failed(
        cls, error: str, kind: FailureKind = FailureKind.UNKNOWN, **extra: Any
    ) -> ProbeResult:
        return cls(error=error, kind=kind, extra=extra)

    @classmethod
    def skip(
        cls, reason: str, kind: Optional[FailureKind] = None, **extra: Any
    ) -> ProbeResult:
        return cls(skipped=True, reason=reason, kind=kind, extra=extra)

    @classmethod
    def from_exception(cls, exc: BaseException, prefix: str = "") -> ProbeResult:
        message = str(exc) or type(exc).__name__
        return cls.failed(f"{prefix}{message}", kind=classify_exception(exc))

    @property
    def succeeded(self) -> bool:
        return self.payload is not None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form: the payload itself or the marker."""
        if self.payload is not None:
            return dict(self.payload)
        if self.error is not None:
            data: Dict[str, Any] = {"error": self.error}
        else:
            data = {"skipped": True, "reason": self.reason}
        if self.kind is not None:
            data["kind"] = self.kind.value
        data.update(self.extra)
        return data
