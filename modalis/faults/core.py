"""
ModalisFaults - Fault base class, domains and severities.

A fault is raised where a caller has to react to it: an unknown fragment,
a malformed id, a misconfigured pipeline. Failures that only cost
performance (a cache tier, a single asset) are logged and absorbed where
they happen instead of becoming faults that travel.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class Severity(str, Enum):
    """How loudly a fault should be reported."""
    INFO = "info"       # Expected outcome: unknown fragment, bad id
    WARN = "warn"       # Served, but degraded
    ERROR = "error"     # This request cannot be served
    FATAL = "fatal"     # Misconfiguration; refuse to start


class FaultDomain(str, Enum):
    """Functional area a fault comes from."""
    CONFIG = "config"
    RENDER = "render"
    ASSETS = "assets"
    CACHE = "cache"
    GALLERY = "gallery"

    def __str__(self) -> str:
        return self.value


# Severity and retry hint used when a fault does not pass its own
DOMAIN_DEFAULTS = {
    FaultDomain.CONFIG: (Severity.FATAL, False),
    FaultDomain.RENDER: (Severity.ERROR, False),
    FaultDomain.ASSETS: (Severity.WARN, False),
    FaultDomain.CACHE: (Severity.WARN, True),
    FaultDomain.GALLERY: (Severity.WARN, False),
}

PRIVATE_FAULT_MESSAGE = "Content not available."


class Fault(Exception):
    """
    Exception with a stable code, a domain and a client-facing policy.

    ``public`` decides what ``to_public_dict()`` reveals: a public fault
    shows its own message, any other fault shows the generic
    "Content not available." so internals never reach the transport.
    Subclasses may set ``code``, ``message`` and ``domain`` as class
    attributes instead of passing them.

    Example:
        raise Fault(
            code="PIPELINE_INVALID",
            message="Stage 'autop' is not callable",
            domain=FaultDomain.RENDER,
        )
    """

    code: Optional[str] = None
    message: Optional[str] = None
    domain: Optional[FaultDomain] = None

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        *,
        domain: Optional[FaultDomain] = None,
        severity: Optional[Severity] = None,
        retryable: Optional[bool] = None,
        public: bool = False,
        metadata: Optional[dict[str, Any]] = None,
    ):
        self.code = code or self.code
        self.message = message or self.message
        self.domain = domain or self.domain
        if not (self.code and self.message and self.domain):
            raise TypeError(f"{type(self).__name__} needs a code, a message and a domain")

        super().__init__(self.message)

        default_severity, default_retryable = DOMAIN_DEFAULTS.get(self.domain, (Severity.ERROR, False))
        self.severity = severity or default_severity
        self.retryable = default_retryable if retryable is None else retryable
        self.public = public
        self.metadata = dict(metadata or {})

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, domain={self.domain.value}, public={self.public})"

    def to_dict(self) -> dict[str, Any]:
        """Full view for logs and diagnostics."""
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "public": self.public,
            "metadata": self.metadata,
        }

    def to_public_dict(self) -> dict[str, Any]:
        return {"message": self.message if self.public else PRIVATE_FAULT_MESSAGE}
