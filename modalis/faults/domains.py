"""
ModalisFaults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- CONFIG faults
- RENDER faults
- ASSETS faults
- CACHE faults
- GALLERY faults
"""

from typing import Any, Optional

from .core import PRIVATE_FAULT_MESSAGE, Fault, FaultDomain, Severity


GENERIC_NOT_FOUND_MESSAGE = PRIVATE_FAULT_MESSAGE
GENERIC_INVALID_MESSAGE = "Invalid request."


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for configuration faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class ConfigInvalidFault(ConfigFault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# RENDER Faults
# ============================================================================

class RenderFault(Fault):
    """Base class for fragment lookup / rendering faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        public: bool = False,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.RENDER,
            severity=severity,
            retryable=False,
            public=public,
            metadata=metadata,
        )


class FragmentNotFoundFault(RenderFault):
    """
    Fragment is missing, not visible, access-restricted or not shareable.

    The four conditions are indistinguishable: neither the
    message nor the metadata says which one failed.
    """

    def __init__(self, fragment_id: Any = None):
        super().__init__(
            code="FRAGMENT_NOT_FOUND",
            message=GENERIC_NOT_FOUND_MESSAGE,
            severity=Severity.INFO,
            public=True,
            metadata={"fragment_id": fragment_id},
        )


class InvalidFragmentIdFault(RenderFault):
    """Raw fragment id is not a positive integer within range."""

    def __init__(self, raw_id: Any = None):
        super().__init__(
            code="FRAGMENT_ID_INVALID",
            message=GENERIC_INVALID_MESSAGE,
            severity=Severity.INFO,
            public=True,
            metadata={"raw_id": str(raw_id)[:64]},
        )


class PipelineFault(RenderFault):
    """
    Transform pipeline is misconfigured, or one of its stages raised.

    Never public: clients only ever see the generic message.
    """

    def __init__(self, stage: str, reason: str, *, running: bool = False):
        if running:
            code = "PIPELINE_STAGE_FAILED"
            message = f"Stage '{stage}' failed: {reason}"
            severity = Severity.ERROR
        else:
            code = "PIPELINE_INVALID"
            message = f"Cannot register stage '{stage}': {reason}"
            severity = Severity.FATAL
        super().__init__(
            code=code,
            message=message,
            severity=severity,
            metadata={"stage": stage, "reason": reason},
        )


# ============================================================================
# ASSETS Faults
# ============================================================================

class AssetFault(Fault):
    """Base class for asset discovery faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.WARN,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.ASSETS,
            severity=severity,
            retryable=False,
            public=False,
            metadata=metadata,
        )


class CaptureFault(AssetFault):
    """Dependency capture used out of order (start twice, checkpoint idle)."""

    def __init__(self, reason: str):
        super().__init__(
            code="ASSET_CAPTURE_STATE",
            message=f"Dependency capture misuse: {reason}",
            severity=Severity.ERROR,
            metadata={"reason": reason},
        )


class AssetResolutionFault(AssetFault):
    """A single asset could not be resolved; the asset is skipped."""

    def __init__(self, handle: str, kind: str, reason: str):
        super().__init__(
            code="ASSET_RESOLUTION_FAILED",
            message=f"Could not resolve {kind} '{handle}': {reason}",
            metadata={"handle": handle, "kind": kind, "reason": reason},
        )


# ============================================================================
# CACHE Faults
# ============================================================================

class CacheFault(Fault):
    """Base class for all cache faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.WARN,
        retryable: bool = True,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CACHE,
            severity=severity,
            retryable=retryable,
            public=False,
            metadata=metadata,
        )


class CacheConnectionFault(CacheFault):
    """Failed to connect to cache backend."""

    def __init__(self, backend: str, reason: str):
        super().__init__(
            code="CACHE_CONNECTION_FAILED",
            message=f"Cache backend '{backend}' connection failed: {reason}",
            severity=Severity.ERROR,
            metadata={"backend": backend, "reason": reason},
        )


class CacheBackendFault(CacheFault):
    """Generic cache backend error."""

    def __init__(self, backend: str, operation: str, reason: str):
        super().__init__(
            code="CACHE_BACKEND_ERROR",
            message=f"Cache backend '{backend}' error during {operation}: {reason}",
            severity=Severity.ERROR,
            metadata={"backend": backend, "operation": operation, "reason": reason},
        )


class CacheSerializationFault(CacheFault):
    """Failed to serialize/deserialize cache value."""

    def __init__(self, key: str, operation: str, reason: str):
        super().__init__(
            code="CACHE_SERIALIZATION_FAILED",
            message=f"Cache {operation} failed for key '{key}': {reason}",
            retryable=False,
            metadata={"key": key, "operation": operation, "reason": reason},
        )


class CacheConfigFault(CacheFault):
    """Cache configuration error."""

    def __init__(self, reason: str):
        super().__init__(
            code="CACHE_CONFIG_INVALID",
            message=f"Invalid cache configuration: {reason}",
            severity=Severity.FATAL,
            retryable=False,
            metadata={"reason": reason},
        )


# ============================================================================
# GALLERY Faults
# ============================================================================

class GalleryFault(Fault):
    """Gallery settings rejected in strict mode."""

    def __init__(self, setting: str, value: Any):
        super().__init__(
            code="GALLERY_SETTING_INVALID",
            message=f"Gallery setting '{setting}' has invalid value {value!r}",
            domain=FaultDomain.GALLERY,
            metadata={"setting": setting, "value": value},
        )
