"""
ModalisFaults - Typed fault signals for the rendering core.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain taxonomy
- Severity: Severity levels
- Domain faults for render, assets, cache, gallery and config
"""

from .core import DOMAIN_DEFAULTS, Fault, FaultDomain, Severity
from .domains import (
    GENERIC_INVALID_MESSAGE,
    GENERIC_NOT_FOUND_MESSAGE,
    AssetFault,
    AssetResolutionFault,
    CacheBackendFault,
    CacheConfigFault,
    CacheConnectionFault,
    CacheFault,
    CacheSerializationFault,
    CaptureFault,
    ConfigFault,
    ConfigInvalidFault,
    FragmentNotFoundFault,
    GalleryFault,
    InvalidFragmentIdFault,
    PipelineFault,
    RenderFault,
)

__all__ = [
    "DOMAIN_DEFAULTS",
    "Fault",
    "FaultDomain",
    "Severity",
    "GENERIC_INVALID_MESSAGE",
    "GENERIC_NOT_FOUND_MESSAGE",
    "AssetFault",
    "AssetResolutionFault",
    "CacheBackendFault",
    "CacheConfigFault",
    "CacheConnectionFault",
    "CacheFault",
    "CacheSerializationFault",
    "CaptureFault",
    "ConfigFault",
    "ConfigInvalidFault",
    "FragmentNotFoundFault",
    "GalleryFault",
    "InvalidFragmentIdFault",
    "PipelineFault",
    "RenderFault",
]
