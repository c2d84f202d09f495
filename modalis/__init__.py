"""
modalis — on-demand fragment rendering with asset discovery, a two-tier
render cache and gallery order reconciliation.
"""

from .cache import CacheInvalidator, RenderCache
from .config import ConfigLoader
from .content import Fragment, FragmentStore, InMemoryContentProvider
from .faults import Fault, FragmentNotFoundFault, InvalidFragmentIdFault
from .gallery import GalleryDataset, GalleryExtractor, reconcile
from .render import FragmentRenderer, RenderResult, TransformPipeline
from .service import FragmentService, build_service, parse_fragment_id
from .triggers import TriggerScanner

__version__ = "0.1.0"

__all__ = [
    "CacheInvalidator",
    "ConfigLoader",
    "Fault",
    "Fragment",
    "FragmentNotFoundFault",
    "FragmentRenderer",
    "FragmentService",
    "FragmentStore",
    "GalleryDataset",
    "GalleryExtractor",
    "InMemoryContentProvider",
    "InvalidFragmentIdFault",
    "RenderCache",
    "RenderResult",
    "TransformPipeline",
    "TriggerScanner",
    "build_service",
    "parse_fragment_id",
    "reconcile",
]
