"""
Faults: Fault, FaultDomain, Severity and the domain fault classes.
"""

import pytest

from modalis.faults import (
    GENERIC_INVALID_MESSAGE,
    GENERIC_NOT_FOUND_MESSAGE,
    AssetResolutionFault,
    CacheConfigFault,
    CacheFault,
    CaptureFault,
    ConfigInvalidFault,
    Fault,
    FaultDomain,
    FragmentNotFoundFault,
    GalleryFault,
    InvalidFragmentIdFault,
    PipelineFault,
    Severity,
)


# ============================================================================
# Severity & FaultDomain
# ============================================================================

class TestSeverity:

    def test_values(self):
        assert Severity.INFO == "info"
        assert Severity.WARN == "warn"
        assert Severity.ERROR == "error"
        assert Severity.FATAL == "fatal"


class TestFaultDomain:

    def test_standard_domains(self):
        assert [d.value for d in FaultDomain] == ["config", "render", "assets", "cache", "gallery"]
        assert str(FaultDomain.CACHE) == "cache"

    def test_domain_equality(self):
        assert FaultDomain("render") == FaultDomain.RENDER
        assert FaultDomain("render") != FaultDomain.CACHE

    def test_domain_hashable(self):
        assert FaultDomain.CACHE in {FaultDomain("cache")}


# ============================================================================
# Fault
# ============================================================================

class TestFault:

    def test_basic_fault(self):
        f = Fault(code="X", message="boom", domain=FaultDomain.RENDER)
        assert f.code == "X"
        assert str(f) == "[X] boom"
        assert f.severity == Severity.ERROR
        assert f.public is False

    def test_missing_fields_rejected(self):
        with pytest.raises(TypeError):
            Fault(code="X", domain=FaultDomain.RENDER)

    def test_to_dict(self):
        d = Fault(code="X", message="m", domain=FaultDomain.CACHE, metadata={"a": 1}).to_dict()
        assert d["domain"] == "cache"
        assert d["retryable"] is True
        assert d["metadata"] == {"a": 1}

    def test_private_fault_public_view_is_generic(self):
        f = Fault(code="X", message="internal detail", domain=FaultDomain.RENDER)
        assert f.to_public_dict() == {"message": GENERIC_NOT_FOUND_MESSAGE}


# ============================================================================
# Domain faults
# ============================================================================

class TestDomainFaults:

    def test_not_found_never_names_condition(self):
        f = FragmentNotFoundFault(8)
        assert f.code == "FRAGMENT_NOT_FOUND"
        assert f.public is True
        assert f.message == "Content not available."
        assert set(f.metadata) == {"fragment_id"}
        assert f.to_public_dict() == {"message": "Content not available."}

    def test_invalid_id(self):
        f = InvalidFragmentIdFault("abc")
        assert f.code == "FRAGMENT_ID_INVALID"
        assert f.to_public_dict() == {"message": GENERIC_INVALID_MESSAGE}

    def test_pipeline_fault(self):
        f = PipelineFault(stage="autop", reason="not callable")
        assert f.domain == FaultDomain.RENDER
        assert "autop" in f.message

    def test_pipeline_stage_failure_stays_private(self):
        f = PipelineFault(stage="embed", reason="provider down", running=True)
        assert f.code == "PIPELINE_STAGE_FAILED"
        assert f.severity == Severity.ERROR
        assert f.to_public_dict() == {"message": GENERIC_NOT_FOUND_MESSAGE}

    def test_asset_faults(self):
        assert CaptureFault("busy").domain == FaultDomain.ASSETS
        f = AssetResolutionFault("h", "style", "bad url")
        assert f.metadata["handle"] == "h"

    def test_cache_fault_hierarchy(self):
        f = CacheConfigFault(reason="bad")
        assert isinstance(f, CacheFault)
        assert f.domain == FaultDomain.CACHE

    def test_config_and_gallery(self):
        assert ConfigInvalidFault("cache.x", "unknown").domain == FaultDomain.CONFIG
        assert GalleryFault("modalSize", "abc").domain == FaultDomain.GALLERY
