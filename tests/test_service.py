"""
End-to-end tests for FragmentService: id validation, cache flow, envelope.
"""

import pytest

from modalis.cache.invalidation import CacheInvalidator
from modalis.config import ConfigLoader
from modalis.content.models import Fragment
from modalis.content.store import FragmentStore
from modalis.faults import FragmentNotFoundFault, InvalidFragmentIdFault
from modalis.service import FragmentService, build_service, parse_fragment_id


@pytest.fixture
def service(renderer, render_cache):
    return FragmentService(renderer, render_cache)


class TestParseFragmentId:

    @pytest.mark.parametrize("raw, expected", [(42, 42), ("42", 42), (" 7 ", 7), ("2147483647", 2147483647)])
    def test_valid(self, raw, expected):
        assert parse_fragment_id(raw) == expected

    @pytest.mark.parametrize("raw", [0, -1, "0", "abc", "4.2", "", None, True, 2147483648, "²", [1]])
    def test_invalid(self, raw):
        with pytest.raises(InvalidFragmentIdFault):
            parse_fragment_id(raw)

    def test_custom_max(self):
        with pytest.raises(InvalidFragmentIdFault):
            parse_fragment_id(11, max_id=10)


class TestFragmentService:

    @pytest.mark.asyncio
    async def test_miss_then_hit(self, service):
        first = await service.get_payload(42)
        assert first["cached"] is False
        assert first["html"] == "<p>Hi</p>"
        assert first["title"] == "Greeting"

        second = await service.get_payload("42")
        assert second["cached"] is True
        assert second["html"] == first["html"]

    @pytest.mark.asyncio
    async def test_invalidation_forces_rerender(self, service, render_cache, provider):
        await service.get_payload(42)
        provider.put(Fragment(id=42, content="<p>Bye</p>", title="Greeting"))
        await CacheInvalidator(render_cache, provider).on_save(42)
        assert await render_cache.get(42) is None

        payload = await service.get_payload(42)
        assert payload["cached"] is False
        assert payload["html"] == "<p>Bye</p>"

    @pytest.mark.asyncio
    async def test_not_renderable_never_served_from_cache(self, service, render_cache, provider):
        await service.get_payload(42)
        provider.put(Fragment(id=42, content="<p>Hi</p>", status="draft"))
        with pytest.raises(FragmentNotFoundFault):
            await service.get_payload(42)

    @pytest.mark.asyncio
    async def test_empty_html_not_cached(self, service, render_cache, provider):
        provider.put(Fragment(id=5, content=""))
        payload = await service.get_payload(5)
        assert payload["html"] == ""
        assert await render_cache.get(5) is None

    @pytest.mark.asyncio
    async def test_default_title(self, service, provider):
        provider.put(Fragment(id=5, content="<p>x</p>"))
        assert (await service.get_payload(5))["title"] == "Popup"

    @pytest.mark.asyncio
    async def test_with_store(self, renderer, render_cache, provider, fast_tier):
        store = FragmentStore(provider, cache=fast_tier, key_builder=render_cache.keys)
        service = FragmentService(renderer, render_cache, store=store)
        await service.get_payload(42)
        assert await fast_tier.get("modalis:pattern_42") is not None


class TestEnvelope:

    @pytest.mark.asyncio
    async def test_success(self, service):
        response = await service.respond(42)
        assert response["success"] is True
        assert response["data"]["html"] == "<p>Hi</p>"

    @pytest.mark.asyncio
    async def test_invalid_id(self, service):
        assert await service.respond("abc") == {"success": False, "data": {"message": "Invalid request."}}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("fragment_id", [7, 8, 9, 404])
    async def test_not_found_identical(self, service, fragment_id):
        assert await service.respond(fragment_id) == {
            "success": False,
            "data": {"message": "Content not available."},
        }

    @pytest.mark.asyncio
    async def test_failing_stage_gets_generic_message(self, service, renderer):
        def embed(content):
            raise RuntimeError("embed provider down")

        renderer.pipeline.register(embed, name="embed")
        assert await service.respond("42") == {
            "success": False,
            "data": {"message": "Content not available."},
        }


class TestBuildService:

    @pytest.mark.asyncio
    async def test_wired_from_config(self, provider):
        loader = ConfigLoader.load(overrides={"cache": {"default_ttl": 120}, "render": {"default_title": "Modal"}})
        service = build_service(loader, provider, ttl_provider=lambda default: default // 2)
        assert service.cache.effective_ttl == 60
        assert service.store.ttl == 300
        provider.put(Fragment(id=5, content="<p>x</p>"))
        payload = await service.get_payload(5)
        assert payload["title"] == "Modal"
