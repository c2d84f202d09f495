"""
Tests for ConfigLoader layering and the typed config sections.
"""

import pytest

from modalis.cache.factory import build_cache_config
from modalis.config import AssetConfig, ConfigLoader, RenderConfig
from modalis.faults import ConfigInvalidFault


class TestConfigLoader:

    def test_defaults(self):
        loader = ConfigLoader.load()
        cache = loader.get_cache_config()
        assert cache["default_ttl"] == 43200
        assert cache["ttl_override"] is None
        assert cache["fragment_object_ttl"] == 300

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "modalis.yaml"
        path.write_text("cache:\n  default_ttl: 600\n  durable_backend: redis\n")
        loader = ConfigLoader.load(paths=[str(path)])
        cache = loader.get_cache_config()
        assert cache["default_ttl"] == 600
        assert cache["durable_backend"] == "redis"
        assert cache["namespace"] == "modalis"

    def test_json_file(self, tmp_path):
        path = tmp_path / "modalis.json"
        path.write_text('{"render": {"default_title": "Modal"}}')
        assert ConfigLoader.load(paths=[str(path)]).get_render_config().default_title == "Modal"

    def test_env_nesting(self, monkeypatch):
        monkeypatch.setenv("MODALIS_CACHE__DEFAULT_TTL", "120")
        monkeypatch.setenv("MODALIS_CACHE__ENABLED", "false")
        loader = ConfigLoader.load()
        assert loader.get("cache.default_ttl") == 120
        assert loader.get("cache.enabled") is False

    def test_env_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MODALIS_CACHE__TTL_OVERRIDE", raising=False)
        env = tmp_path / ".env"
        env.write_text("MODALIS_CACHE__TTL_OVERRIDE=30\nOTHER=1\n")
        loader = ConfigLoader.load(env_file=str(env))
        assert loader.get("cache.ttl_override") == 30
        assert loader.get("other") is None

    def test_precedence(self, tmp_path, monkeypatch):
        path = tmp_path / "modalis.yaml"
        path.write_text("cache:\n  default_ttl: 600\n")
        monkeypatch.setenv("MODALIS_CACHE__DEFAULT_TTL", "700")
        loader = ConfigLoader.load(paths=[str(path)], overrides={"cache": {"default_ttl": 800}})
        assert loader.get("cache.default_ttl") == 800

    def test_missing_env_file_ignored(self, tmp_path):
        loader = ConfigLoader.load(env_file=str(tmp_path / "nope.env"))
        assert loader.get("cache") is None

    def test_cache_config_round_trip(self):
        loader = ConfigLoader.load(overrides={"cache": {"ttl_override": 90}})
        cfg = build_cache_config(loader.get_cache_config())
        assert cfg.ttl_override == 90
        assert cfg.default_ttl == 43200


class TestSections:

    def test_asset_config_defaults(self):
        cfg = ConfigLoader.load().get_asset_config()
        assert isinstance(cfg, AssetConfig)
        assert "wp-block-library" in cfg.baseline_exclusions
        assert "global-styles" in cfg.baseline_exclusions

    def test_asset_list_from_env_string(self, monkeypatch):
        monkeypatch.setenv("MODALIS_ASSETS__BASELINE_EXCLUSIONS", "a, b")
        assert ConfigLoader.load().get_asset_config().baseline_exclusions == ("a", "b")

    def test_unknown_setting(self):
        loader = ConfigLoader.load(overrides={"assets": {"bogus": 1}})
        with pytest.raises(ConfigInvalidFault):
            loader.get_asset_config()

    def test_render_defaults(self):
        cfg = ConfigLoader.load().get_render_config()
        assert isinstance(cfg, RenderConfig)
        assert cfg.max_fragment_id == 2147483647

    def test_render_invalid_max_id(self):
        loader = ConfigLoader.load(overrides={"render": {"max_fragment_id": 0}})
        with pytest.raises(ConfigInvalidFault):
            loader.get_render_config()

    def test_gallery_config(self):
        loader = ConfigLoader.load(overrides={"gallery": {"navigation_modes": ["image"]}})
        assert loader.get_gallery_config().navigation_modes == ("image",)
