"""Tests for build_brief.config module."""

import pytest

from build_brief.config import Config, get_config, load_config, reset_config, set_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in ("CONFIG_ENV", "USE_MOCK_RSS", "RSS_TIMEOUT_MS", "MAX_STORIES"):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    def test_test_config(self) -> None:
        config = load_config("test")
        assert [feed.name for feed in config.feeds] == ["Wire Desk", "Metro Daily"]
        assert config.fetch.use_mock is True
        assert config.settings.top_count == 2
        assert config.cluster.similarity_threshold == 0.45

    def test_prod_config(self) -> None:
        config = load_config("prod")
        assert config.fetch.use_mock is False
        assert config.settings.stories_per_day == 20
        assert len(config.feeds) == 8

    def test_config_env_selects_file(self, monkeypatch) -> None:
        monkeypatch.setenv("CONFIG_ENV", "test")
        assert load_config().output.path == "tests/output/today.json"

    def test_env_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("USE_MOCK_RSS", "1")
        monkeypatch.setenv("RSS_TIMEOUT_MS", "2500")
        monkeypatch.setenv("MAX_STORIES", "4")
        config = load_config("prod")
        assert config.fetch.use_mock is True
        assert config.fetch.timeout_seconds == 2.5
        assert config.settings.stories_per_day == 4

    def test_preset_key(self, tmp_path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text(
            "preset: best-reporting\n"
            "feeds:\n"
            "  - name: A\n"
            "    url: https://a.com/rss\n"
        )
        config = load_config(str(path))
        assert config.settings.paywall_mode == "hide"
        assert config.settings.min_reliability == "High"

    def test_invalid_cluster_config_raises(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("cluster:\n  similarity_threshold: 0\n")
        with pytest.raises(ValueError):
            load_config(str(path))

    def test_missing_config_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("does-not-exist")


class TestConfigSingleton:
    def test_set_get_reset(self) -> None:
        custom = Config()
        set_config(custom)
        try:
            assert get_config() is custom
        finally:
            reset_config()
