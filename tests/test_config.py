"""Tests for configuration loading and validation."""

import pytest

from sitemap_crawler.exceptions import ConfigError
from sitemap_crawler.utils.config import Config, load_config, parse_patterns, validate_config


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self):
        config = load_config()

        assert config.crawler.max_concurrent_requests == 10
        assert config.crawler.exclude_patterns == []
        assert config.crawler.max_pages is None
        assert config.sitemap.changefreq == "weekly"
        assert config.sitemap.save_path is None
        assert config.sitemap.strip_querystring is True
        assert config.logging.level == "INFO"

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "crawler.yaml"
        path.write_text(
            "crawler:\n"
            "  max_concurrent_requests: 4\n"
            "  exclude_patterns: ['/admin', logout]\n"
            "sitemap:\n"
            "  changefreq: daily\n"
            "  save_path: out/sitemap.xml\n",
            encoding="utf-8",
        )

        config = load_config(str(path))

        assert config.crawler.max_concurrent_requests == 4
        assert config.crawler.exclude_patterns == ["/admin", "logout"]
        assert config.crawler.request_timeout == 30
        assert config.sitemap.changefreq == "daily"
        assert config.sitemap.save_path == "out/sitemap.xml"
        assert config.logging.json is False

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path)) == Config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("crawler: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_unknown_section(self, tmp_path):
        path = tmp_path / "extra.yaml"
        path.write_text("redis:\n  host: localhost\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_unknown_key(self):
        with pytest.raises(ConfigError):
            Config.from_dict({"crawler": {"max_depth": 3}})


class TestValidation:
    """Tests for validate_config."""

    @pytest.mark.parametrize("section, key, value", [
        ("sitemap", "changefreq", "sometimes"),
        ("sitemap", "max_entries_per_file", 0),
        ("sitemap", "max_entries_per_file", 50001),
        ("crawler", "max_concurrent_requests", 0),
        ("crawler", "request_timeout", 0),
        ("crawler", "max_pages", 0),
    ])
    def test_invalid_values(self, section, key, value):
        config = Config()
        setattr(getattr(config, section), key, value)
        with pytest.raises(ConfigError):
            validate_config(config)

    def test_defaults_are_valid(self):
        validate_config(Config())

    def test_non_string_pattern(self, tmp_path):
        path = tmp_path / "patterns.yaml"
        path.write_text("crawler:\n  exclude_patterns:\n    - /admin\n    - 404\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(str(path))


class TestParsePatterns:
    """Tests for the comma-separated pattern option."""

    def test_split_and_strip(self):
        assert parse_patterns(" /admin , logout,,  ") == ["/admin", "logout"]

    def test_empty(self):
        assert parse_patterns("") == []
        assert parse_patterns(None) == []
