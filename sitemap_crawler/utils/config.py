"""
Configuration management for the sitemap crawler.
"""

import yaml
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field, fields

from ..crawler.fetcher import DEFAULT_MAX_CONTENT_SIZE, DEFAULT_USER_AGENT
from ..exceptions import ConfigError
from ..output.sitemap_xml import CHANGEFREQ_VALUES, MAX_URLS_PER_SITEMAP


@dataclass
class CrawlerConfig:
    """Configuration for crawler behavior."""
    max_concurrent_requests: int = 10
    request_timeout: int = 30
    user_agent: str = DEFAULT_USER_AGENT
    exclude_patterns: List[str] = field(default_factory=list)
    max_pages: Optional[int] = None
    max_content_size: int = DEFAULT_MAX_CONTENT_SIZE


@dataclass
class SitemapConfig:
    """Configuration for the generated documents."""
    changefreq: str = 'weekly'
    save_path: Optional[str] = None
    strip_querystring: bool = True
    include_lastmod: bool = True
    max_entries_per_file: int = MAX_URLS_PER_SITEMAP


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = 'INFO'
    file: Optional[str] = None
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    json: bool = False


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    sitemap: SitemapConfig = field(default_factory=SitemapConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Config':
        """Build a Config from a nested dictionary; missing sections use defaults."""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a mapping")

        unknown = set(data) - {'crawler', 'sitemap', 'logging'}
        if unknown:
            raise ConfigError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

        return cls(
            crawler=_build_section(CrawlerConfig, data.get('crawler'), 'crawler'),
            sitemap=_build_section(SitemapConfig, data.get('sitemap'), 'sitemap'),
            logging=_build_section(LoggingConfig, data.get('logging'), 'logging'),
        )


def _build_section(section_cls, values: Optional[Dict[str, Any]], name: str):
    if values is None:
        return section_cls()
    if not isinstance(values, dict):
        raise ConfigError(f"Configuration section '{name}' must be a mapping")

    known = {f.name for f in fields(section_cls)}
    unknown = set(values) - known
    if unknown:
        raise ConfigError(f"Unknown keys in '{name}': {', '.join(sorted(unknown))}")
    return section_cls(**values)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None
        self.logger = logging.getLogger(__name__)

    def load_config(self) -> Config:
        """Load configuration from YAML file, or defaults when no file is given."""
        if self.config_path is None:
            self._config = Config()
        else:
            if not self.config_path.exists():
                raise ConfigError(f"Configuration file not found: {self.config_path}")

            try:
                with open(self.config_path, 'r', encoding='utf-8') as file:
                    config_data = yaml.safe_load(file)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {self.config_path}: {e}")

            self._config = Config.from_dict(config_data)

        validate_config(self._config)
        return self._config

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ConfigError("Configuration not loaded. Call load_config() first.")
        return self._config


def validate_config(config: Config):
    """Validate configuration values."""
    crawler = config.crawler
    sitemap = config.sitemap

    if crawler.max_concurrent_requests < 1:
        raise ConfigError("max_concurrent_requests must be at least 1")

    if crawler.request_timeout <= 0:
        raise ConfigError("request_timeout must be positive")

    if crawler.max_pages is not None and crawler.max_pages < 1:
        raise ConfigError("max_pages must be at least 1")

    if crawler.max_content_size < 1:
        raise ConfigError("max_content_size must be positive")

    if not isinstance(crawler.exclude_patterns, list) or \
            not all(isinstance(pattern, str) for pattern in crawler.exclude_patterns):
        raise ConfigError("exclude_patterns must be a list of strings")

    if sitemap.changefreq not in CHANGEFREQ_VALUES:
        raise ConfigError(
            f"changefreq must be one of {', '.join(CHANGEFREQ_VALUES)}, got '{sitemap.changefreq}'"
        )

    if not 1 <= sitemap.max_entries_per_file <= MAX_URLS_PER_SITEMAP:
        raise ConfigError(f"max_entries_per_file must be between 1 and {MAX_URLS_PER_SITEMAP}")

    logging.getLogger(__name__).debug("Configuration validation passed")


def parse_patterns(value: Optional[str]) -> List[str]:
    """Split a comma-separated pattern list, dropping blanks."""
    if not value:
        return []
    return [pattern.strip() for pattern in value.split(',') if pattern.strip()]


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file."""
    return ConfigManager(config_path).load_config()
