"""
Utility modules for the sitemap crawler.
"""

from .config import Config, ConfigManager, load_config
from .logger import setup_logging

__all__ = ['Config', 'ConfigManager', 'load_config', 'setup_logging']
