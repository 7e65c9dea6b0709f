"""
Utility modules for the archive scraper.
"""

from .config import Config, ConfigError, ScraperConfig, load_config

__all__ = ['Config', 'ConfigError', 'ScraperConfig', 'load_config']
