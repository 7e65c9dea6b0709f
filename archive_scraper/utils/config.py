"""
Configuration management for the archive scraper.
"""

import logging
import re
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import yaml


DEFAULT_BASE_URL = 'http://archive-grbj-2.s3-website-us-west-1.amazonaws.com/'
STRUCTURE_ERROR_POLICIES = ('raise', 'skip')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
INT_PATTERN = re.compile(r'-?[0-9]+')


class ConfigError(ValueError):
    """Raised when one or more configuration options are invalid."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


@dataclass(frozen=True)
class ScraperConfig:
    """Configuration for crawl behavior."""
    base_url: str = DEFAULT_BASE_URL
    directory_path: str = 'authors.html'
    concurrency: int = 5
    max_results_per_author: Optional[int] = 5
    start_date: Optional[date] = date(2001, 1, 1)
    end_date: Optional[date] = date(2018, 1, 1)
    wait: int = 0
    request_timeout: float = 30
    user_agent: str = 'ArchiveScraper/1.0'
    retry_attempts: int = 0
    on_structure_error: str = 'raise'

    @property
    def directory_url(self) -> str:
        return self.base_url + self.directory_path

    @property
    def fetch_timeout(self) -> Optional[float]:
        """Per-fetch timeout; a wait of 0 leaves the session default in place."""
        return self.wait or None


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for logging."""
    level: str = 'INFO'
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    file: Optional[str] = None
    json: bool = False


@dataclass(frozen=True)
class MonitoringConfig:
    """Configuration for monitoring."""
    metrics_enabled: bool = False
    prometheus_port: int = 8000


@dataclass(frozen=True)
class Config:
    """Main configuration class."""
    scraper: ScraperConfig = field(default_factory=ScraperConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _coerce_int(value: Any) -> Any:
    """Accept integer strings coming from the command line."""
    if isinstance(value, str) and INT_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    return value


def _parse_date(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    return datetime.strptime(str(value), '%Y-%m-%d').date()


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None

    def load_config(self, overrides: Optional[Dict[str, Any]] = None,
                    log_level: Optional[str] = None) -> Config:
        """
        Load configuration from the YAML file (if any) and apply overrides.

        Args:
            overrides: scraper option values taking precedence over the file
            log_level: logging level taking precedence over the file

        Raises:
            FileNotFoundError: if a config path was given but does not exist
            ConfigError: if any option is invalid
        """
        config_data: Dict[str, Any] = {}
        if self.config_path is not None:
            if not self.config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
            with open(self.config_path, 'r') as file:
                config_data = yaml.safe_load(file) or {}

        scraper_data = dict(config_data.get('scraper') or {})
        scraper_data.update({k: v for k, v in (overrides or {}).items() if v is not None})

        errors: List[str] = []
        sections: Dict[str, Any] = {}
        builders = (
            ('scraper', lambda: build_scraper_config(scraper_data)),
            ('logging', lambda: build_logging_config(config_data.get('logging'), log_level)),
            ('monitoring', lambda: self._build_section(MonitoringConfig, config_data.get('monitoring'))),
        )
        for name, build in builders:
            try:
                sections[name] = build()
            except ConfigError as e:
                errors.extend(e.errors)
        if errors:
            raise ConfigError(errors)

        config = Config(**sections)

        logging.getLogger(__name__).debug("Configuration validation passed")
        return config

    @staticmethod
    def _build_section(section_cls, data: Optional[Dict[str, Any]]):
        known = {f.name for f in fields(section_cls)}
        data = data or {}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError([f"Unknown option(s) in {section_cls.__name__}: {', '.join(unknown)}"])
        return section_cls(**data)


def build_logging_config(data: Optional[Dict[str, Any]] = None,
                         level: Optional[str] = None) -> LoggingConfig:
    """Build the logging section, rejecting unknown level names."""
    data = dict(data or {})
    if level is not None:
        data['level'] = level

    config = ConfigManager._build_section(LoggingConfig, data)
    if str(config.level).upper() not in LOG_LEVELS:
        raise ConfigError([
            f"Log level should be one of {', '.join(LOG_LEVELS)}. Input was: {config.level}"
        ])
    return replace(config, level=str(config.level).upper())


def build_scraper_config(data: Optional[Dict[str, Any]] = None) -> ScraperConfig:
    """
    Validate raw scraper options and build a ScraperConfig.

    Every invalid option is reported; the ConfigError carries one message per option.
    """
    data = dict(data or {})
    errors: List[str] = []
    values: Dict[str, Any] = {}

    known = {f.name for f in fields(ScraperConfig)}
    for name in sorted(set(data) - known):
        errors.append(f"Unknown scraper option: {name}")

    def check_int(name: str, minimum: int, message: str, nullable: bool = False):
        if name not in data:
            return
        raw = data[name]
        if raw is None and nullable:
            values[name] = None
            return
        value = _coerce_int(raw)
        if not _is_int(value) or value < minimum:
            errors.append(f"{message} Input was: {raw}")
        else:
            values[name] = value

    check_int('concurrency', 1, "Concurrency value should be integer and >= 1.")
    check_int('max_results_per_author', 0,
              "Max Results Per Author value should be integer and >= 0.", nullable=True)
    check_int('wait', 0, "Wait value should be integer and >= 0.")
    check_int('retry_attempts', 0, "Retry attempts value should be integer and >= 0.")

    for name, label in (('start_date', 'Start Date'), ('end_date', 'End Date')):
        if name not in data:
            continue
        try:
            values[name] = _parse_date(data[name])
        except ValueError:
            errors.append(f"{label} format should be YYYY-MM-DD. Input was: {data[name]}")

    start_date = values.get('start_date', ScraperConfig.start_date)
    end_date = values.get('end_date', ScraperConfig.end_date)
    if start_date and end_date and start_date > end_date:
        errors.append(f"Start Date should not be after End Date. Input was: {start_date} > {end_date}")

    if 'base_url' in data:
        base_url = data['base_url']
        parsed = urlparse(str(base_url))
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            errors.append(f"Invalid Base Url. Input was: {base_url}")
        else:
            values['base_url'] = str(base_url)

    if 'directory_path' in data:
        if not data['directory_path']:
            errors.append("Directory path should be a non-empty string.")
        else:
            values['directory_path'] = str(data['directory_path'])

    if 'request_timeout' in data:
        timeout = data['request_timeout']
        if not isinstance(timeout, (int, float)) or isinstance(timeout, bool) or timeout <= 0:
            errors.append(f"Request timeout should be a number > 0. Input was: {timeout}")
        else:
            values['request_timeout'] = timeout

    if 'user_agent' in data:
        values['user_agent'] = str(data['user_agent'])

    if 'on_structure_error' in data:
        policy = data['on_structure_error']
        if policy not in STRUCTURE_ERROR_POLICIES:
            errors.append(
                f"on_structure_error should be one of {', '.join(STRUCTURE_ERROR_POLICIES)}. "
                f"Input was: {policy}"
            )
        else:
            values['on_structure_error'] = policy

    if errors:
        raise ConfigError(errors)

    return replace(ScraperConfig(), **values)


def load_config(config_path: Optional[str] = None,
                overrides: Optional[Dict[str, Any]] = None,
                log_level: Optional[str] = None) -> Config:
    """Load configuration from file."""
    return ConfigManager(config_path).load_config(overrides, log_level)
