"""TOML config loading and profiles."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir(config_dir: Path | None = None) -> Path:
    if config_dir is not None:
        return config_dir
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    config_dir = _find_config_dir(config_dir)
    default_path = config_dir / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = config_dir / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def get_settings(profile: str | None = None, config_dir: Path | None = None) -> Settings:
    """Return Settings instance from merged config."""
    raw = load_config(profile, config_dir)
    return Settings.from_dict(raw)


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        polymarket: dict[str, Any] | None = None,
        http: dict[str, Any] | None = None,
        search: dict[str, Any] | None = None,
        trending: dict[str, Any] | None = None,
        history: dict[str, Any] | None = None,
        api: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.polymarket = polymarket or {}
        self.http = http or {}
        self.search = search or {}
        self.trending = trending or {}
        self.history = history or {}
        self.api = api or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            polymarket=raw.get("polymarket"),
            http=raw.get("http"),
            search=raw.get("search"),
            trending=raw.get("trending"),
            history=raw.get("history"),
            api=raw.get("api"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def gamma_api_base(self) -> str:
        return self.polymarket.get("gamma_api_base", "https://gamma-api.polymarket.com")

    @property
    def data_api_base(self) -> str:
        return self.polymarket.get("data_api_base", "https://data-api.polymarket.com")

    @property
    def public_domain(self) -> str:
        return self.polymarket.get("public_domain", "polymarket.com")

    @property
    def http_timeout_sec(self) -> float:
        return float(self.http.get("timeout_sec", 30.0))

    @property
    def user_agent(self) -> str:
        return self.http.get("user_agent", "Mozilla/5.0 (compatible; predfinder/0.1)")

    @property
    def default_limit(self) -> int:
        return int(self.search.get("default_limit", 10))

    @property
    def search_limit_per_type(self) -> int:
        return int(self.search.get("search_limit_per_type", 50))

    @property
    def tag_event_limit(self) -> int:
        return int(self.search.get("tag_event_limit", 100))

    @property
    def scan_page_size(self) -> int:
        return int(self.search.get("scan_page_size", 100))

    @property
    def scan_max_pages(self) -> int:
        return int(self.search.get("scan_max_pages", 20))

    @property
    def scan_early_stop_factor(self) -> int:
        return int(self.search.get("scan_early_stop_factor", 3))

    @property
    def loose_match_factor(self) -> float:
        return float(self.search.get("loose_match_factor", 0.7))

    @property
    def trending_min_event_fetch(self) -> int:
        return int(self.trending.get("min_event_fetch", 20))

    @property
    def trending_min_liquidity(self) -> float:
        return float(self.trending.get("min_liquidity", 5000))

    @property
    def trending_price_band(self) -> tuple[float, float]:
        return (
            float(self.trending.get("price_band_low", 0.05)),
            float(self.trending.get("price_band_high", 0.95)),
        )

    @property
    def trade_fetch_limit(self) -> int:
        return int(self.history.get("trade_fetch_limit", 200))

    @property
    def trade_sample_stride(self) -> int:
        return int(self.history.get("trade_sample_stride", 4))

    @property
    def history_max_points(self) -> int:
        return int(self.history.get("max_points", 50))

    @property
    def api_host(self) -> str:
        return self.api.get("host", "127.0.0.1")

    @property
    def api_port(self) -> int:
        return int(self.api.get("port", 8000))

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
