"""Runtime settings loaded from ``settings.toml`` in the data directory.

Example file:

    [extraction]
    model = "gemini-2.5-flash"
    api_key_env = "GEMINI_API_KEY"
    timeout = 60
    # base_url = "https://proxy.example.com"  (optional endpoint override)

    [report]
    currency_symbol = "₱"
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from foodcost.runtime.logging import get_logger
from foodcost.runtime.paths import get_paths

logger = get_logger(__name__)

DEFAULT_EXTRACTION_MODEL = "gemini-2.5-flash"
DEFAULT_API_KEY_ENV = "GEMINI_API_KEY"
DEFAULT_TIMEOUT = 60.0
DEFAULT_CURRENCY_SYMBOL = "₱"


@dataclass(frozen=True)
class ExtractionSettings:
    model: str = DEFAULT_EXTRACTION_MODEL
    api_key_env: str = DEFAULT_API_KEY_ENV
    timeout: float = DEFAULT_TIMEOUT
    base_url: str | None = None

    def api_key(self) -> str | None:
        """Read the API key from the configured environment variable."""
        value = os.environ.get(self.api_key_env, "").strip()
        return value or None


@dataclass(frozen=True)
class Settings:
    extraction: ExtractionSettings = field(default_factory=ExtractionSettings)
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name, {})
    return value if isinstance(value, dict) else {}


def load_settings(path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults for anything missing or invalid."""
    if path is None:
        path = get_paths().settings

    data = _load_toml(path)
    extraction = _section(data, "extraction")
    report = _section(data, "report")

    try:
        timeout = float(extraction.get("timeout", DEFAULT_TIMEOUT))
    except (TypeError, ValueError):
        logger.warning("Invalid extraction timeout in %s; using %s", path, DEFAULT_TIMEOUT)
        timeout = DEFAULT_TIMEOUT
    base_url = extraction.get("base_url")

    settings = Settings(
        extraction=ExtractionSettings(
            model=str(extraction.get("model", DEFAULT_EXTRACTION_MODEL)),
            api_key_env=str(extraction.get("api_key_env", DEFAULT_API_KEY_ENV)),
            timeout=timeout,
            base_url=str(base_url) if base_url else None,
        ),
        currency_symbol=str(report.get("currency_symbol", DEFAULT_CURRENCY_SYMBOL)),
    )
    logger.debug("Loaded settings from %s: %s", path, settings)
    return settings
