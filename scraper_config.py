"""
Runtime settings for the product scraper

Every value can be overridden with an environment variable or a `.env` file
in the working directory (loaded when this module is imported).
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

from scraper_errors import ConfigError

load_dotenv(override=False)


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name, default, cast):
    value = os.environ.get(name, default)
    try:
        return cast(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e


def _env_float(name, default):
    return _env_number(name, default, float)


def _env_int(name, default):
    return _env_number(name, default, int)


@dataclass
class Settings:
    # Files
    output_path: str = field(default_factory=lambda: os.environ.get("OUTPUT_FILE_PATH", "products.xlsx"))
    extractor_path: str = field(default_factory=lambda: os.environ.get("PARSER_FILE_PATH", "parser.js"))
    links_path: str = field(default_factory=lambda: os.environ.get("LINKS_FILE_PATH", "links.txt"))

    # Set to False when the site hides details behind a "show more" button
    content_is_complete: bool = field(default_factory=lambda: _env_bool("IS_CONTENT_COMPLETE", False))

    # Name of the function the extractor script defines
    extractor_function: str = field(default_factory=lambda: os.environ.get("EXTRACTOR_FUNCTION", "getPageData"))

    # Browser
    headless: bool = field(default_factory=lambda: _env_bool("HEADLESS", True))
    window_width: int = field(default_factory=lambda: _env_int("WINDOW_WIDTH", 1366))
    window_height: int = field(default_factory=lambda: _env_int("WINDOW_HEIGHT", 768))

    # Page protocol
    ready_selector: str = field(default_factory=lambda: os.environ.get("READY_SELECTOR", "h1"))
    reveal_button_selector: str = field(
        default_factory=lambda: os.environ.get("REVEAL_BUTTON_SELECTOR", ".btnDetail--im7UR")
    )
    reveal_content_selector: str = field(
        default_factory=lambda: os.environ.get("REVEAL_CONTENT_SELECTOR", ".detailsModal--eHzZX")
    )

    # Timeouts, in seconds
    page_load_timeout: float = field(default_factory=lambda: _env_float("PAGE_LOAD_TIMEOUT", 30))
    ready_timeout: float = field(default_factory=lambda: _env_float("READY_TIMEOUT", 30))
    reveal_timeout: float = field(default_factory=lambda: _env_float("REVEAL_TIMEOUT", 5))
    reveal_content_timeout: float = field(default_factory=lambda: _env_float("REVEAL_CONTENT_TIMEOUT", 10))
    wait_poll_interval: float = field(default_factory=lambda: _env_float("WAIT_POLL_INTERVAL", 0.5))

    # Export
    sheet_name: str = field(default_factory=lambda: os.environ.get("SHEET_NAME", "Products"))


@lru_cache(maxsize=None)
def load_settings():
    """
    Settings shared by the whole run, read from the environment once

    Raises:
        ConfigError: If a numeric variable cannot be parsed
    """
    return Settings()
