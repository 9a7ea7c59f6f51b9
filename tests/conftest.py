"""Shared fixtures: a fake WebDriver so no real browser is launched.

The fake implements only what the scraper and Selenium's ``WebDriverWait`` /
``expected_conditions`` helpers call: ``get``, ``find_element``,
``execute_script`` and ``quit``. Each URL maps to a :class:`FakePage` that
describes which CSS selectors are present, what clicking reveals, and what
the extractor script returns.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

import pytest
from selenium.common.exceptions import NoSuchElementException

from product_scraper import ProductScraper
from scraper_config import Settings

READY = "h1"
REVEAL_BUTTON = ".show-more"
REVEAL_CONTENT = ".details"


@dataclass
class FakePage:
    record: Optional[dict] = None
    elements: Set[str] = field(default_factory=lambda: {READY})
    # selector clicked -> selectors that appear afterwards
    reveals: Dict[str, Set[str]] = field(default_factory=dict)
    load_error: Optional[Exception] = None
    script_error: Optional[Exception] = None
    click_error: Optional[Exception] = None


class FakeElement:
    def __init__(self, driver: "FakeDriver", selector: str) -> None:
        self.driver = driver
        self.selector = selector

    def is_displayed(self) -> bool:
        return True

    def is_enabled(self) -> bool:
        return True

    def click(self) -> None:
        page = self.driver.page
        if page.click_error is not None:
            raise page.click_error
        self.driver.clicked.append(self.selector)
        self.driver.present |= page.reveals.get(self.selector, set())


class FakeDriver:
    def __init__(self, pages: Dict[str, FakePage]) -> None:
        self.pages = pages
        self.page: Optional[FakePage] = None
        self.present: Set[str] = set()
        self.visited: List[str] = []
        self.clicked: List[str] = []
        self.scripts: List[str] = []
        self.quit_called = False

    def get(self, url: str) -> None:
        self.visited.append(url)
        page = self.pages[url]
        if page.load_error is not None:
            raise page.load_error
        self.page = page
        self.present = set(page.elements)

    def find_element(self, by: str, value: str) -> FakeElement:
        if value in self.present:
            return FakeElement(self, value)
        raise NoSuchElementException(f"no element for {value}")

    def execute_script(self, script: str, *args):
        self.scripts.append(script)
        if self.page.script_error is not None:
            raise self.page.script_error
        return copy.deepcopy(self.page.record)

    def quit(self) -> None:
        self.quit_called = True


@pytest.fixture
def fast_settings(tmp_path) -> Settings:
    """Settings with tiny timeouts and paths inside ``tmp_path``."""
    return Settings(
        output_path=str(tmp_path / "out" / "products.xlsx"),
        extractor_path=str(tmp_path / "parser.js"),
        links_path=str(tmp_path / "links.txt"),
        content_is_complete=False,
        extractor_function="getPageData",
        headless=True,
        ready_selector=READY,
        reveal_button_selector=REVEAL_BUTTON,
        reveal_content_selector=REVEAL_CONTENT,
        page_load_timeout=1,
        ready_timeout=0.05,
        reveal_timeout=0.05,
        reveal_content_timeout=0.05,
        wait_poll_interval=0.01,
        sheet_name="Products",
    )


@pytest.fixture
def make_scraper(fast_settings):
    """Build a ``ProductScraper`` around a :class:`FakeDriver`."""

    def _make(pages: Dict[str, FakePage], config: Optional[Settings] = None) -> ProductScraper:
        return ProductScraper(config or fast_settings, driver=FakeDriver(pages))

    return _make
