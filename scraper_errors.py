"""
Error types raised by the product scraper
"""


class ScraperError(Exception):
    """Base class for all scraper errors"""


class ConfigError(ScraperError):
    """Link list or extractor script is missing or unusable"""


class BrowserSessionError(ScraperError):
    """The browser could not be launched"""


class NavigationError(ScraperError):
    """A page did not load, or its ready element never appeared"""


class RevealStepError(ScraperError):
    """The optional "show more" step failed; never leaves the scraper"""


class ExtractionError(ScraperError):
    """The extractor script failed or returned no data"""


class ExportError(ScraperError):
    """The output spreadsheet could not be written"""
