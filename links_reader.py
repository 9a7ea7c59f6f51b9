"""
Reads the list of product URLs to scrape
"""

import logging
from urllib.parse import urlparse

from scraper_errors import ConfigError

logger = logging.getLogger(__name__)


def is_product_url(line):
    """Return True for absolute http(s) URLs"""
    parsed = urlparse(line)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def get_links_from_file(file_path):
    """
    Read product links from a text file, one URL per line

    Blank lines and lines that are not absolute http(s) URLs are skipped.

    Args:
        file_path (str): Path to the .txt file

    Returns:
        list: URLs in file order (empty if none were found)

    Raises:
        ConfigError: If the file cannot be read
    """
    try:
        with open(file_path, 'r', encoding='utf-8-sig') as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read links file {file_path}: {e}") from e

    links = []
    for line in content.splitlines():
        line = line.strip()
        if line and is_product_url(line):
            links.append(line)

    if not links:
        logger.warning(f"Links file {file_path} is empty or has no valid URLs")
        return []

    logger.info(f"Found {len(links)} link(s) in {file_path}")
    return links
