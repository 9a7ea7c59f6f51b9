"""
Command line entry point

Usage: python scrape.py --scrape
"""

import logging
import sys

from links_reader import get_links_from_file
from product_scraper import load_extractor, run_batch
from scraper_config import load_settings
from scraper_errors import BrowserSessionError, ConfigError, ExportError
from xlsx_exporter import save_to_xlsx

logger = logging.getLogger(__name__)

SCRAPE_COMMANDS = ("--scrape", "scrape")


def run_scrape(config=None, scraper_factory=None):
    """
    Read the links, scrape them all and save the results

    Returns:
        int: Process exit code
    """
    try:
        config = config or load_settings()
        links = get_links_from_file(config.links_path)
        extractor_code = load_extractor(config.extractor_path, config.extractor_function)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    if not links:
        logger.info("Nothing to scrape. Exiting.")
        return 0

    try:
        outcomes = run_batch(links, extractor_code, config, scraper_factory)
    except BrowserSessionError as e:
        logger.error(str(e))
        return 1

    failed = sum(1 for record in outcomes if "error" in record)
    logger.info(f"Scraping finished. Successful: {len(outcomes) - failed}, failed: {failed}, total: {len(outcomes)}")
    logger.debug(f"Collected records: {outcomes}")

    try:
        save_to_xlsx(outcomes, config.output_path, config.sheet_name)
    except ExportError as e:
        logger.error(f"{e}. {len(outcomes)} scraped record(s) were not saved")
        return 1
    return 0


def print_usage(command):
    print(f"Unknown or missing command: {command or 'no command given'}")
    print("Please use the --scrape flag.")
    print("\nExample: python scrape.py --scrape")


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    if argv is None:
        argv = sys.argv[1:]
    command = argv[0] if argv else None

    if command not in SCRAPE_COMMANDS:
        print_usage(command)
        return 2

    logger.info("Starting in scrape mode...")
    return run_scrape()


if __name__ == "__main__":
    sys.exit(main())
