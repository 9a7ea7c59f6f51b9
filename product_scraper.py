"""
Product page scraper
Drives one Chrome session through a list of product pages and collects
whatever the site-specific extractor script returns for each of them
"""

import logging
from dataclasses import dataclass
from typing import Optional

from selenium import webdriver
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    JavascriptException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from scraper_config import load_settings
from scraper_errors import (
    BrowserSessionError,
    ConfigError,
    ExtractionError,
    NavigationError,
    RevealStepError,
)

logger = logging.getLogger(__name__)

NO_DATA_ERROR = "no data extracted"


def _describe(error):
    """Short, single-line description of a Selenium exception"""
    message = getattr(error, "msg", None) or str(error)
    message = message.split("; For documentation")[0]
    message = message.strip().splitlines()[0] if message.strip() else ""
    return message or type(error).__name__


@dataclass
class PageResult:
    """Outcome of scraping one URL: either extracted data or an error"""

    url: str
    data: Optional[dict] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, url, data):
        return cls(url=url, data=data)

    @classmethod
    def failure(cls, url, error):
        return cls(url=url, error=error or "unknown error")

    @property
    def ok(self):
        return self.error is None

    def to_record(self):
        """Row-shaped dict: the extracted data, or {url, error}"""
        if self.ok:
            return self.data
        return {"url": self.url, "error": self.error}


def load_extractor(file_path, function_name="getPageData"):
    """
    Read the extractor script evaluated inside each product page

    Args:
        file_path (str): Path to the .js file
        function_name (str): Function the script must define

    Returns:
        str: Script source

    Raises:
        ConfigError: If the script is missing, empty or lacks the function
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            code = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read extractor {file_path}: {e}") from e

    if not code.strip():
        raise ConfigError(f"Extractor {file_path} is empty")
    if function_name not in code:
        raise ConfigError(f"Extractor {file_path} does not define {function_name}()")

    logger.info(f"Using extractor: {file_path}")
    return code


class ProductScraper:
    def __init__(self, config=None, driver=None):
        """
        Initialize the scraper with a Chrome WebDriver

        Args:
            config (Settings): Settings to use, defaults to the environment settings
            driver: Already created WebDriver; a new Chrome is launched if None
        """
        self.config = config or load_settings()
        self.driver = driver
        if self.driver is None:
            self.setup_driver()

    def setup_driver(self):
        """Setup Chrome WebDriver with appropriate options"""
        chrome_options = Options()
        if self.config.headless:
            chrome_options.add_argument("--headless=new")
        chrome_options.add_argument("--no-sandbox")
        chrome_options.add_argument("--disable-dev-shm-usage")
        chrome_options.add_argument("--disable-blink-features=AutomationControlled")
        chrome_options.add_experimental_option("excludeSwitches", ["enable-automation"])
        chrome_options.add_experimental_option('useAutomationExtension', False)
        chrome_options.add_argument("user-agent=Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36")
        # Return from get() once the DOM is parsed, without waiting for every resource
        chrome_options.page_load_strategy = "eager"

        logger.info("Launching browser...")
        try:
            # Use webdriver-manager to automatically handle ChromeDriver
            service = Service(ChromeDriverManager().install())
            self.driver = webdriver.Chrome(service=service, options=chrome_options)
        except Exception as e:
            logger.error(f"Error initializing WebDriver: {e}")
            logger.info("Trying without webdriver-manager...")
            try:
                self.driver = webdriver.Chrome(options=chrome_options)
            except WebDriverException as e2:
                raise BrowserSessionError(f"Could not launch Chrome: {_describe(e2)}") from e2

        try:
            self.driver.set_window_size(self.config.window_width, self.config.window_height)
            self.driver.set_page_load_timeout(self.config.page_load_timeout)
        except WebDriverException as e:
            self.close()
            raise BrowserSessionError(f"Could not configure Chrome: {_describe(e)}") from e
        logger.info("Chrome WebDriver initialized successfully")

    def _wait(self, timeout):
        return WebDriverWait(self.driver, timeout, poll_frequency=self.config.wait_poll_interval)

    def _click(self, element):
        try:
            element.click()
        except ElementClickInterceptedException:
            # Something is covering the element; click it from JavaScript instead
            self.driver.execute_script("arguments[0].scrollIntoView({block: 'center'});", element)
            self.driver.execute_script("arguments[0].click();", element)

    def navigate(self, url):
        """
        Open the page and wait until its ready element is present

        Raises:
            NavigationError: On load failure or timeout
        """
        logger.info(f"Opening page: {url}")
        try:
            self.driver.get(url)
        except TimeoutException as e:
            raise NavigationError(f"Timed out loading {url} after {self.config.page_load_timeout}s") from e
        except WebDriverException as e:
            raise NavigationError(f"Could not load {url}: {_describe(e)}") from e

        try:
            self._wait(self.config.ready_timeout).until(
                EC.presence_of_element_located((By.CSS_SELECTOR, self.config.ready_selector))
            )
        except TimeoutException as e:
            raise NavigationError(
                f"Timed out waiting for '{self.config.ready_selector}' on {url} "
                f"after {self.config.ready_timeout}s"
            ) from e

    def reveal_full_content(self):
        """
        Click the "show more" button, if the page has one, and wait for the
        expanded content

        Never raises: a missing button means the content is already complete,
        and any other problem is logged and ignored.

        Returns:
            bool: True if the content was expanded
        """
        button_selector = self.config.reveal_button_selector
        content_selector = self.config.reveal_content_selector
        try:
            logger.info('Waiting for the "show more" button...')
            try:
                button = self._wait(self.config.reveal_timeout).until(
                    EC.element_to_be_clickable((By.CSS_SELECTOR, button_selector))
                )
            except TimeoutException:
                logger.info('"Show more" button not found, content is already complete')
                return False

            logger.info("Clicking the button...")
            self._click(button)

            logger.info("Waiting for the full content...")
            try:
                self._wait(self.config.reveal_content_timeout).until(
                    EC.presence_of_element_located((By.CSS_SELECTOR, content_selector))
                )
            except TimeoutException as e:
                raise RevealStepError(
                    f"'{content_selector}' did not appear after clicking '{button_selector}'"
                ) from e
            return True

        except RevealStepError as e:
            logger.warning(f"{e}; extracting without it")
        except WebDriverException as e:
            logger.warning(f"Could not expand the page content: {_describe(e)}")
        return False

    def extract(self, url, extractor_code):
        """
        Run the extractor script in the loaded page

        Returns:
            dict: The extracted record, always with a `url` field

        Raises:
            ExtractionError: If the script fails or returns nothing
        """
        script = f"{extractor_code}\nreturn {self.config.extractor_function}();"
        try:
            data = self.driver.execute_script(script)
        except JavascriptException as e:
            raise ExtractionError(f"Extractor failed on {url}: {_describe(e)}") from e

        if not data:
            raise ExtractionError(NO_DATA_ERROR)
        if not isinstance(data, dict):
            raise ExtractionError(f"Extractor returned {type(data).__name__} instead of an object")

        if "url" not in data:
            data = {"url": url, **data}
        return data

    def scrape_single_page(self, url, extractor_code):
        """
        Process one product page: open it, expand hidden content if the
        site needs it, then extract the data

        Args:
            url (str): Product page URL
            extractor_code (str): Extractor script source

        Returns:
            PageResult: Extracted data, or the reason the page failed
        """
        try:
            self.navigate(url)
            if not self.config.content_is_complete:
                self.reveal_full_content()
            data = self.extract(url, extractor_code)
        except (NavigationError, ExtractionError) as e:
            logger.error(f"Error processing {url}: {e}")
            return PageResult.failure(url, str(e))
        except WebDriverException as e:
            # Browser-level problem, e.g. the session or window is gone
            logger.error(f"Browser error processing {url}: {_describe(e)}")
            return PageResult.failure(url, _describe(e))

        logger.info(f"Data collected for {url}")
        return PageResult.success(url, data)

    def close(self):
        """Close the browser"""
        if self.driver:
            try:
                self.driver.quit()
                logger.info("Browser closed")
            except WebDriverException as e:
                logger.warning(f"Error while closing the browser: {_describe(e)}")
            self.driver = None


def run_batch(links, extractor_code, config=None, scraper_factory=None):
    """
    Scrape every link in order with a single browser session

    A failing link becomes an {url, error} record and the batch carries on.
    The browser is always closed, even if the run is interrupted.

    Args:
        links (list): Product URLs
        extractor_code (str): Extractor script source
        config (Settings): Settings to use, defaults to the environment settings
        scraper_factory (callable): Builds the scraper from the settings

    Returns:
        list: One record per processed link, in input order

    Raises:
        BrowserSessionError: If the browser cannot be launched
    """
    if not links:
        logger.info("No links to process")
        return []

    config = config or load_settings()
    scraper_factory = scraper_factory or ProductScraper

    outcomes = []
    scraper = None
    try:
        scraper = scraper_factory(config)
        total = len(links)

        for index, link in enumerate(links, 1):
            logger.info(f"[{index}/{total}] Processing {link}")
            try:
                result = scraper.scrape_single_page(link, extractor_code)
            except KeyboardInterrupt:
                logger.warning(f"Scraping interrupted by user at link {index}/{total}")
                break
            except Exception as e:
                logger.error(f"Unexpected error processing {link}: {_describe(e)}")
                result = PageResult.failure(link, _describe(e))

            if result.ok:
                logger.info(f"✓ Scraped {link}")
            else:
                logger.info(f"✗ Failed {link}: {result.error}")
            outcomes.append(result.to_record())

    finally:
        if scraper:
            scraper.close()

    return outcomes
