import logging
import time

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from selenium_stealth import stealth
from webdriver_manager.chrome import ChromeDriverManager

from app.config import settings

logger = logging.getLogger(__name__)

# Generic review containers used by many e-commerce sites
REVIEW_SELECTORS = [
    ".review-text",
    ".review-body",
    ".review-content",
    '[data-hook="review-body"]',
    ".customer-review",
    ".product-review",
    ".user-review",
    ".comment-text",
    ".review p",
    ".review-description",
]


def _build_driver() -> webdriver.Chrome:
    """Create a stealth headless Chrome driver."""
    options = Options()
    if settings.scraper_headless:
        options.add_argument("--headless=new")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--disable-blink-features=AutomationControlled")
    options.add_argument("--window-size=1920,1080")
    options.add_experimental_option("excludeSwitches", ["enable-automation"])
    options.add_experimental_option("useAutomationExtension", False)

    service = Service(ChromeDriverManager().install())
    driver = webdriver.Chrome(service=service, options=options)

    stealth(
        driver,
        languages=["en-US", "en"],
        vendor="Google Inc.",
        platform="Win32",
        webgl_vendor="Intel Inc.",
        renderer="Intel Iris OpenGL Engine",
        fix_hairline=True,
    )
    return driver


def collect_review_texts(driver: webdriver.Chrome, max_reviews: int) -> list[str]:
    """Gather non-empty texts under the known review selectors, in selector order, without repeats."""
    texts: list[str] = []
    for selector in REVIEW_SELECTORS:
        try:
            elements = driver.find_elements(By.CSS_SELECTOR, selector)
        except WebDriverException as e:
            logger.debug("Selector %s failed: %s", selector, e)
            continue
        for element in elements:
            text = element.text.strip()
            if text and text not in texts:
                texts.append(text)
            if len(texts) >= max_reviews:
                return texts
    return texts


def scrape_reviews(url: str, max_reviews: int) -> list[str]:
    """
    Load a product page and extract raw review texts.

    Args:
        url: Product page URL.
        max_reviews: Stop after this many texts.

    Returns:
        Review texts as they appear on the page, possibly empty.
    """
    driver = _build_driver()
    try:
        logger.info("Fetching reviews page: %s", url)
        driver.get(url)
        try:
            WebDriverWait(driver, settings.scraper_timeout).until(
                EC.presence_of_element_located((By.TAG_NAME, "body"))
            )
        except TimeoutException:
            logger.warning("Page body did not load within %ss", settings.scraper_timeout)

        # Scroll to trigger lazy-loaded review widgets
        driver.execute_script("window.scrollTo(0, document.body.scrollHeight/2);")
        time.sleep(2)
        driver.execute_script("window.scrollTo(0, document.body.scrollHeight);")
        time.sleep(2)

        texts = collect_review_texts(driver, max_reviews)
        logger.info("Found %d review texts on %s", len(texts), url)
        return texts
    finally:
        driver.quit()
