"""
Page Fetcher Module
Retrieves the raw HTML of the pages being compared, either as served or
rendered in a headless browser with Playwright.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30
REQUEST_HEADERS = {
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
    'Cache-Control': 'no-cache',
}


class FetchError(Exception):
    """Raised when a page cannot be retrieved; aborts the comparison."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


def _clean_url(url: str) -> str:
    url = (url or '').strip()
    if not url:
        raise FetchError(url, 'URL is required')
    return url


def fetch_page(url: str, timeout: float = REQUEST_TIMEOUT) -> str:
    """Fetch the HTML served at ``url``. Any non-2xx status is a failure."""
    url = _clean_url(url)
    logger.info(f"Fetching page data from: {url}")
    try:
        response = requests.get(url, headers=REQUEST_HEADERS, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        logger.error(f"Error fetching page data from {url}: {str(e)}")
        raise FetchError(url, f"Request failed: {str(e)}") from e

    if not 200 <= response.status_code < 300:
        raise FetchError(
            url,
            f"HTTP {response.status_code}: {response.reason}",
            status_code=response.status_code
        )

    html = response.text
    logger.info(f"Successfully fetched HTML from {url}, length: {len(html)}")
    return html


def fetch_rendered_page(url: str, timeout: float = REQUEST_TIMEOUT) -> str:
    """Load ``url`` in headless Chromium and return the rendered HTML."""
    url = _clean_url(url)
    logger.info(f"Rendering page with Playwright: {url}")
    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True)
            try:
                page = browser.new_page(extra_http_headers={'Accept-Language': REQUEST_HEADERS['Accept-Language']})
                response = page.goto(url, wait_until='networkidle', timeout=timeout * 1000)
                if response is not None and not response.ok:
                    raise FetchError(url, f"HTTP {response.status}: {response.status_text}", status_code=response.status)
                html = page.content()
            finally:
                browser.close()
    except PlaywrightError as e:
        logger.error(f"Error rendering {url}: {str(e)}")
        raise FetchError(url, f"Render failed: {str(e)}") from e

    logger.info(f"Successfully rendered {url}, length: {len(html)}")
    return html


class PageFetcher:
    """Fetches the pre-go-live and current pages, concurrently."""

    def __init__(self, timeout: float = REQUEST_TIMEOUT, render: bool = False):
        self.timeout = timeout
        self.render = render

    def fetch(self, url: str) -> str:
        if self.render:
            return fetch_rendered_page(url, timeout=self.timeout)
        return fetch_page(url, timeout=self.timeout)

    def fetch_pair(self, pre_go_live_url: str, current_url: str) -> Tuple[str, str]:
        """Fetch both pages; the first failure is raised once both have finished."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            pre_go_live_future = executor.submit(self.fetch, pre_go_live_url)
            current_future = executor.submit(self.fetch, current_url)
            return pre_go_live_future.result(), current_future.result()
