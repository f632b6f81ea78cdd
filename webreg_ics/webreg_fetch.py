"""
Fetch the WebReg list view via Selenium browser automation.

Workflow:
1. Open Chrome at WebReg → user logs in (SSO + Duo) and picks a term
2. User switches to the list view and presses Enter in the terminal
3. Script waits for #list-id-table and returns the page HTML
"""
from __future__ import annotations

from selenium import webdriver
from selenium.common.exceptions import TimeoutException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from .webreg_html import TABLE_ID

WEBREG_URL = "https://act.ucsd.edu/webreg2/start"


def _create_driver() -> webdriver.Chrome:
    """Start a visible Chrome window wide enough for the WebReg list view."""
    options = Options()
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--window-size=1440,900")
    try:
        service = Service(ChromeDriverManager().install())
        return webdriver.Chrome(service=service, options=options)
    except Exception as e:
        raise RuntimeError(
            "Could not start Chrome to open WebReg. Install Chrome, or save the "
            "list view from your own browser and pass it with --webreg-html.\n"
            f"Error: {e}"
        ) from e


def _wait_for_list_table(driver: webdriver.Chrome, timeout: int = 30) -> bool:
    """Wait for the #list-id-table table to appear."""
    try:
        WebDriverWait(driver, timeout).until(
            EC.presence_of_element_located((By.ID, TABLE_ID))
        )
        return True
    except TimeoutException:
        return False


def fetch_webreg_html(url: str = WEBREG_URL, timeout: int = 30) -> str:
    """
    Open Chrome, let the user log in and open the list view, then return
    the page HTML for parse_webreg_html().
    """
    driver = _create_driver()

    try:
        print("Opening Chrome…")
        driver.get(url)

        print()
        print("In the browser:")
        print("  1. Log in to WebReg")
        print("  2. Select the term")
        print("  3. Stay in (or switch to) the List view of your classes")
        print()
        input("Press Enter once the list of classes is visible → ")

        if not _wait_for_list_table(driver, timeout):
            print("\nClass list not found. Make sure the List view is showing.")
            input("Press Enter to retry → ")
            if not _wait_for_list_table(driver, timeout):
                raise RuntimeError(
                    f"Could not find the #{TABLE_ID} table. "
                    "Open the List view of your classes and try again."
                )

        return driver.page_source
    finally:
        driver.quit()
