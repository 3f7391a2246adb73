"""Browser session management"""

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from quickapply.utils.logging import get_logger

log = get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--disable-infobars",
]

HIDE_WEBDRIVER_JS = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
"""


@dataclass
class PlatformSession:
    platform: str
    settings: Any
    context: Any
    page: Any


def profile_dir(browser_data_dir, platform):
    """One persistent browser profile per platform so logins survive between runs"""
    path = Path(browser_data_dir) / platform
    path.mkdir(parents=True, exist_ok=True)
    return path


def launch_context(playwright, user_data_dir, headless=True):
    """
    Launch persistent browser context and return (context, page).
    Reuses login session across runs.
    """
    context = playwright.chromium.launch_persistent_context(
        user_data_dir=str(user_data_dir),
        headless=headless,
        args=BROWSER_ARGS,
        ignore_default_args=["--enable-automation"],
        user_agent=USER_AGENT,
        viewport={"width": 1280, "height": 800},
        locale="en-US",
    )
    context.add_init_script(HIDE_WEBDRIVER_JS)
    page = context.pages[0] if context.pages else context.new_page()
    return context, page


@contextmanager
def platform_session(platform_settings, browser_data_dir, headless=True):
    """Open a session for one platform; the context is closed on every exit path"""
    log.info("Launching browser for %s (headless=%s)...", platform_settings.name, headless)
    with sync_playwright() as p:
        context, page = launch_context(p, profile_dir(browser_data_dir, platform_settings.name), headless)
        try:
            yield PlatformSession(platform_settings.name, platform_settings, context, page)
        finally:
            try:
                context.close()
            except PlaywrightError as e:
                log.warning("Closing %s browser failed: %s", platform_settings.name, e)
