"""Listing pagination strategies"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.interaction.buttons import first_visible
from quickapply.utils.logging import get_logger

log = get_logger(__name__)

SCROLL_WINDOW_JS = "() => window.scrollTo(0, document.body.scrollHeight)"
SCROLL_ELEMENT_JS = "el => el.scrollTo(0, el.scrollHeight)"


class NumberedPages:
    """Click the link for the next page number (or a generic "next" control)"""

    def __init__(self, next_selectors, page_link_template='a[aria-label="Page {n}"]'):
        self.next_selectors = tuple(next_selectors)
        self.page_link_template = page_link_template
        self.current = 1

    def advance(self, page, pacing):
        selectors = (self.page_link_template.format(n=self.current + 1),) + self.next_selectors
        for selector in selectors:
            link = first_visible(page, selector)
            if link is not None:
                link.click()
                self.current += 1
                pacing.page_settle()
                log.info("Moved to listing page %d", self.current)
                return True
        return False


class LoadMoreButton:
    """Click a "show more" button; scroll the results list when there is none"""

    def __init__(self, button_selectors, scroll_container=None):
        self.button_selectors = tuple(button_selectors)
        self.scroll_container = scroll_container

    def advance(self, page, pacing):
        for selector in self.button_selectors:
            button = first_visible(page, selector)
            if button is not None:
                button.click()
                pacing.page_settle()
                return True
        if self.scroll_container:
            return ScrollToLoad(self.scroll_container).advance(page, pacing)
        return False


class ScrollToLoad:
    """Scroll to the bottom to trigger infinite loading; end is decided by the caller"""

    def __init__(self, container=None):
        self.container = container

    def advance(self, page, pacing):
        try:
            if self.container:
                container = page.locator(self.container)
                if container.count() == 0:
                    return False
                container.first.evaluate(SCROLL_ELEMENT_JS)
            else:
                page.evaluate(SCROLL_WINDOW_JS)
        except PlaywrightError as e:
            log.debug("Scroll failed: %s", e)
            return False
        pacing.page_settle()
        return True
