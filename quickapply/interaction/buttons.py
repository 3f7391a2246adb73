"""Button interactions"""

from dataclasses import dataclass
from typing import Any

from playwright.sync_api import Error as PlaywrightError

from quickapply.utils.logging import get_logger

log = get_logger(__name__)

SUBMIT = "submit"
CONTINUE = "continue"


@dataclass
class ActionButton:
    kind: str
    element: Any
    selector: str


def first_visible(surface, selector):
    """First visible match for a selector, or None"""
    matches = surface.locator(selector)
    for i in range(matches.count()):
        candidate = matches.nth(i)
        if candidate.is_visible():
            return candidate
    return None


def find_action_button(surface, submit_selectors, continue_selectors):
    """
    Button that advances the form. Submit-class buttons are always preferred
    over continue-class ones; disabled buttons are never returned.
    """
    for kind, selectors in ((SUBMIT, submit_selectors), (CONTINUE, continue_selectors)):
        for selector in selectors:
            button = first_visible(surface, selector)
            if button is None:
                continue
            if button.is_disabled():
                log.warning("'%s' button found but DISABLED - required fields are likely unfilled", selector)
                continue
            return ActionButton(kind, button, selector)
    return None


def click_first_visible(surface, selectors):
    """Click the first visible match among selectors; True if something was clicked"""
    for selector in selectors:
        try:
            button = first_visible(surface, selector)
            if button is not None:
                button.click()
                return True
        except PlaywrightError as e:
            log.debug("Click on %s failed: %s", selector, e)
    return False


def wait_for_any(page, selectors, timeout):
    """Wait until any selector is visible; False on timeout"""
    try:
        page.wait_for_selector(", ".join(selectors), state="visible", timeout=timeout)
        return True
    except PlaywrightError:
        return False
