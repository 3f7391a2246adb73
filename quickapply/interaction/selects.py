"""Dropdown interactions - native select, programmatic value, click-open"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.perception.labels import clean_label
from quickapply.perception.selects import OPTION_SELECTOR
from quickapply.utils.logging import get_logger

log = get_logger(__name__)

SET_SELECT_INDEX_JS = """(el, index) => {
    if (el.tagName !== 'SELECT' || index < 0 || index >= el.options.length) return false;
    el.selectedIndex = index;
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
    return el.selectedIndex === index;
}"""


def _native_select(surface, field, index, pacing):
    if field.widget != "native":
        return False
    field.element.select_option(index=index)
    return True


def _programmatic_value(surface, field, index, pacing):
    if field.widget != "native":
        return False
    return bool(field.element.evaluate(SET_SELECT_INDEX_JS, index))


def _click_open(surface, field, index, pacing):
    field.element.click()
    pacing.dropdown_open()
    option = surface.locator(OPTION_SELECTOR).filter(has_text=field.options[index])
    if option.count() == 0:
        field.element.press("Escape")
        return False
    option.first.click()
    pacing.after_click()
    return True


# First mechanism that succeeds wins
SELECT_MECHANISMS = (
    ("native", _native_select),
    ("programmatic", _programmatic_value),
    ("click", _click_open),
)


def choose_option(surface, field, index, pacing):
    """Select option `index`; returns the mechanism that worked, or None"""
    for name, mechanism in SELECT_MECHANISMS:
        try:
            if mechanism(surface, field, index, pacing):
                log.debug("Selected %r via %s", field.options[index], name)
                return name
        except PlaywrightError as e:
            log.debug("Select mechanism %s failed for %r: %s", name, field.raw_label, e)
    return None


def load_custom_options(surface, field, pacing):
    """Open a custom dropdown to read its options, then close it again"""
    field.element.click()
    pacing.dropdown_open()
    field.options = [clean_label(o.inner_text()) for o in surface.locator(OPTION_SELECTOR).all()]
    field.element.press("Escape")
    return field.options
