"""Checkbox, radio and file-input interactions"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.utils.logging import get_logger

log = get_logger(__name__)

CHECK_TIMEOUT_MS = 3000

DOM_CLICK_JS = "el => el.click()"


def check_control(surface, element):
    """
    Check a checkbox or radio input.

    Styled controls often hide the <input>; fall back to clicking its bound
    label, then to a DOM-level click.
    """
    try:
        element.check(timeout=CHECK_TIMEOUT_MS)
        return True
    except PlaywrightError as e:
        log.debug("Direct check failed, trying label: %s", e)

    element_id = element.get_attribute("id")
    if element_id:
        label = surface.locator(f'label[for="{element_id}"]')
        if label.count() > 0:
            try:
                label.first.click(timeout=CHECK_TIMEOUT_MS)
                if element.is_checked():
                    return True
            except PlaywrightError as e:
                log.debug("Label click failed: %s", e)

    element.evaluate(DOM_CLICK_JS)
    return element.is_checked()


def uncheck_control(element):
    if element.is_checked():
        element.click()
    return not element.is_checked()


def attach_file(element, path):
    element.set_input_files(str(path))
