"""Checkbox detection"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.models import FieldDescriptor, FieldKind
from quickapply.perception.labels import control_visible, extract_label
from quickapply.utils.logging import get_logger

log = get_logger(__name__)

CHECKBOX_SELECTOR = 'input[type="checkbox"]'


def detect_checkboxes(surface):
    fields = []
    for element in surface.locator(CHECKBOX_SELECTOR).all():
        try:
            if element.is_disabled() or not control_visible(surface, element):
                continue
            label = extract_label(surface, element)
            fields.append(
                FieldDescriptor(
                    kind=FieldKind.CHECKBOX,
                    raw_label=label,
                    current_value="checked" if element.is_checked() else "",
                    element=element,
                )
            )
        except PlaywrightError as e:
            log.debug("Skipping unreadable checkbox: %s", e)
    return fields
