"""File upload detection"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.models import FieldDescriptor, FieldKind
from quickapply.perception.labels import control_visible, extract_label
from quickapply.utils.logging import get_logger

log = get_logger(__name__)

FILE_INPUT_SELECTOR = 'input[type="file"]'


def detect_file_inputs(surface):
    fields = []
    for element in surface.locator(FILE_INPUT_SELECTOR).all():
        try:
            if element.is_disabled() or not control_visible(surface, element):
                continue
            fields.append(
                FieldDescriptor(
                    kind=FieldKind.FILE,
                    raw_label=extract_label(surface, element) or "resume",
                    current_value=element.input_value() or "",
                    element=element,
                )
            )
        except PlaywrightError as e:
            log.debug("Skipping unreadable file input: %s", e)
    return fields
