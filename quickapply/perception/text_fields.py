"""Text field detection"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.models import FieldDescriptor, FieldKind
from quickapply.perception.labels import TAG_NAME_JS, extract_label
from quickapply.utils.logging import get_logger

log = get_logger(__name__)

TEXT_FIELD_SELECTOR = ", ".join(
    [
        'input[type="text"]',
        'input[type="number"]',
        'input[type="tel"]',
        'input[type="email"]',
        'input[type="url"]',
        "input:not([type])",
        "textarea",
    ]
)


def is_numeric_input(element, input_type):
    """Number inputs, numeric inputmode, or the "-numeric" ids used by LinkedIn"""
    if input_type == "number":
        return True
    inputmode = (element.get_attribute("inputmode") or "").lower()
    if inputmode in ("numeric", "decimal"):
        return True
    return "numeric" in (element.get_attribute("id") or "").lower()


def detect_text_fields(surface):
    """Visible, enabled text inputs and textareas on the current step"""
    fields = []
    for element in surface.locator(TEXT_FIELD_SELECTOR).all():
        try:
            if not element.is_visible() or element.is_disabled():
                continue

            tag = (element.evaluate(TAG_NAME_JS) or "").lower()
            if tag == "textarea":
                kind, input_type = FieldKind.TEXTAREA, "textarea"
            else:
                kind = FieldKind.TEXT
                input_type = (element.get_attribute("type") or "text").lower()

            fields.append(
                FieldDescriptor(
                    kind=kind,
                    raw_label=extract_label(surface, element),
                    current_value=(element.input_value() or "").strip(),
                    element=element,
                    input_type=input_type,
                    numeric=is_numeric_input(element, input_type),
                )
            )
        except PlaywrightError as e:
            log.debug("Skipping unreadable text field: %s", e)
    return fields
