"""Select dropdown detection - native <select> and custom listbox widgets"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.models import FieldDescriptor, FieldKind
from quickapply.perception.labels import clean_label, extract_label
from quickapply.reasoning.normalize import is_placeholder_option
from quickapply.utils.logging import get_logger

log = get_logger(__name__)

NATIVE_SELECT_SELECTOR = "select"
CUSTOM_SELECT_SELECTOR = (
    '[role="combobox"]:not(input):not(select), '
    '[aria-haspopup="listbox"]:not(input):not(select)'
)
OPTION_SELECTOR = '[role="option"]'

SELECTED_OPTION_JS = """el => {
    const opt = el.selectedIndex >= 0 ? el.options[el.selectedIndex] : null;
    return opt ? [opt.text, opt.value] : ['', ''];
}"""


def _native_select(surface, element):
    option_texts = []
    for option in element.locator("option").all():
        option_texts.append(clean_label(option.inner_text()))

    selected_text, selected_value = element.evaluate(SELECTED_OPTION_JS)
    current = "" if is_placeholder_option(selected_text, selected_value) else selected_text.strip()

    return FieldDescriptor(
        kind=FieldKind.SELECT,
        raw_label=extract_label(surface, element),
        current_value=current,
        options=option_texts,
        element=element,
        widget="native",
    )


def custom_widget_options(surface, element):
    """Option texts of a custom listbox if it is already in the DOM"""
    listbox_id = element.get_attribute("aria-controls") or element.get_attribute("aria-owns")
    if not listbox_id:
        return []
    options = surface.locator(f'[id="{listbox_id}"] {OPTION_SELECTOR}')
    return [clean_label(o.inner_text()) for o in options.all()]


def _custom_select(surface, element):
    shown = clean_label(element.inner_text())
    current = "" if is_placeholder_option(shown) else shown
    return FieldDescriptor(
        kind=FieldKind.SELECT,
        raw_label=extract_label(surface, element),
        current_value=current,
        options=custom_widget_options(surface, element),
        element=element,
        widget="custom",
    )


def detect_select_fields(surface):
    """Visible, enabled dropdowns on the current step"""
    fields = []
    for selector, build in (
        (NATIVE_SELECT_SELECTOR, _native_select),
        (CUSTOM_SELECT_SELECTOR, _custom_select),
    ):
        for element in surface.locator(selector).all():
            try:
                if not element.is_visible() or element.is_disabled():
                    continue
                fields.append(build(surface, element))
            except PlaywrightError as e:
                log.debug("Skipping unreadable select: %s", e)
    return fields
