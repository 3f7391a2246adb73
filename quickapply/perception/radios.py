"""Radio button detection"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.models import FieldDescriptor, FieldKind
from quickapply.perception.labels import WRAPPING_LABEL_JS, clean_label, control_visible
from quickapply.utils.logging import get_logger

log = get_logger(__name__)

RADIO_SELECTOR = 'input[type="radio"]'

# fieldset/legend first, then the nearest ancestor (max 6 levels) that holds
# more than one radio and some text of its own
QUESTION_TEXT_JS = """el => {
    const fieldset = el.closest('fieldset');
    if (fieldset) {
        const legend = fieldset.querySelector('legend');
        if (legend && legend.innerText.trim()) return legend.innerText;
    }
    let p = el.parentElement;
    for (let i = 0; p && i < 6; i++, p = p.parentElement) {
        if (p.querySelectorAll('input[type="radio"]').length < 2) continue;
        const heading = p.querySelector('legend, [role="heading"], h1, h2, h3, h4, span[aria-hidden="true"], label:not([for])');
        if (heading && heading.innerText.trim()) return heading.innerText;
        const text = (p.innerText || '').trim();
        if (text) return text;
    }
    return '';
}"""


def _option_label(surface, radio):
    radio_id = radio.get_attribute("id")
    if radio_id:
        label = surface.locator(f'label[for="{radio_id}"]')
        if label.count() > 0:
            text = clean_label(label.first.inner_text())
            if text:
                return text
    for text in (
        radio.evaluate(WRAPPING_LABEL_JS),
        radio.get_attribute("aria-label"),
        radio.get_attribute("value"),
    ):
        text = clean_label(text)
        if text:
            return text
    return ""


def detect_radio_groups(surface):
    """
    Radio groups on the current step, one FieldDescriptor per group.

    Grouped by the shared `name` attribute; unnamed radios are grouped by
    their question container text.
    """
    groups = {}
    order = []
    for radio in surface.locator(RADIO_SELECTOR).all():
        try:
            if radio.is_disabled():
                continue
            question = clean_label(radio.evaluate(QUESTION_TEXT_JS))
            key = radio.get_attribute("name") or f"q:{question}"
            if key not in groups:
                groups[key] = {"question": question, "radios": [], "labels": [], "checked": "", "visible": False}
                order.append(key)
            group = groups[key]
            label = _option_label(surface, radio) or f"Option {len(group['radios']) + 1}"
            group["radios"].append(radio)
            group["labels"].append(label)
            group["visible"] = group["visible"] or control_visible(surface, radio)
            if radio.is_checked():
                group["checked"] = label
        except PlaywrightError as e:
            log.debug("Skipping unreadable radio: %s", e)

    fields = []
    for key in order:
        group = groups[key]
        if not group["visible"]:
            continue
        fields.append(
            FieldDescriptor(
                kind=FieldKind.RADIO_GROUP,
                raw_label=group["question"],
                current_value=group["checked"],
                options=group["labels"],
                element=group["radios"][0],
                members=group["radios"],
            )
        )
    return fields
