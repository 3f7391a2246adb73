"""Label extraction - ranked, depth-bounded strategies; never raises"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.utils.logging import get_logger

log = get_logger(__name__)

ANCESTOR_MAX_DEPTH = 4
MAX_LABEL_LENGTH = 300

TAG_NAME_JS = "el => el.tagName"

WRAPPING_LABEL_JS = """el => {
    const label = el.closest('label');
    return label ? label.innerText : '';
}"""
WRAPPING_LABEL_SELECTOR = "xpath=ancestor::label[1]"

ANCESTOR_TEXT_JS = """(el, maxDepth) => {
    let p = el.parentElement;
    for (let i = 0; p && i < maxDepth; i++, p = p.parentElement) {
        const text = (p.innerText || '').trim();
        if (text.length >= 3) return text;
    }
    return '';
}"""


def clean_label(text):
    """First meaningful line of a label, whitespace-collapsed, required-marker stripped"""
    if not text:
        return ""
    for line in str(text).splitlines():
        line = ' '.join(line.split()).rstrip('*').strip()
        if line:
            return line[:MAX_LABEL_LENGTH]
    return ""


def _bound_label(surface, element):
    element_id = element.get_attribute("id")
    if element_id:
        label = surface.locator(f'label[for="{element_id}"]')
        if label.count() > 0:
            text = clean_label(label.first.inner_text())
            if text:
                return text
    return clean_label(element.evaluate(WRAPPING_LABEL_JS))


def _aria_label(surface, element):
    return clean_label(element.get_attribute("aria-label"))


def _labelled_by(surface, element):
    ids = (element.get_attribute("aria-labelledby") or "").split()
    parts = []
    for target_id in ids:
        target = surface.locator(f'[id="{target_id}"]')
        if target.count() > 0:
            parts.append(clean_label(target.first.inner_text()))
    return clean_label(" ".join(p for p in parts if p))


def _placeholder(surface, element):
    return clean_label(element.get_attribute("placeholder"))


def _name_attribute(surface, element):
    name = element.get_attribute("name") or ""
    return clean_label(name.replace("_", " ").replace("-", " "))


def _ancestor_text(surface, element):
    return clean_label(element.evaluate(ANCESTOR_TEXT_JS, ANCESTOR_MAX_DEPTH))


# Highest priority first
LABEL_STRATEGIES = (
    ("label", _bound_label),
    ("aria-label", _aria_label),
    ("aria-labelledby", _labelled_by),
    ("placeholder", _placeholder),
    ("name", _name_attribute),
    ("ancestor", _ancestor_text),
)


def extract_label(surface, element):
    """
    Human-readable label for a form control, or "" if none can be found.

    Strategies are tried in priority order; one that errors (detached node,
    cross-origin frame) is skipped rather than failing the field.
    """
    for name, strategy in LABEL_STRATEGIES:
        try:
            text = strategy(surface, element)
        except PlaywrightError as e:
            log.debug("Label strategy %s failed: %s", name, e)
            continue
        if text:
            return text
    return ""


def control_visible(surface, element):
    """Styled radios, checkboxes and uploads hide the input behind a visible <label>"""
    if element.is_visible():
        return True
    element_id = element.get_attribute("id")
    if element_id:
        label = surface.locator(f'label[for="{element_id}"]')
        if label.count() > 0 and label.first.is_visible():
            return True
    wrapper = element.locator(WRAPPING_LABEL_SELECTOR)
    return wrapper.count() > 0 and wrapper.first.is_visible()
