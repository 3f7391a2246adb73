"""Block / abort detection - challenge pages, interstitials and verification widgets"""

from dataclasses import dataclass

from playwright.sync_api import Error as PlaywrightError

from quickapply.utils.logging import get_logger

log = get_logger(__name__)

INTERSTITIAL_TEXTS = (
    "let's do a quick security check",
    "security check",
    "checking your browser",
    "just a moment",
    "unusual activity",
    "please verify you are a human",
    "verify you are human",
    "please verify",
    "ddos protection",
    "cf-browser-verification",
)

CHALLENGE_IFRAME_SELECTOR = ", ".join(
    [
        'iframe[src*="captcha"]',
        'iframe[src*="challenge"]',
        'iframe[src*="hcaptcha"]',
        'iframe[src*="turnstile"]',
        'iframe[title*="challenge" i]',
    ]
)

WIDGET_SELECTOR = ", ".join(
    [
        '.g-recaptcha:not([data-size="invisible"])',
        '.h-captcha:not([data-size="invisible"])',
        ".cf-turnstile",
        "#challenge-form",
        "#cf-challenge-running",
        "#captcha-internal",
    ]
)

# Passive scoring widgets that sit on ordinary pages
PASSIVE_IFRAME_MARKERS = ("size=invisible", "recaptcha/api2/aframe", "recaptcha/enterprise/aframe")

MAX_INTERSTITIAL_BODY_CHARS = 3000


def is_passive_iframe(src):
    src = (src or "").lower()
    return any(marker in src for marker in PASSIVE_IFRAME_MARKERS)


def find_interstitial_text(text, markers=INTERSTITIAL_TEXTS):
    """First blocking phrase contained in visible page text, or None"""
    lowered = (text or "").lower()
    for marker in markers:
        if marker in lowered:
            return marker
    return None


@dataclass
class BlockLatch:
    """Set once per platform per run; never cleared"""

    tripped: bool = False
    reason: str = ""

    def trip(self, reason):
        if not self.tripped:
            self.tripped = True
            self.reason = reason


class BlockDetector:
    """
    Decides whether a page is an anti-automation challenge.

    Only what a person would see counts: visible challenge iframes, blocking
    interstitial text in the rendered body, visible verification widgets.
    Invisible reCAPTCHA and similar passive widgets are ignored.
    """

    def __init__(self, markers=INTERSTITIAL_TEXTS, max_body_chars=MAX_INTERSTITIAL_BODY_CHARS):
        self.markers = markers
        self.max_body_chars = max_body_chars

    def detect(self, page):
        """Reason string if blocked, else None. Unreadable pages count as not blocked."""
        try:
            frames = page.locator(CHALLENGE_IFRAME_SELECTOR)
            for i in range(frames.count()):
                frame = frames.nth(i)
                src = frame.get_attribute("src") or ""
                if frame.is_visible() and not is_passive_iframe(src):
                    return f"challenge iframe ({src[:80]})"

            widgets = page.locator(WIDGET_SELECTOR)
            for i in range(widgets.count()):
                if widgets.nth(i).is_visible():
                    return "verification widget"

            body = page.locator("body")
            text = body.inner_text() if body.count() > 0 else ""
            # Interstitials are near-empty pages; long pages are real content
            marker = None
            if len(text) <= self.max_body_chars:
                marker = find_interstitial_text(text, self.markers)
            if marker:
                return f"interstitial: {marker}"
        except PlaywrightError as e:
            log.debug("Block check could not read page: %s", e)
        return None

    def is_blocked(self, page):
        return self.detect(page) is not None
