"""Platform adapter interface shared by every job board"""

import re
from urllib.parse import urlparse

from playwright.sync_api import Error as PlaywrightError

from quickapply.errors import AlreadyHandled, NotEligible, SetupFailure, TransientStepFailure
from quickapply.interaction.buttons import click_first_visible, find_action_button, first_visible, wait_for_any
from quickapply.reasoning.normalize import normalize_text
from quickapply.state.blocks import BlockDetector
from quickapply.utils.logging import get_logger

log = get_logger(__name__)

SELECTOR_TIMEOUT = 10000
NAVIGATION_TIMEOUT = 30000
CONFIRMATION_TIMEOUT = 10000


def id_from_href(href, pattern):
    match = re.search(pattern, href or "")
    return match.group(1) if match else None


def absolute_url(href, base):
    if not href:
        return ""
    return href if href.startswith("http") else base.rstrip("/") + "/" + href.lstrip("/")


class PlatformAdapter:
    """
    Strategy for one job board: discovery, trigger, surface, block and
    confirmation detection. The step state machine and the field
    resolution engine only talk to a platform through this interface.

    Subclasses mostly fill in selectors; `describe_card` and `show_job`
    are the two required hooks.
    """

    name = ""
    domain = ""
    base_url = ""
    login_check_url = ""
    expired_url_markers = ("/login", "/signin")
    login_wall_selectors = ()

    listing_selectors = ()
    card_selector = ""
    trigger_selectors = ()
    surface_selectors = ('[role="dialog"]',)
    submit_selectors = ()
    continue_selectors = ()
    already_applied_selectors = ()
    not_eligible_selectors = ()
    dismiss_selectors = ('button[aria-label="Dismiss"]', 'button[aria-label="Close"]', 'button:has-text("Cancel")')
    discard_selectors = ('button:has-text("Discard")',)
    confirmation_selectors = ()
    done_selectors = ('button:has-text("Done")', 'button[aria-label="Dismiss"]', 'button:has-text("Not now")')
    block_markers = None

    max_steps = 10

    def __init__(self, settings, pacing, detector=None):
        self.settings = settings
        self.pacing = pacing
        self.detector = detector or (
            BlockDetector(self.block_markers) if self.block_markers else BlockDetector()
        )
        self.pagination = self.make_pagination()

    # ------------------------------------------------------------------
    # Listing / discovery
    # ------------------------------------------------------------------

    def make_pagination(self):
        raise NotImplementedError

    def search_url(self):
        return self.settings.search_url

    def open_listing(self, page):
        url = self.search_url()
        if not url:
            raise SetupFailure(f"{self.name}: no search URL configured")
        log.info("Navigating to %s search: %s", self.name, url)
        try:
            page.goto(url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT)
        except PlaywrightError as e:
            raise SetupFailure(f"{self.name}: listing page failed to load: {e}") from e
        self.pacing.page_settle()

    def wait_for_listing(self, page):
        return wait_for_any(page, self.listing_selectors, SELECTOR_TIMEOUT)

    def listing_cards(self, page):
        return page.locator(self.card_selector).all()

    def describe_card(self, card):
        """JobDescriptor for a listing card, or None when it has no stable id"""
        raise NotImplementedError

    def return_to_listing(self, page, listing_url):
        if listing_url and page.url != listing_url:
            page.goto(listing_url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT)
            self.pacing.page_settle()

    # ------------------------------------------------------------------
    # Trigger / surface
    # ------------------------------------------------------------------

    def show_job(self, page, job):
        """Bring the job's detail view on screen"""
        raise NotImplementedError

    def find_trigger(self, page):
        for selector in self.trigger_selectors:
            button = first_visible(page, selector)
            if button is not None:
                return button
        return None

    def left_platform(self, page):
        host = urlparse(page.url).hostname or ""
        return bool(self.domain) and not host.endswith(self.domain)

    def open_surface(self, page):
        """Wait for the application form; returns a locator-capable scope or None"""
        if not wait_for_any(page, self.surface_selectors, SELECTOR_TIMEOUT):
            return None
        return page.locator(", ".join(self.surface_selectors)).first

    def open_job(self, page, job):
        """
        Show the job, press its one-click apply trigger and return the form surface.

        Raises NotEligible for jobs without an in-platform flow and
        AlreadyHandled when the platform reports a previous application.
        """
        self.show_job(page, job)
        if self.left_platform(page):
            raise NotEligible("external_redirect")

        if self.not_eligible_selectors and first_visible(page, ", ".join(self.not_eligible_selectors)):
            raise NotEligible("incomplete_profile")

        trigger = self.find_trigger(page)
        if trigger is None:
            raise NotEligible("external_apply")
        if "applied" in normalize_text(trigger.inner_text()).split():
            raise AlreadyHandled("apply button reports a prior application")

        log.info("Opening application for %s at %s (%s)", job.title or "?", job.company or "?", job.job_id)
        trigger.click()
        self.pacing.after_click()

        if self.left_platform(page):
            raise NotEligible("external_redirect")

        surface = self.open_surface(page)
        if surface is None:
            raise TransientStepFailure("application form did not open")

        if self.already_applied_selectors and first_visible(page, ", ".join(self.already_applied_selectors)):
            click_first_visible(page, self.done_selectors)
            raise AlreadyHandled("application surface reports a prior application")
        return surface

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def micro_adjust(self, surface):
        """Platform-specific tweaks applied to each step after the fields are filled"""

    def find_action(self, surface):
        return find_action_button(surface, self.submit_selectors, self.continue_selectors)

    def wait_for_confirmation(self, page):
        return wait_for_any(page, self.confirmation_selectors, CONFIRMATION_TIMEOUT)

    def close_confirmation(self, page):
        self.pacing.after_click()
        click_first_visible(page, self.done_selectors)

    def dismiss(self, page):
        """Close an open application without submitting it"""
        if click_first_visible(page, self.dismiss_selectors):
            self.pacing.after_click()
            click_first_visible(page, self.discard_selectors)

    # ------------------------------------------------------------------
    # Health checks
    # ------------------------------------------------------------------

    def block_reason(self, page):
        return self.detector.detect(page)

    def is_logged_in(self, page):
        try:
            page.goto(self.login_check_url, wait_until="domcontentloaded", timeout=15000)
            self.pacing.page_settle()
        except PlaywrightError as e:
            log.warning("%s login check failed: %s", self.name, e)
            return False
        url = page.url.lower()
        if any(marker in url for marker in self.expired_url_markers):
            return False
        if self.login_wall_selectors and page.locator(", ".join(self.login_wall_selectors)).count() > 0:
            return False
        return True
