"""Dice Easy Apply"""

from urllib.parse import quote_plus

from quickapply.errors import NotEligible
from quickapply.interaction.buttons import wait_for_any
from quickapply.models import JobDescriptor
from quickapply.perception.labels import clean_label
from quickapply.platforms.base import NAVIGATION_TIMEOUT, SELECTOR_TIMEOUT, PlatformAdapter, absolute_url, id_from_href
from quickapply.platforms.pagination import NumberedPages


class DiceAdapter(PlatformAdapter):
    """React search results; each job opens a full detail page with a single-screen modal."""

    name = "dice"
    domain = "dice.com"
    base_url = "https://www.dice.com"
    login_check_url = "https://www.dice.com/dashboard"

    listing_selectors = ("dhi-search-cards-widget", ".search-result-job-card", '[data-cy="search-card"]')
    card_selector = '.search-result-job-card, [data-cy="search-card"], dhi-search-card'
    trigger_selectors = (
        'button:has-text("Easy Apply")',
        '[data-cy="apply-button-top"]',
        '[data-testid="easy-apply-button"]',
    )
    not_eligible_selectors = (':text-is("Complete your profile")', ':text("complete your profile")')
    surface_selectors = (".apply-modal", '[data-testid="apply-modal"]', ".easy-apply-modal", "dialog[open]", '[role="dialog"]')
    submit_selectors = ('button:has-text("Submit")', '[data-testid="submit-apply"]', 'button:has-text("Apply")')
    continue_selectors = ('button:has-text("Next")', 'button:has-text("Continue")')
    dismiss_selectors = ('button[aria-label="Close"]', 'button:has-text("Cancel")', '[data-testid="close-modal"]')
    confirmation_selectors = (
        ':text("Application Submitted")',
        ':text("Successfully applied")',
        ':text("application submitted")',
    )
    block_markers = ("checking your browser", "just a moment", "ddos protection", "cf-browser-verification")

    max_steps = 8

    def make_pagination(self):
        return NumberedPages(
            ('a[aria-label="Go to next page"]', 'button[aria-label="Next page"]', ".pagination-next"),
        )

    def search_url(self):
        if self.settings.search_url:
            return self.settings.search_url
        keywords = " OR ".join(self.settings.keywords or ["data scientist"])
        location = self.settings.location or "United States"
        return (
            f"{self.base_url}/jobs?q={quote_plus(keywords)}"
            f"&location={quote_plus(location)}&postedDate=SEVEN"
        )

    def describe_card(self, card):
        link = card.locator('a[href*="/job-detail/"]')
        href = link.first.get_attribute("href") if link.count() else ""
        job_id = id_from_href(href, r"/job-detail/([^?#/]+)")
        if not job_id:
            job_id = card.get_attribute("data-cy-job-id") or card.get_attribute("data-job-id") or card.get_attribute("id")
        if not job_id or not href:
            return None
        title = card.locator('[data-cy="card-title-link"], .job-title, h5')
        company = card.locator('[data-cy="employer-name"], .company-name')
        return JobDescriptor(
            platform=self.name,
            job_id=job_id,
            title=clean_label(title.first.inner_text()) if title.count() else "",
            company=clean_label(company.first.inner_text()) if company.count() else "",
            url=absolute_url(href, self.base_url),
        )

    def show_job(self, page, job):
        page.goto(job.url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT)
        self.pacing.page_settle()

    def open_surface(self, page):
        if wait_for_any(page, self.surface_selectors, SELECTOR_TIMEOUT):
            return page.locator(", ".join(self.surface_selectors)).first
        if self.left_platform(page):
            raise NotEligible("external_redirect")
        return None
