"""Jobright Quick Apply"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.models import JobDescriptor
from quickapply.perception.labels import clean_label
from quickapply.platforms.base import PlatformAdapter, absolute_url, id_from_href
from quickapply.platforms.pagination import ScrollToLoad


class JobrightAdapter(PlatformAdapter):
    """Infinite-scroll job feed; sessions expire quickly and show a login modal."""

    name = "jobright"
    domain = "jobright.ai"
    base_url = "https://jobright.ai"
    login_check_url = "https://jobright.ai/jobs"
    login_wall_selectors = (".login-modal", '[data-testid="login-modal"]', '[class*="loginModal"]')

    listing_selectors = ('[data-testid="job-card"]', ".job-card", '[class*="JobCard"]', ".job-list-item")
    card_selector = '[data-testid="job-card"], .job-card, [class*="JobCard"], .job-list-item'
    trigger_selectors = (
        'button:has-text("Quick Apply")',
        '[data-testid="apply-button"]',
        '[class*="applyButton"]',
        'button:has-text("Apply")',
    )
    surface_selectors = ('[data-testid="apply-form"]', ".apply-form", '[class*="applyForm"]', '[role="dialog"]')
    submit_selectors = (
        'button:has-text("Submit Application")',
        'button:has-text("Submit")',
        'button:has-text("Apply Now")',
        '[data-testid="submit-button"]',
    )
    continue_selectors = ('button:has-text("Next")', 'button:has-text("Continue")')
    dismiss_selectors = ('button[aria-label="Close"]', 'button:has-text("Cancel")')
    confirmation_selectors = (
        ':text("Application submitted")',
        ':text("Successfully applied")',
        '[data-testid="success"]',
    )
    block_markers = ("checking your browser", "just a moment", "security check", "cf-browser-verification")

    max_steps = 8

    def make_pagination(self):
        return ScrollToLoad()

    def describe_card(self, card):
        job_id = card.get_attribute("data-job-id") or card.get_attribute("data-id") or card.get_attribute("id")
        link = card.locator('a[href*="/job/"]')
        href = link.first.get_attribute("href") if link.count() else ""
        if not job_id or job_id == "undefined":
            job_id = id_from_href(href, r"/job/([^?#/]+)")
        if not job_id:
            return None
        title = card.locator('[class*="jobTitle"], [data-testid="job-title"], h3, h2')
        company = card.locator('[class*="companyName"], [data-testid="company-name"]')
        return JobDescriptor(
            platform=self.name,
            job_id=job_id,
            title=clean_label(title.first.inner_text()) if title.count() else "",
            company=clean_label(company.first.inner_text()) if company.count() else "",
            url=absolute_url(href, self.base_url),
        )

    def show_job(self, page, job):
        card = page.locator(f'[data-job-id="{job.job_id}"], [data-id="{job.job_id}"], [id="{job.job_id}"]')
        if card.count() > 0:
            card.first.click()
        elif job.url:
            page.goto(job.url, wait_until="domcontentloaded")
        self.pacing.page_settle()

    def return_to_listing(self, page, listing_url):
        if listing_url and page.url != listing_url:
            try:
                page.go_back(wait_until="domcontentloaded")
            except PlaywrightError:
                page.goto(listing_url, wait_until="domcontentloaded")
            self.pacing.page_settle()
