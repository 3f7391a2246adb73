"""Indeed Apply"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.errors import NotEligible
from quickapply.interaction.buttons import wait_for_any
from quickapply.models import JobDescriptor
from quickapply.perception.labels import clean_label
from quickapply.platforms.base import SELECTOR_TIMEOUT, PlatformAdapter, absolute_url, id_from_href
from quickapply.platforms.pagination import NumberedPages
from quickapply.utils.logging import get_logger

log = get_logger(__name__)


class IndeedAdapter(PlatformAdapter):
    """
    Cards carry the job key in data-jk; only cards with the "Easily apply"
    badge have an Indeed-hosted flow. The form may live in an iframe.
    """

    name = "indeed"
    domain = "indeed.com"
    base_url = "https://www.indeed.com"
    login_check_url = "https://www.indeed.com/account/view"
    expired_url_markers = ("/account/login", "/auth")

    listing_selectors = ("#mosaic-provider-jobcards", ".jobsearch-ResultsList")
    card_selector = "li:has([data-jk]), .job_seen_beacon, .slider_item"
    easy_apply_badge = '.easily-apply-badge, span:has-text("Easily apply"), [data-testid="attr-DSQF7"]'
    detail_selectors = ("#jobDetailPage", ".jobsearch-JobComponent", '[data-testid="job-detail"]')
    trigger_selectors = (
        '[data-testid="indeedApplyButton"]',
        'button:has-text("Apply now")',
        'a:has-text("Apply now")',
        'button:has-text("Easily apply")',
    )
    surface_selectors = (".ia-BasePage", '[data-testid="ia-page"]', ".indeed-apply-widget", 'iframe[id*="indeed-apply"]')
    apply_iframe = 'iframe[id*="indeed-apply"], iframe[src*="smartapply"]'
    submit_selectors = (
        'button:has-text("Submit your application")',
        'button:has-text("Submit application")',
    )
    continue_selectors = ('button:has-text("Continue")', 'button:has-text("Next")')
    already_applied_selectors = (':text("We noticed you already applied")',)
    done_selectors = ('button:has-text("Close")', 'button:has-text("OK")', '[data-testid="modal-close"]')
    confirmation_selectors = (
        ':text("Your application has been submitted")',
        ':text("application submitted")',
        '[data-testid="postApplyPage"]',
    )
    block_markers = ("unusual activity", "security check", "please verify", "verify you are human")

    max_steps = 8

    def make_pagination(self):
        return NumberedPages(('a[data-testid="pagination-page-next"]',))

    def describe_card(self, card):
        jk_holder = card.locator("[data-jk]")
        job_id = jk_holder.first.get_attribute("data-jk") if jk_holder.count() else card.get_attribute("data-jk")
        title = card.locator('.jobTitle a, h2 a, [data-testid="job-title"]')
        href = title.first.get_attribute("href") if title.count() else ""
        if not job_id:
            job_id = id_from_href(href, r"jk=([A-Za-z0-9]+)")
        if not job_id:
            return None
        company = card.locator('[data-testid="company-name"], .companyName')
        return JobDescriptor(
            platform=self.name,
            job_id=job_id,
            title=clean_label(title.first.inner_text()) if title.count() else "",
            company=clean_label(company.first.inner_text()) if company.count() else "",
            url=absolute_url(href, self.base_url) or f"{self.base_url}/viewjob?jk={job_id}",
        )

    def show_job(self, page, job):
        card = page.locator(f'[data-jk="{job.job_id}"]')
        if card.count() == 0:
            page.goto(job.url, wait_until="domcontentloaded")
            self.pacing.page_settle()
        else:
            container = page.locator(f'li:has([data-jk="{job.job_id}"])')
            scope = container.first if container.count() else card.first
            if scope.locator(self.easy_apply_badge).count() == 0:
                raise NotEligible("no_easy_apply_badge")
            card.first.click()
            self.pacing.page_settle()
        page.wait_for_selector(", ".join(self.detail_selectors), timeout=SELECTOR_TIMEOUT)

    def open_surface(self, page):
        if not wait_for_any(page, self.surface_selectors, SELECTOR_TIMEOUT):
            return None
        try:
            if page.locator(self.apply_iframe).count() > 0:
                return page.frame_locator(self.apply_iframe).first.locator("body")
        except PlaywrightError as e:
            log.debug("Apply iframe not reachable, using page: %s", e)
        return page.locator("body")
