"""LinkedIn Easy Apply"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.interaction.buttons import first_visible
from quickapply.interaction.controls import uncheck_control
from quickapply.models import JobDescriptor
from quickapply.perception.labels import clean_label
from quickapply.platforms.base import PlatformAdapter, id_from_href
from quickapply.platforms.pagination import LoadMoreButton
from quickapply.utils.logging import get_logger

log = get_logger(__name__)


class LinkedInAdapter(PlatformAdapter):
    """
    Split-view search results (pre-filtered with f_AL=true) and a multi-step
    modal: Next ... Review ... Submit application.
    """

    name = "linkedin"
    domain = "linkedin.com"
    base_url = "https://www.linkedin.com"
    login_check_url = "https://www.linkedin.com/feed/"
    expired_url_markers = ("/login", "/checkpoint", "/authwall")

    listing_selectors = (".jobs-search-results-list", ".scaffold-layout__list")
    card_selector = ".job-card-container, .jobs-search-results__list-item"
    detail_selectors = (".jobs-details__main-content", ".job-view-layout")
    trigger_selectors = (
        'button.jobs-apply-button[aria-label*="Easy Apply"]',
        'button:has-text("Easy Apply")',
    )
    surface_selectors = (".jobs-easy-apply-modal", "[data-test-modal]", ".artdeco-modal", '[role="dialog"]')
    submit_selectors = (
        'button[aria-label="Submit application"]',
        'button:has-text("Submit application")',
    )
    continue_selectors = (
        'button[aria-label="Review your application"]',
        'button:has-text("Review")',
        'button[aria-label="Continue to next step"]',
        'button:has-text("Next")',
        'button:has-text("Continue")',
    )
    already_applied_selectors = (':text("Your application was sent")',)
    dismiss_selectors = (
        'button[aria-label="Dismiss"]',
        'button[aria-label="Cancel"]',
        ".jobs-easy-apply-modal__dismiss",
    )
    discard_selectors = (
        'button:has-text("Discard")',
        'button[data-control-name="discard_application"]',
    )
    confirmation_selectors = (
        ':text("Application submitted")',
        ':text("Your application was sent")',
        ".artdeco-toast-item--success",
    )
    use_last_resume_selectors = ('button:has-text("Use last resume")', "[data-test-resume-option]")
    selected_resume_selectors = (
        ".jobs-document-upload-redesign-card__container--selected",
        '[data-test-resume-option][aria-checked="true"]',
        '[data-test-resume-option][aria-selected="true"]',
    )
    follow_company_selectors = (
        'input[type="checkbox"][id*="follow"]',
        'label:has-text("Follow") input[type="checkbox"]',
    )

    max_steps = 10

    def make_pagination(self):
        return LoadMoreButton(
            ('button:has-text("See more jobs")', 'button[aria-label*="See more jobs"]'),
            scroll_container=".jobs-search-results-list",
        )

    def describe_card(self, card):
        job_id = card.get_attribute("data-job-id")
        if not job_id:
            link = card.locator('a[href*="/jobs/view/"]')
            if link.count() > 0:
                job_id = id_from_href(link.first.get_attribute("href"), r"/jobs/view/(\d+)")
        if not job_id:
            job_id = card.get_attribute("data-occludable-job-id")
        if not job_id:
            return None

        title = card.locator(".job-card-list__title, .job-card-container__link")
        company = card.locator(".job-card-container__company-name, .job-card-container__primary-description")
        return JobDescriptor(
            platform=self.name,
            job_id=job_id,
            title=clean_label(title.first.inner_text()) if title.count() else "",
            company=clean_label(company.first.inner_text()) if company.count() else "",
            url=f"{self.base_url}/jobs/view/{job_id}/",
        )

    def show_job(self, page, job):
        card = page.locator(f'[data-job-id="{job.job_id}"], [data-occludable-job-id="{job.job_id}"]')
        if card.count() > 0:
            card.first.click()
        else:
            page.goto(job.url, wait_until="domcontentloaded")
        self.pacing.page_settle()
        page.wait_for_selector(", ".join(self.detail_selectors), timeout=10000)

    def micro_adjust(self, surface):
        """Use the last resume when none is selected; never follow the company"""
        try:
            last_resume = None
            if first_visible(surface, ", ".join(self.selected_resume_selectors)) is None:
                last_resume = first_visible(surface, ", ".join(self.use_last_resume_selectors))
            if last_resume is not None:
                last_resume.click()
                self.pacing.after_click()

            follow = first_visible(surface, ", ".join(self.follow_company_selectors))
            if follow is not None and follow.is_checked():
                uncheck_control(follow)
                log.debug("Unchecked 'Follow company'")
        except PlaywrightError as e:
            log.debug("LinkedIn step adjustment skipped: %s", e)
