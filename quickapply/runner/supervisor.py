"""Retry / isolation supervisor - one platform's application loop"""

from playwright.sync_api import Error as PlaywrightError

from quickapply.debug.unresolved_collector import UnresolvedCollector
from quickapply.errors import (
    AlreadyHandled,
    BlockDetected,
    NotEligible,
    TransientStepFailure,
    ValidationStuck,
)
from quickapply.form_filler import FormFiller
from quickapply.models import BLOCKED_JOB_ID, AttemptRecord, Outcome, PlatformSummary
from quickapply.platforms.registry import get_adapter
from quickapply.runner.discovery import JobDiscovery
from quickapply.state.blocks import BlockLatch
from quickapply.state.machine import StepStateMachine
from quickapply.utils.logging import get_logger
from quickapply.utils.timing import Pacing

log = get_logger(__name__)

_SUMMARY_FIELD = {
    Outcome.SUBMITTED: "applied",
    Outcome.DRY_RUN: "applied",
    Outcome.ALREADY_APPLIED: "skipped",
    Outcome.SKIPPED: "skipped",
    Outcome.ERROR: "errors",
}


class PlatformRunner:
    """
    Applies to every discovered job of one platform, one at a time.

    Each job ends in exactly one ledger record. Transient failures are
    retried by requeueing the job at the back of the current batch, up to
    `options.max_retries` times; the retry counts live on this runner only.
    A detected block writes one `blocked` record and stops the platform.
    """

    def __init__(
        self,
        page,
        adapter,
        ledger,
        knowledge_base,
        options,
        pacing,
        run_id=None,
        collector=None,
        snapshots=None,
        machine=None,
    ):
        self.page = page
        self.adapter = adapter
        self.ledger = ledger
        self.options = options
        self.pacing = pacing
        self.run_id = run_id
        self.collector = collector or UnresolvedCollector(ledger, run_id)
        self.snapshots = snapshots
        self.machine = machine or StepStateMachine(
            adapter,
            FormFiller(knowledge_base, pacing, options.resume_path, self.collector),
            pacing,
            snapshots=snapshots,
            max_steps=options.max_steps,
        )
        self.retries = {}
        self.latch = BlockLatch()
        self.summary = PlatformSummary()

    def limit_reached(self):
        return self.latch.tripped or self.summary.applied >= self.options.max_applications

    def run(self, discovery=None):
        """Run the platform loop; only SetupFailure escapes, a lost listing ends it early"""
        self.adapter.open_listing(self.page)
        reason = self.adapter.block_reason(self.page)
        if reason:
            self._trip(reason)
            return self.summary

        discovery = discovery or JobDiscovery(self.page, self.adapter, self.pacing, stop=self.limit_reached)
        try:
            while not self.limit_reached():
                job = discovery.next_candidate()
                if job is None:
                    break
                self._process(job, discovery)
        except PlaywrightError as e:
            log.error("%s: listing lost - ending platform early: %s", self.adapter.name, e)

        log.info(
            "%s finished: %d applied, %d skipped, %d errors%s",
            self.adapter.name,
            self.summary.applied,
            self.summary.skipped,
            self.summary.errors,
            " (BLOCKED)" if self.summary.blocked else "",
        )
        return self.summary

    def _process(self, job, discovery):
        if self.ledger.has_applied(job.platform, job.job_id):
            log.debug("Already applied to %s - skipping", job.job_id)
            self._finish(job, Outcome.ALREADY_APPLIED, "recorded in ledger")
            return

        try:
            outcome = self.machine.run(self.page, job, self.options.dry_run)
        except BlockDetected as exc:
            self._trip(str(exc))
            return
        except AlreadyHandled as exc:
            self._finish(job, Outcome.ALREADY_APPLIED, str(exc))
            self._back_to_listing(discovery)
            return
        except NotEligible as exc:
            log.info("Skipping %s: %s", job.job_id, exc.reason)
            self._finish(job, Outcome.SKIPPED, exc.reason)
            self._back_to_listing(discovery)
            return
        except (ValidationStuck, TransientStepFailure, PlaywrightError) as exc:
            self._handle_failure(job, exc, discovery)
            return
        except Exception as exc:
            log.exception("Unexpected error on %s", job.job_id)
            self._handle_failure(job, exc, discovery)
            return

        self._finish(job, outcome)
        self.pacing.between_applications()
        self._back_to_listing(discovery)

    def _handle_failure(self, job, exc, discovery):
        log.warning("Attempt failed for %s: %s", job.job_id, exc)
        self._recover(discovery)

        reason = self.adapter.block_reason(self.page)
        if reason:
            self._trip(reason)
            return

        used = self.retries.get(job.job_id, 0)
        if not isinstance(exc, ValidationStuck) and used < self.options.max_retries:
            self.retries[job.job_id] = used + 1
            self.collector.discard()
            log.info("Retrying %s later (%d/%d)", job.job_id, used + 1, self.options.max_retries)
            discovery.requeue(job)
            return

        if self.snapshots is not None:
            self.snapshots.capture(self.page, job.platform, job.job_id)
        self._finish(job, Outcome.ERROR, str(exc) or type(exc).__name__)

    def _recover(self, discovery):
        try:
            self.adapter.dismiss(self.page)
        except PlaywrightError as e:
            log.debug("Dismiss during recovery failed: %s", e)
        self._back_to_listing(discovery)

    def _back_to_listing(self, discovery):
        try:
            self.adapter.return_to_listing(self.page, getattr(discovery, "listing_url", None))
        except PlaywrightError as e:
            log.warning("Could not return to listing: %s", e)

    def _finish(self, job, outcome, detail=""):
        if self.latch.tripped:
            log.warning("Platform blocked; not recording %s for %s", outcome.value, job.job_id)
            return
        self.ledger.record_attempt(AttemptRecord.for_job(job, outcome, self.run_id, detail))
        self.collector.flush()
        field = _SUMMARY_FIELD[outcome]
        setattr(self.summary, field, getattr(self.summary, field) + 1)

    def _trip(self, reason):
        if self.latch.tripped:
            return
        log.error("🛑 %s blocked (%s) - stopping platform for this run", self.adapter.name, reason)
        self.latch.trip(reason)
        self.collector.discard()
        self.summary.blocked = True
        self.ledger.record_attempt(
            AttemptRecord(
                platform=self.adapter.name,
                job_id=BLOCKED_JOB_ID,
                outcome=Outcome.BLOCKED.value,
                run_id=self.run_id,
                error_detail=reason,
            )
        )


def run_platform(
    session, knowledge_base, ledger, options, run_id=None, pacing=None, collector=None, snapshots=None, adapter=None
):
    """Apply on one platform with an open session; returns its PlatformSummary"""
    pacing = pacing or Pacing()
    adapter = adapter or get_adapter(session.platform, session.settings, pacing)
    runner = PlatformRunner(
        session.page,
        adapter,
        ledger,
        knowledge_base,
        options,
        pacing,
        run_id=run_id,
        collector=collector,
        snapshots=snapshots,
    )
    return runner.run()
