"""Step state machine - drive one application from trigger to submit"""

from quickapply.debug.snapshots import DRY_RUN_KIND
from quickapply.errors import BlockDetected, TransientStepFailure, ValidationStuck
from quickapply.interaction.buttons import SUBMIT
from quickapply.models import Outcome
from quickapply.perception.scan import step_fingerprint
from quickapply.utils.logging import get_logger

log = get_logger(__name__)


class StepStateMachine:
    """
    Walks a multi-step application form.

    Each step: scan fields, refuse a step whose question set was already
    seen (a validation loop), fill, apply platform tweaks, then press the
    submit-class button if there is one, else the continue-class one.
    The loop never runs more than `max_steps` steps.
    """

    def __init__(self, adapter, filler, pacing, snapshots=None, max_steps=None):
        self.adapter = adapter
        self.filler = filler
        self.pacing = pacing
        self.snapshots = snapshots
        self.max_steps = max_steps or adapter.max_steps

    def run(self, page, job, dry_run=False):
        surface = self.adapter.open_job(page, job)
        reason = self.adapter.block_reason(page)
        if reason:
            raise BlockDetected(reason)
        return self.complete(page, surface, job, dry_run)

    def complete(self, page, surface, job, dry_run=False):
        seen = set()
        for step in range(1, self.max_steps + 1):
            self.pacing.step_settle()
            fields = self.filler.scan(surface)
            fingerprint = step_fingerprint(fields)
            # Question-less steps (review, resume picker) are left to the ceiling
            if fingerprint:
                if fingerprint in seen:
                    raise ValidationStuck("cycled", step)
                seen.add(fingerprint)

            result = self.filler.fill(surface, fields, job)
            self.adapter.micro_adjust(surface)
            log.info("Step %d: %d field(s) filled, %d unmatched", step, result.applied, len(result.unmatched))

            button = self.adapter.find_action(surface)
            if button is None:
                raise TransientStepFailure(f"no actionable button on step {step}")

            if button.kind == SUBMIT:
                return self._submit(page, job, button, dry_run)

            button.element.click()
            self.pacing.after_click()

        raise ValidationStuck("step ceiling", self.max_steps)

    def _submit(self, page, job, button, dry_run):
        if dry_run:
            if self.snapshots is not None:
                self.snapshots.capture(page, job.platform, job.job_id, kind=DRY_RUN_KIND)
            self.adapter.dismiss(page)
            log.info("[DRY RUN] Would submit %s - form dismissed", job.job_id)
            return Outcome.DRY_RUN

        button.element.click()
        if self.adapter.wait_for_confirmation(page):
            log.info("✓ Application submitted: %s", job.job_id)
        else:
            log.warning("No confirmation seen for %s; counting the submit click", job.job_id)
        self.adapter.close_confirmation(page)
        return Outcome.SUBMITTED
