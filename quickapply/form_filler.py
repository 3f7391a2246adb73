"""Field resolution engine - fill one form step from the answer knowledge base"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from playwright.sync_api import Error as PlaywrightError

from quickapply.interaction.controls import attach_file, check_control
from quickapply.interaction.keyboard import type_humanized
from quickapply.interaction.selects import choose_option, load_custom_options
from quickapply.models import FieldKind
from quickapply.perception.scan import scan_fields
from quickapply.reasoning.resolve_checkbox import is_consent_label
from quickapply.reasoning.resolve_radio import resolve_radio_choice
from quickapply.reasoning.resolve_select import resolve_select_choice
from quickapply.reasoning.resolve_text import resolve_text_answer
from quickapply.utils.logging import get_logger

log = get_logger(__name__)

UNLABELED = "(unlabeled)"


@dataclass
class FillResult:
    applied: int = 0
    unmatched: List[Tuple[str, str]] = field(default_factory=list)


class FormFiller:
    """
    Resolves and fills every field of a form step.

    Fields that already hold a value are left alone. A field that cannot be
    resolved is reported through the collector and left as is; a field whose
    interaction fails is logged and skipped. Nothing raised by a single field
    escapes `fill`.
    """

    def __init__(self, knowledge_base, pacing, resume_path=None, collector=None):
        self.knowledge_base = knowledge_base
        self.pacing = pacing
        self.resume_path = Path(resume_path) if resume_path else None
        self.collector = collector

    def scan(self, surface):
        return scan_fields(surface)

    def fill(self, surface, fields, job):
        result = FillResult()
        handlers = {
            FieldKind.TEXT: self._fill_text,
            FieldKind.TEXTAREA: self._fill_text,
            FieldKind.SELECT: self._fill_select,
            FieldKind.RADIO_GROUP: self._fill_radio,
            FieldKind.CHECKBOX: self._fill_checkbox,
            FieldKind.FILE: self._fill_file,
        }
        for descriptor in fields:
            if not descriptor.visible:
                continue
            try:
                applied = handlers[descriptor.kind](surface, descriptor, job, result)
            except PlaywrightError as e:
                log.warning("  ⚠️ Could not fill %s %r: %s", descriptor.kind.value, descriptor.raw_label, e)
                continue
            except Exception:
                log.exception("  ⚠️ Unexpected error filling %s %r", descriptor.kind.value, descriptor.raw_label)
                continue
            if applied:
                result.applied += 1
                self.pacing.between_fields()
        log.debug("Filled %d field(s), %d unmatched", result.applied, len(result.unmatched))
        return result

    def _unmatched(self, descriptor, job, result):
        label = descriptor.raw_label or UNLABELED
        result.unmatched.append((label, descriptor.kind.value))
        if self.collector is not None:
            self.collector.record(
                platform=job.platform,
                job_id=job.job_id,
                label=label,
                field_kind=descriptor.kind.value,
            )

    def _fill_text(self, surface, descriptor, job, result):
        if descriptor.current_value:
            return False
        value = resolve_text_answer(descriptor, self.knowledge_base)
        if value is None:
            log.info("  ❓ No answer for %r", descriptor.raw_label)
            self._unmatched(descriptor, job, result)
            return False
        type_humanized(descriptor.element, value, self.pacing)
        log.info("  ✓ Filled %r", descriptor.raw_label)
        return True

    def _fill_select(self, surface, descriptor, job, result):
        if descriptor.current_value:
            return False
        if descriptor.widget == "custom" and not descriptor.options:
            load_custom_options(surface, descriptor, self.pacing)
        choice = resolve_select_choice(descriptor, self.knowledge_base)
        if not choice.matched:
            self._unmatched(descriptor, job, result)
        if choice.index is None:
            return False
        mechanism = choose_option(surface, descriptor, choice.index, self.pacing)
        if mechanism is None:
            log.warning("  ⚠️ No select mechanism worked for %r", descriptor.raw_label)
            return False
        log.info(
            "  ✓ Selected %r for %r%s",
            descriptor.options[choice.index],
            descriptor.raw_label,
            "" if choice.matched else " (default)",
        )
        return True

    def _fill_radio(self, surface, descriptor, job, result):
        if descriptor.current_value:
            return False
        choice = resolve_radio_choice(descriptor, self.knowledge_base)
        if not choice.matched:
            self._unmatched(descriptor, job, result)
        if choice.index is None:
            return False
        if not check_control(surface, descriptor.members[choice.index]):
            log.warning("  ⚠️ Radio %r did not stick for %r", descriptor.options[choice.index], descriptor.raw_label)
            return False
        log.info(
            "  ✓ Chose %r for %r%s",
            descriptor.options[choice.index],
            descriptor.raw_label,
            "" if choice.matched else " (default)",
        )
        return True

    def _fill_checkbox(self, surface, descriptor, job, result):
        if descriptor.current_value or not is_consent_label(descriptor.raw_label):
            return False
        if check_control(surface, descriptor.element):
            log.info("  ✓ Checked %r", descriptor.raw_label)
            return True
        return False

    def _fill_file(self, surface, descriptor, job, result):
        if descriptor.current_value:
            return False
        if self.resume_path is None or not self.resume_path.is_file():
            log.warning("  ⚠️ Resume file not found (%s) - upload skipped", self.resume_path)
            return False
        attach_file(descriptor.element, self.resume_path)
        log.info("  ✓ Attached %s", self.resume_path.name)
        return True
