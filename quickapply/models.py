"""Data model shared by the engine, the ledger and the platform adapters"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from quickapply.reasoning.normalize import normalize_text


def utc_now():
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class Outcome(str, Enum):
    SUBMITTED = "submitted"
    ALREADY_APPLIED = "already_applied"
    DRY_RUN = "dry_run"
    SKIPPED = "skipped"
    ERROR = "error"
    BLOCKED = "blocked"


# Outcomes that make has_applied() true for a (platform, job_id) pair
APPLIED_OUTCOMES = frozenset(
    {Outcome.SUBMITTED.value, Outcome.ALREADY_APPLIED.value, Outcome.DRY_RUN.value}
)

# Job id written on the platform-level blocked record
BLOCKED_JOB_ID = "captcha_detected"


class FieldKind(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO_GROUP = "radio-group"
    CHECKBOX = "checkbox"
    FILE = "file"


@dataclass(frozen=True)
class JobDescriptor:
    platform: str
    job_id: str
    title: str = ""
    company: str = ""
    url: str = ""


@dataclass(frozen=True)
class AttemptRecord:
    platform: str
    job_id: str
    outcome: str
    run_id: Optional[str] = None
    job_title: str = ""
    company: str = ""
    job_url: str = ""
    error_detail: str = ""
    timestamp: str = field(default_factory=utc_now)
    attempt_id: Optional[int] = None

    @classmethod
    def for_job(cls, job, outcome, run_id=None, error_detail=""):
        return cls(
            platform=job.platform,
            job_id=job.job_id,
            outcome=Outcome(outcome).value,
            run_id=run_id,
            job_title=job.title,
            company=job.company,
            job_url=job.url,
            error_detail=error_detail,
        )


@dataclass
class RunRecord:
    run_id: str
    started_at: str
    completed_at: Optional[str] = None
    platform_summary: Optional[dict] = None


@dataclass(frozen=True)
class UnmatchedFieldEvent:
    platform: str
    job_id: str
    label: str
    field_kind: str
    run_id: Optional[str] = None
    timestamp: str = field(default_factory=utc_now)


@dataclass
class FieldDescriptor:
    """One interactive control on the current form step.

    `element` is the Playwright locator for the control (the first radio of a
    group); `members` holds the per-option radio locators aligned with
    `options`. Descriptors are rebuilt on every scan and never cached.
    """

    kind: FieldKind
    raw_label: str
    normalized_label: str = ""
    current_value: str = ""
    visible: bool = True
    options: List[str] = field(default_factory=list)
    element: Any = None
    members: List[Any] = field(default_factory=list)
    input_type: str = ""
    numeric: bool = False
    widget: str = "native"

    def __post_init__(self):
        if not self.normalized_label:
            self.normalized_label = normalize_text(self.raw_label)


@dataclass
class PlatformSummary:
    applied: int = 0
    skipped: int = 0
    errors: int = 0
    blocked: bool = False

    def to_dict(self):
        return asdict(self)


@dataclass
class RunOptions:
    dry_run: bool = False
    max_applications: int = 10
    max_retries: int = 2
    max_steps: Optional[int] = None
    resume_path: Optional[Path] = None
    screenshot_on_error: bool = True
