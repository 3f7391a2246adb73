"""
Unmatched field collector

Buffers UnmatchedFieldEvents for the job in progress and writes them out
once the job reaches a terminal outcome. Events of an attempt that is going
to be retried are discarded, so a retried job does not report the same
field twice.

Optional JSONL output (--debug-unresolved):
    debug_unresolved.jsonl - one JSON object per unmatched field
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from quickapply.models import UnmatchedFieldEvent
from quickapply.utils.logging import get_logger

log = get_logger(__name__)

DEBUG_UNRESOLVED_PATH = Path("debug_unresolved.jsonl")


class UnresolvedCollector:
    def __init__(self, ledger=None, run_id=None, jsonl_path: Optional[Path] = None):
        self.ledger = ledger
        self.run_id = run_id
        self.jsonl_path = jsonl_path
        self._buffer: List[UnmatchedFieldEvent] = []

    def __len__(self):
        return len(self._buffer)

    def record(self, *, platform: str, job_id: str, label: str, field_kind: str):
        """Buffer one unmatched field. Side-effect only."""
        self._buffer.append(
            UnmatchedFieldEvent(
                platform=platform,
                job_id=job_id,
                label=label,
                field_kind=field_kind,
                run_id=self.run_id,
            )
        )

    def discard(self):
        self._buffer.clear()

    def flush(self):
        """Persist buffered events; called on terminal job outcomes only"""
        if not self._buffer:
            return 0

        events, self._buffer = self._buffer, []
        if self.ledger is not None:
            for event in events:
                self.ledger.record_unmatched(event)

        if self.jsonl_path is not None:
            with open(self.jsonl_path, "a", encoding="utf-8") as f:
                for event in events:
                    f.write(json.dumps(asdict(event), ensure_ascii=False) + "\n")

        log.debug("Flushed %d unmatched field(s)", len(events))
        return len(events)
