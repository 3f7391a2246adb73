"""Diagnostic screenshots for failed and dry-run applications"""

import re
from datetime import date
from pathlib import Path

from playwright.sync_api import Error as PlaywrightError

from quickapply.utils.logging import get_logger

log = get_logger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9]")

DRY_RUN_KIND = "dryrun"


def snapshot_path(directory, platform, job_id, day=None, kind=None):
    """<dir>/<YYYY-MM-DD>-<platform>-[<kind>-]<job id>.png; same job, kind and day overwrites"""
    day = day or date.today()
    safe_id = _UNSAFE.sub("_", job_id or "unknown")
    if kind:
        safe_id = f"{kind}-{safe_id}"
    return Path(directory) / f"{day.isoformat()}-{platform}-{safe_id}.png"


class SnapshotTaker:
    """Best-effort page screenshots; a failed capture never affects the run"""

    def __init__(self, directory, enabled=True):
        self.directory = Path(directory)
        self.enabled = enabled

    def capture(self, page, platform, job_id, kind=None):
        if not self.enabled:
            return None
        path = snapshot_path(self.directory, platform, job_id, kind=kind)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            page.screenshot(path=str(path), full_page=False)
        except (PlaywrightError, OSError) as e:
            log.warning("Snapshot failed for %s/%s: %s", platform, job_id, e)
            return None
        log.info("Snapshot saved: %s", path)
        return path
