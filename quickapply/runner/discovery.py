"""Job discovery iterator - lazy, deduplicating walk over a platform's listing"""

from collections import deque

from playwright.sync_api import Error as PlaywrightError

from quickapply.utils.logging import get_logger

log = get_logger(__name__)

MAX_EMPTY_LOADS = 3


class JobDiscovery:
    """
    Yields one JobDescriptor at a time from the listing currently on `page`.

    Cards are re-read on every scan (the listing re-renders under us), ids
    already yielded in this run are dropped, and the walk ends on the stop
    condition, when pagination runs out, after MAX_EMPTY_LOADS loads in a
    row without a new id, or when the listing container never shows up.
    """

    def __init__(self, page, adapter, pacing, stop=None, max_empty_loads=MAX_EMPTY_LOADS):
        self.page = page
        self.adapter = adapter
        self.pacing = pacing
        self.stop = stop
        self.max_empty_loads = max_empty_loads
        self.listing_url = None
        self._seen = set()
        self._batch = deque()
        self._empty_loads = 0
        self._started = False
        self._exhausted = False

    def __iter__(self):
        while True:
            job = self.next_candidate()
            if job is None:
                return
            yield job

    def next_candidate(self):
        while True:
            if self.stop is not None and self.stop():
                return None
            if self._batch:
                return self._batch.popleft()
            if self._exhausted:
                return None
            self._load()

    def requeue(self, job):
        """Put a job back at the end of the current batch"""
        self._batch.append(job)

    def _load(self):
        try:
            fresh = self._next_page()
        except PlaywrightError as e:
            log.error("%s: listing failed - ending discovery: %s", self.adapter.name, e)
            self._exhausted = True
            return
        if fresh is None:
            self._exhausted = True
            return

        if fresh:
            self._empty_loads = 0
            self._batch.extend(fresh)
            log.info("%s: %d new job(s) on listing", self.adapter.name, len(fresh))
            return

        self._empty_loads += 1
        if self._empty_loads >= self.max_empty_loads:
            log.info("%s: %d loads without new jobs - end of listing", self.adapter.name, self._empty_loads)
            self._exhausted = True

    def _next_page(self):
        """New jobs from the next listing load, or None when there is nothing left to load"""
        if not self._started:
            self._started = True
            if not self.adapter.wait_for_listing(self.page):
                log.warning("%s: job list not found - treating as no results", self.adapter.name)
                return None
        else:
            self.adapter.return_to_listing(self.page, self.listing_url)
            if not self.adapter.pagination.advance(self.page, self.pacing):
                log.info("%s: no more listing pages", self.adapter.name)
                return None
        return self._scan()

    def _scan(self):
        self.listing_url = self.page.url
        fresh = []
        for card in self.adapter.listing_cards(self.page):
            try:
                job = self.adapter.describe_card(card)
            except PlaywrightError as e:
                log.debug("Unreadable job card: %s", e)
                continue
            if job is None or job.job_id in self._seen:
                continue
            self._seen.add(job.job_id)
            fresh.append(job)
        return fresh
