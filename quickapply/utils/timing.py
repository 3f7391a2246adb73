"""Timing utilities"""

import random
import time

from quickapply.config import TIMING_PROFILES


def normal_ms(min_ms, max_ms, rng=random, samples=3):
    """Roughly bell-shaped value in [min_ms, max_ms] (mean of uniform draws)"""
    if max_ms <= min_ms:
        return float(min_ms)
    total = sum(rng.uniform(min_ms, max_ms) for _ in range(samples))
    return total / samples


class Pacing:
    """
    Delay-then-act policy used by every module that touches the page.

    All ranges come from a TIMING profile (milliseconds). `sleep` and `rng`
    are injectable so tests can run with zero delay and a fixed seed.
    """

    def __init__(self, profile=None, sleep=time.sleep, rng=None):
        self.profile = dict(profile or TIMING_PROFILES["default"])
        self._sleep = sleep
        self._rng = rng or random.Random()

    @classmethod
    def instant(cls):
        return cls(sleep=lambda _seconds: None, rng=random.Random(0))

    def _wait(self, key):
        ms = normal_ms(
            self.profile[f"{key}_min"], self.profile[f"{key}_max"], self._rng
        )
        self._sleep(ms / 1000)

    def between_fields(self):
        self._wait("field_delay")

    def between_applications(self):
        self._wait("app_delay")

    def keystroke(self):
        """Per-character typing delay with an occasional longer pause"""
        self._wait("key_delay")
        if self._rng.random() < self.profile["key_pause_chance"]:
            self._wait("key_pause")

    def step_settle(self):
        self._wait("step_settle")

    def page_settle(self):
        self._wait("page_settle")

    def after_click(self):
        self._wait("click_settle")

    def dropdown_open(self):
        self._wait("dropdown_open")
