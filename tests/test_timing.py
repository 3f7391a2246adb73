"""Pacing policy"""

import random

from quickapply.config import TIMING_PROFILES
from quickapply.utils.timing import Pacing, normal_ms


def test_normal_ms_stays_in_range():
    rng = random.Random(1)
    values = [normal_ms(100, 200, rng) for _ in range(500)]
    assert all(100 <= v <= 200 for v in values)
    # mean of three draws clusters around the middle
    assert 140 < sum(values) / len(values) < 160


def test_degenerate_range():
    assert normal_ms(300, 300) == 300.0


def test_pacing_sleeps_within_profile_range():
    slept = []
    pacing = Pacing(TIMING_PROFILES["default"], sleep=slept.append, rng=random.Random(3))

    pacing.between_fields()
    pacing.between_applications()

    assert 1.5 <= slept[0] <= 4.0
    assert 5.0 <= slept[1] <= 15.0


def test_keystroke_pause_is_occasional():
    slept = []
    profile = dict(TIMING_PROFILES["default"], key_pause_chance=1.0)
    Pacing(profile, sleep=slept.append, rng=random.Random(0)).keystroke()

    assert len(slept) == 2
    assert 0.3 <= slept[1] <= 0.8


def test_instant_pacing_never_sleeps():
    pacing = Pacing.instant()
    for wait in (pacing.step_settle, pacing.page_settle, pacing.after_click, pacing.dropdown_open, pacing.keystroke):
        assert wait() is None
