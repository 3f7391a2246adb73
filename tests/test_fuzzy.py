"""Fuzzy label and option matching"""

from quickapply.reasoning.fuzzy import (
    LABEL_MATCH_THRESHOLD,
    best_option,
    first_real_option,
    match_key,
    similarity,
)


def test_similarity_exactly_at_threshold_matches():
    # SequenceMatcher: 2 * 3 matching chars / 10 chars = 0.6
    assert similarity("abcde", "abcxy") == LABEL_MATCH_THRESHOLD
    assert match_key("abcde", ["abcxy"]) == "abcxy"


def test_score_just_below_threshold_does_not_match():
    def scorer(a, b):
        return 0.599

    assert match_key("first name", ["surname field"], scorer=scorer) is None


def test_score_at_threshold_with_stub_scorer_matches():
    def scorer(a, b):
        return 0.6

    assert match_key("first name", ["surname field"], scorer=scorer) == "surname field"


def test_exact_key_wins_over_fuzzy_candidates():
    assert match_key("Email Address", ["email address", "email addresses"]) == "email address"


def test_containment_fallback_picks_longest_key():
    keys = ["experience", "years of experience"]
    label = "How many years of experience do you have with distributed systems and Kubernetes?"
    assert match_key(label, keys) == "years of experience"


def test_empty_label_never_matches():
    assert match_key("", ["anything"]) is None
    assert match_key("???", ["anything"]) is None


def test_best_option_skips_placeholder():
    assert best_option("Yes", ["Select an option", "Yes", "No"]) == 1


def test_best_option_whole_word_containment():
    options = ["Yes, I am authorized to work", "No, I require sponsorship"]
    assert best_option("Yes", options) == 0
    assert best_option("No", options) == 1


def test_best_option_none_below_threshold():
    assert best_option("Bachelor's Degree", ["Red", "Green"]) is None


def test_first_real_option():
    assert first_real_option(["-- Select --", "Yes", "No"]) == 1
    assert first_real_option(["Please select"]) is None
    assert first_real_option([]) is None
