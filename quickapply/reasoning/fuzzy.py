"""Fuzzy matching of question labels and option texts"""

from difflib import SequenceMatcher

from quickapply.reasoning.normalize import normalize_option_text, normalize_text

LABEL_MATCH_THRESHOLD = 0.6
OPTION_MATCH_THRESHOLD = 0.4


def similarity(a, b):
    """Ratio in [0, 1] between two already-normalized strings"""
    if not a or not b:
        return 0.0
    return SequenceMatcher(None, a, b).ratio()


def match_key(label, keys, threshold=LABEL_MATCH_THRESHOLD, scorer=similarity):
    """
    Best knowledge-base key for a normalized label, or None.

    Exact key wins; otherwise the highest scoring key at or above the
    threshold; otherwise the longest key contained in the label (or
    containing it).
    """
    label = normalize_text(label)
    if not label:
        return None

    keys = list(keys)
    if label in keys:
        return label

    best_key = None
    best_score = 0.0
    for key in keys:
        score = scorer(label, key)
        if score > best_score:
            best_key, best_score = key, score
    if best_key is not None and best_score >= threshold:
        return best_key

    contained = [key for key in keys if key and (key in label or label in key)]
    if contained:
        return max(contained, key=len)
    return None


def best_option(answer, options, threshold=OPTION_MATCH_THRESHOLD, scorer=similarity):
    """
    Index of the option that best matches the answer, or None.

    Placeholder options are never returned. Containment ("yes" in
    "yes, i am authorized") counts as a full match.
    """
    target = normalize_text(answer)
    if not target:
        return None

    best_index = None
    best_score = 0.0
    for index, option in enumerate(options):
        text = normalize_option_text(option)
        if not text:
            continue
        if text == target:
            return index
        score = scorer(target, text)
        if target in text.split() or text in target.split():
            score = max(score, 0.9)
        if score > best_score:
            best_index, best_score = index, score

    if best_index is not None and best_score >= threshold:
        return best_index
    return None


def first_real_option(options):
    """Index of the first non-placeholder option, or None"""
    for index, option in enumerate(options):
        if normalize_option_text(option):
            return index
    return None
