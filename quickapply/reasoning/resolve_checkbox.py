"""Checkbox resolution logic - only consent-style boxes are ever checked"""

from quickapply.reasoning.normalize import normalize_text

CONSENT_TERMS = ("agree", "certify", "confirm", "acknowledge", "accept", "consent")


def is_consent_label(label):
    text = normalize_text(label)
    return any(term in text for term in CONSENT_TERMS)
