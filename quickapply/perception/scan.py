"""Whole-step field scan"""

from quickapply.perception.checkboxes import detect_checkboxes
from quickapply.perception.files import detect_file_inputs
from quickapply.perception.radios import detect_radio_groups
from quickapply.perception.selects import detect_select_fields
from quickapply.perception.text_fields import detect_text_fields

DETECTORS = (
    detect_text_fields,
    detect_select_fields,
    detect_radio_groups,
    detect_checkboxes,
    detect_file_inputs,
)


def scan_fields(surface):
    """All fields on the current step. Re-run on every step; results are never cached."""
    fields = []
    for detect in DETECTORS:
        fields.extend(detect(surface))
    return fields


def step_fingerprint(fields):
    """Sorted set of visible question labels identifying a form step"""
    return tuple(sorted({f.normalized_label for f in fields if f.visible and f.normalized_label}))
