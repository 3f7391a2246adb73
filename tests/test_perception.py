"""Label extraction and field detection"""

from fakes import FakeElement, FakePage

from quickapply.models import FieldDescriptor, FieldKind
from quickapply.perception.checkboxes import CHECKBOX_SELECTOR
from quickapply.perception.files import FILE_INPUT_SELECTOR
from quickapply.perception.labels import (
    ANCESTOR_TEXT_JS,
    MAX_LABEL_LENGTH,
    WRAPPING_LABEL_SELECTOR,
    clean_label,
    extract_label,
)
from quickapply.perception.radios import QUESTION_TEXT_JS, RADIO_SELECTOR
from quickapply.perception.scan import scan_fields, step_fingerprint
from quickapply.perception.selects import NATIVE_SELECT_SELECTOR, SELECTED_OPTION_JS
from quickapply.perception.text_fields import TEXT_FIELD_SELECTOR


def test_clean_label():
    assert clean_label("\n  Email   address *\nWe never share it") == "Email address"
    assert clean_label(None) == ""
    assert len(clean_label("x" * 1000)) == MAX_LABEL_LENGTH


def test_bound_label_has_priority():
    element = FakeElement(attrs={"id": "email", "aria-label": "ignored", "placeholder": "ignored"})
    surface = FakePage({'label[for="email"]': [FakeElement(tag="label", text="Email address\n*")]})
    assert extract_label(surface, element) == "Email address"


def test_aria_labelledby_joins_targets():
    element = FakeElement(attrs={"aria-labelledby": "q1 q2"})
    surface = FakePage(
        {
            '[id="q1"]': [FakeElement(tag="span", text="Years")],
            '[id="q2"]': [FakeElement(tag="span", text="of experience")],
        }
    )
    assert extract_label(surface, element) == "Years of experience"


def test_placeholder_then_name():
    assert extract_label(FakePage(), FakeElement(attrs={"placeholder": "City"})) == "City"
    assert extract_label(FakePage(), FakeElement(attrs={"name": "years_of-experience"})) == "years of experience"


def test_ancestor_text_is_last_resort():
    element = FakeElement(evaluations={ANCESTOR_TEXT_JS: "What is your notice period?\nRequired"})
    assert extract_label(FakePage(), element) == "What is your notice period?"


def test_failing_strategies_yield_empty_label():
    element = FakeElement(fail_on={"evaluate"})
    assert extract_label(FakePage(), element) == ""


def test_scan_fields_finds_every_kind():
    text = FakeElement(attrs={"id": "phone", "type": "tel"})
    select = FakeElement(
        tag="select",
        attrs={"aria-label": "Highest degree"},
        children={"option": [FakeElement(text="-- Select --"), FakeElement(text="Bachelor's"), FakeElement(text="Master's")]},
        evaluations={SELECTED_OPTION_JS: ["-- Select --", ""]},
    )
    radios = [
        FakeElement(
            attrs={"type": "radio", "name": "sponsor", "value": value},
            evaluations={QUESTION_TEXT_JS: "Will you require sponsorship?"},
            checked=value == "No",
        )
        for value in ("Yes", "No")
    ]
    checkbox = FakeElement(attrs={"type": "checkbox", "aria-label": "I agree to the terms"})
    upload = FakeElement(attrs={"type": "file", "id": "resume-upload"}, visible=False)
    surface = FakePage(
        {
            TEXT_FIELD_SELECTOR: [text],
            'label[for="phone"]': [FakeElement(tag="label", text="Mobile phone number")],
            NATIVE_SELECT_SELECTOR: [select],
            RADIO_SELECTOR: radios,
            CHECKBOX_SELECTOR: [checkbox],
            FILE_INPUT_SELECTOR: [upload],
            'label[for="resume-upload"]': [FakeElement(tag="label", text="Upload resume")],
        }
    )

    fields = {f.kind: f for f in scan_fields(surface)}

    assert fields[FieldKind.TEXT].raw_label == "Mobile phone number"
    assert fields[FieldKind.TEXT].input_type == "tel"
    assert fields[FieldKind.SELECT].options == ["-- Select --", "Bachelor's", "Master's"]
    assert fields[FieldKind.SELECT].current_value == ""
    assert fields[FieldKind.RADIO_GROUP].options == ["Yes", "No"]
    assert fields[FieldKind.RADIO_GROUP].current_value == "No"
    assert fields[FieldKind.RADIO_GROUP].members == radios
    assert fields[FieldKind.CHECKBOX].raw_label == "I agree to the terms"
    assert fields[FieldKind.FILE].raw_label == "Upload resume"


def test_hidden_and_disabled_text_fields_ignored():
    surface = FakePage(
        {TEXT_FIELD_SELECTOR: [FakeElement(visible=False), FakeElement(disabled=True)]}
    )
    assert scan_fields(surface) == []


def test_numeric_input_detection():
    surface = FakePage(
        {
            TEXT_FIELD_SELECTOR: [
                FakeElement(attrs={"type": "number", "aria-label": "Years"}),
                FakeElement(attrs={"id": "single-line-text-form-component-numeric", "aria-label": "Salary"}),
                FakeElement(attrs={"aria-label": "City"}),
            ]
        }
    )
    assert [f.numeric for f in scan_fields(surface)] == [True, True, False]


def test_step_fingerprint_is_order_free_and_ignores_invisible():
    a = [
        FieldDescriptor(FieldKind.TEXT, "Email"),
        FieldDescriptor(FieldKind.TEXT, "Phone?"),
        FieldDescriptor(FieldKind.TEXT, "Hidden", visible=False),
    ]
    b = [FieldDescriptor(FieldKind.TEXT, "phone"), FieldDescriptor(FieldKind.SELECT, "EMAIL")]
    assert step_fingerprint(a) == step_fingerprint(b) == ("email", "phone")
    assert step_fingerprint([]) == ()


def test_hidden_radio_group_and_checkbox_ignored():
    radios = [FakeElement(attrs={"type": "radio", "name": "relocate", "value": v}, visible=False) for v in ("Yes", "No")]
    consent = FakeElement(attrs={"type": "checkbox", "aria-label": "I agree to the terms"}, visible=False)
    surface = FakePage({RADIO_SELECTOR: radios, CHECKBOX_SELECTOR: [consent]})

    assert scan_fields(surface) == []


def test_styled_controls_visible_through_their_label():
    radios = [
        FakeElement(attrs={"type": "radio", "name": "relocate", "id": f"relocate-{v}", "value": v}, visible=False)
        for v in ("Yes", "No")
    ]
    wrapper = FakeElement(tag="label", text="I agree to the terms")
    consent = FakeElement(
        attrs={"type": "checkbox", "aria-label": "I agree to the terms"},
        visible=False,
        children={WRAPPING_LABEL_SELECTOR: [wrapper]},
    )
    surface = FakePage(
        {
            RADIO_SELECTOR: radios,
            'label[for="relocate-Yes"]': [FakeElement(tag="label", text="Yes")],
            'label[for="relocate-No"]': [FakeElement(tag="label", text="No")],
            CHECKBOX_SELECTOR: [consent],
        }
    )

    kinds = [f.kind for f in scan_fields(surface)]
    assert FieldKind.RADIO_GROUP in kinds
    assert FieldKind.CHECKBOX in kinds
