"""Field resolution engine"""

from fakes import FakeElement, FakePage

from quickapply.data.answer_bank import AnswerKnowledgeBase
from quickapply.debug.unresolved_collector import UnresolvedCollector
from quickapply.form_filler import FormFiller
from quickapply.models import FieldDescriptor, FieldKind, JobDescriptor

JOB = JobDescriptor(platform="linkedin", job_id="42")


def make_filler(pacing, answers=None, resume_path=None, ledger=None):
    collector = UnresolvedCollector(ledger, run_id="run-1")
    filler = FormFiller(AnswerKnowledgeBase(answers or {}), pacing, resume_path, collector)
    return filler, collector


def select_field(element, label="Favorite color"):
    return FieldDescriptor(
        kind=FieldKind.SELECT,
        raw_label=label,
        options=["-- Select --", "Yes", "No"],
        element=element,
    )


def test_text_field_typed_from_answer(pacing):
    filler, collector = make_filler(pacing, {"email": "a@b.c"})
    element = FakeElement()
    result = filler.fill(FakePage(), [FieldDescriptor(FieldKind.TEXT, "Email*", element=element)], JOB)

    assert element.value == "a@b.c"
    assert result.applied == 1
    assert len(collector) == 0


def test_numeric_field_gets_plain_decimal(pacing):
    filler, _ = make_filler(pacing, {"years of experience": "5 years"})
    element = FakeElement(attrs={"type": "number"})
    descriptor = FieldDescriptor(FieldKind.TEXT, "Years of experience", element=element, numeric=True)
    filler.fill(FakePage(), [descriptor], JOB)

    assert element.value == "5"


def test_numeric_field_with_non_numeric_answer_is_unmatched(pacing):
    filler, collector = make_filler(pacing, {"years of experience": True})
    element = FakeElement()
    descriptor = FieldDescriptor(FieldKind.TEXT, "Years of experience", element=element, numeric=True)
    result = filler.fill(FakePage(), [descriptor], JOB)

    assert element.calls == []
    assert result.unmatched == [("Years of experience", "text")]
    assert len(collector) == 1


def test_unmatched_text_field_reported_once_and_left_empty(pacing, ledger):
    filler, collector = make_filler(pacing, {"email": "a@b.c"}, ledger=ledger)
    element = FakeElement()
    result = filler.fill(FakePage(), [FieldDescriptor(FieldKind.TEXT, "Favorite color", element=element)], JOB)

    assert element.value == ""
    assert result.applied == 0
    assert collector.flush() == 1
    events = ledger.unmatched_for("linkedin", "42")
    assert [(e.label, e.field_kind, e.run_id) for e in events] == [("Favorite color", "text", "run-1")]


def test_prefilled_fields_are_left_alone(pacing):
    filler, collector = make_filler(pacing, {"email": "a@b.c"})
    element = FakeElement(value="me@x.y")
    descriptor = FieldDescriptor(FieldKind.TEXT, "Email", current_value="me@x.y", element=element)
    result = filler.fill(FakePage(), [descriptor], JOB)

    assert element.calls == []
    assert result.applied == 0
    assert len(collector) == 0


def test_select_without_answer_falls_back_to_first_real_option(pacing):
    filler, collector = make_filler(pacing)
    element = FakeElement(tag="select")
    result = filler.fill(FakePage(), [select_field(element)], JOB)

    assert element.selected_index == 1
    assert result.applied == 1
    assert result.unmatched == [("Favorite color", "select")]
    assert len(collector) == 1


def test_select_falls_back_to_programmatic_when_native_fails(pacing):
    filler, _ = make_filler(pacing)
    element = FakeElement(tag="select", fail_on={"select_option"})
    result = filler.fill(FakePage(), [select_field(element)], JOB)

    assert element.selected_index == 1
    assert "evaluate" in element.calls
    assert result.applied == 1


def test_select_uses_matching_answer(pacing):
    filler, collector = make_filler(pacing, {"are you willing to relocate": False})
    element = FakeElement(tag="select")
    filler.fill(FakePage(), [select_field(element, "Are you willing to relocate?")], JOB)

    assert element.selected_index == 2
    assert len(collector) == 0


def test_custom_select_clicks_matching_option(pacing):
    filler, _ = make_filler(pacing, {"are you willing to relocate": True})
    yes = FakeElement(tag="li", text="Yes")
    no = FakeElement(tag="li", text="No")
    surface = FakePage({'[role="option"]': [yes, no]})
    trigger = FakeElement(tag="div")
    descriptor = FieldDescriptor(
        FieldKind.SELECT,
        "Are you willing to relocate?",
        options=["Yes", "No"],
        element=trigger,
        widget="custom",
    )
    result = filler.fill(surface, [descriptor], JOB)

    assert yes.calls == ["click"]
    assert no.calls == []
    assert result.applied == 1


def test_consent_checkbox_checked_others_untouched(pacing):
    filler, collector = make_filler(pacing)
    consent = FakeElement(attrs={"type": "checkbox"})
    newsletter = FakeElement(attrs={"type": "checkbox"})
    fields = [
        FieldDescriptor(FieldKind.CHECKBOX, "I agree to the terms and conditions", element=consent),
        FieldDescriptor(FieldKind.CHECKBOX, "Send me job alerts by email", element=newsletter),
    ]
    result = filler.fill(FakePage(), fields, JOB)

    assert consent.checked
    assert not newsletter.checked
    assert result.applied == 1
    assert len(collector) == 0


def test_checkbox_falls_back_to_dom_click(pacing):
    filler, _ = make_filler(pacing)
    consent = FakeElement(attrs={"type": "checkbox"}, fail_on={"check"})
    filler.fill(FakePage(), [FieldDescriptor(FieldKind.CHECKBOX, "I certify the above", element=consent)], JOB)

    assert consent.checked


def test_radio_without_answer_picks_yes(pacing):
    filler, collector = make_filler(pacing)
    no, yes = FakeElement(attrs={"type": "radio"}), FakeElement(attrs={"type": "radio"})
    descriptor = FieldDescriptor(
        FieldKind.RADIO_GROUP,
        "Do you have a security clearance?",
        options=["No", "Yes"],
        element=no,
        members=[no, yes],
    )
    result = filler.fill(FakePage(), [descriptor], JOB)

    assert yes.checked and not no.checked
    assert result.unmatched == [("Do you have a security clearance?", "radio-group")]
    assert len(collector) == 1


def test_radio_uses_answer(pacing):
    filler, collector = make_filler(pacing, {"will you require sponsorship": False})
    yes, no = FakeElement(attrs={"type": "radio"}), FakeElement(attrs={"type": "radio"})
    descriptor = FieldDescriptor(
        FieldKind.RADIO_GROUP,
        "Will you require sponsorship?",
        options=["Yes", "No"],
        element=yes,
        members=[yes, no],
    )
    filler.fill(FakePage(), [descriptor], JOB)

    assert no.checked and not yes.checked
    assert len(collector) == 0


def test_missing_resume_skips_upload(pacing, tmp_path):
    filler, collector = make_filler(pacing, resume_path=tmp_path / "missing.pdf")
    element = FakeElement(attrs={"type": "file"})
    result = filler.fill(FakePage(), [FieldDescriptor(FieldKind.FILE, "resume", element=element)], JOB)

    assert element.calls == []
    assert result.applied == 0
    assert len(collector) == 0


def test_resume_attached(pacing, tmp_path):
    resume = tmp_path / "resume.pdf"
    resume.write_bytes(b"%PDF-1.4")
    filler, _ = make_filler(pacing, resume_path=resume)
    element = FakeElement(attrs={"type": "file"})
    filler.fill(FakePage(), [FieldDescriptor(FieldKind.FILE, "resume", element=element)], JOB)

    assert element.value == str(resume)


def test_one_failing_field_does_not_stop_the_step(pacing):
    filler, _ = make_filler(pacing, {"email": "a@b.c", "phone": "555"})
    broken = FakeElement(fail_on={"click"})
    working = FakeElement()
    fields = [
        FieldDescriptor(FieldKind.TEXT, "Email", element=broken),
        FieldDescriptor(FieldKind.TEXT, "Phone", element=working),
    ]
    result = filler.fill(FakePage(), fields, JOB)

    assert working.value == "555"
    assert result.applied == 1


def test_invisible_fields_skipped(pacing):
    filler, collector = make_filler(pacing)
    element = FakeElement()
    filler.fill(FakePage(), [FieldDescriptor(FieldKind.TEXT, "Hidden", element=element, visible=False)], JOB)

    assert element.calls == []
    assert len(collector) == 0


def test_non_browser_error_in_one_field_does_not_stop_the_step(pacing):
    class BadValue(FakeElement):
        def click(self, timeout=None):
            raise ValueError("unexpected widget state")

    filler, _ = make_filler(pacing, {"email": "a@b.c", "phone": "555"})
    working = FakeElement()
    fields = [
        FieldDescriptor(FieldKind.TEXT, "Email", element=BadValue()),
        FieldDescriptor(FieldKind.TEXT, "Phone", element=working),
    ]
    result = filler.fill(FakePage(), fields, JOB)

    assert working.value == "555"
    assert result.applied == 1
