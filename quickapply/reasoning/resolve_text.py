"""Text field resolution logic"""

from quickapply.data.answer_bank import render_answer
from quickapply.reasoning.normalize import to_decimal_string


def resolve_text_answer(field, knowledge_base):
    """
    Pure function: value to type into a text field, or None if unmatched.

    Numeric-constrained inputs only ever receive a plain decimal number; an
    answer without one ("Yes", "about a year") counts as unmatched there.
    """
    if not field.normalized_label:
        return None
    answer = knowledge_base.lookup(field.normalized_label)
    if answer is None:
        return None
    if field.numeric:
        return to_decimal_string(answer)
    text = render_answer(answer)
    return text or None
