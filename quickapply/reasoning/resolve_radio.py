"""Radio group resolution logic"""

from quickapply.reasoning.fuzzy import best_option
from quickapply.reasoning.normalize import normalize_option_text
from quickapply.reasoning.resolve_select import Choice


def safe_default_index(options):
    """Option containing "yes", else the first one"""
    for index, option in enumerate(options):
        if "yes" in normalize_option_text(option).split():
            return index
    return 0 if options else None


def resolve_radio_choice(field, knowledge_base):
    answer = knowledge_base.answer_text(field.normalized_label) if field.normalized_label else None
    if answer:
        index = best_option(answer, field.options)
        if index is not None:
            return Choice(index, True)
    return Choice(safe_default_index(field.options), False)
