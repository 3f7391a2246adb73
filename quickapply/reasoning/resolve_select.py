"""Select dropdown resolution logic"""

from dataclasses import dataclass
from typing import Optional

from quickapply.reasoning.fuzzy import best_option, first_real_option


@dataclass(frozen=True)
class Choice:
    """Option picked for a select or radio group; matched=False means a fallback default"""

    index: Optional[int]
    matched: bool


def resolve_select_choice(field, knowledge_base):
    """
    Option to select: the best fuzzy match for the known answer, else the
    first non-placeholder option so a required dropdown is never left unset.
    """
    answer = knowledge_base.answer_text(field.normalized_label) if field.normalized_label else None
    if answer:
        index = best_option(answer, field.options)
        if index is not None:
            return Choice(index, True)
    return Choice(first_real_option(field.options), False)
