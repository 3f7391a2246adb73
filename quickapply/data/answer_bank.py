"""Answer knowledge base - question text to canned answer, loaded from YAML"""

from pathlib import Path

import yaml

from quickapply.errors import ConfigError
from quickapply.reasoning.fuzzy import LABEL_MATCH_THRESHOLD, match_key, similarity
from quickapply.reasoning.normalize import normalize_text
from quickapply.utils.logging import get_logger

log = get_logger(__name__)


def render_answer(value):
    """Answer as the text typed or matched against options (bool -> Yes/No)"""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if value is None:
        return None
    return str(value).strip()


class AnswerKnowledgeBase:
    """
    Read-only mapping from normalized question text to an answer.

    Keys are normalized once at load time; lookups accept raw or normalized
    labels and fall back to fuzzy matching.
    """

    def __init__(self, answers, threshold=LABEL_MATCH_THRESHOLD, scorer=similarity):
        self._answers = {}
        for question, answer in (answers or {}).items():
            key = normalize_text(question)
            if not key or answer is None:
                continue
            self._answers[key] = answer
        self.threshold = threshold
        self._scorer = scorer

    @classmethod
    def from_file(cls, path):
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Answers file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path}: {exc}") from exc
        # Either a flat mapping or {answers: {...}}
        if isinstance(data, dict) and isinstance(data.get("answers"), dict):
            data = data["answers"]
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: answers must be a mapping of question -> answer")
        kb = cls(data)
        log.info("Loaded %d answers from %s", len(kb), path)
        return kb

    def __len__(self):
        return len(self._answers)

    def __contains__(self, question):
        return normalize_text(question) in self._answers

    def match(self, label):
        """Matched key for a label, or None"""
        return match_key(label, self._answers, self.threshold, self._scorer)

    def lookup(self, label):
        """Raw answer value for a label, or None when nothing matches"""
        key = self.match(label)
        if key is None:
            return None
        return self._answers[key]

    def answer_text(self, label):
        return render_answer(self.lookup(label))
