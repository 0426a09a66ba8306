"""Derive persisted per-turn feedback from a tutor reply."""

from lingo_tutor.models.conversation import Feedback
from lingo_tutor.models.tutor import TutorReply

ACCURACY_CORRECT = 100
ACCURACY_WITH_ERROR = 80


def format_tip(word: str, translation: str, example: str) -> str:
    return f"New word: {word} - {translation}. Example: {example}"


def derive_feedback(reply: TutorReply) -> Feedback:
    """Map the model's correction and new words onto turn feedback.

    Accuracy is a binary signal: 100 for a clean turn, 80 when a correction
    was flagged.
    """
    correction = reply.correction
    tips = [format_tip(w.word, w.translation, w.example) for w in reply.new_words]
    if correction.has_error:
        return Feedback(
            accuracy=ACCURACY_WITH_ERROR,
            issues=[correction.explanation] if correction.explanation else [],
            positives=["Good attempt!"],
            tips=tips,
        )
    return Feedback(accuracy=ACCURACY_CORRECT, issues=[], positives=["Perfect!"], tips=tips)


def improvement_area(reply: TutorReply) -> str | None:
    """The explanation to remember as an improvement area, if any."""
    if reply.correction.has_error and reply.correction.explanation.strip():
        return reply.correction.explanation.strip()
    return None
