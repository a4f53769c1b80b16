"""
Subject classification and conversation partitioning.

Shared by the API layer and the Python client so that both sides file a
message under the same subject.
"""
from typing import Optional

CLASSIFIER_VERSION = "1"

GENERAL = "General"

# Evaluated in this order; the first subject with a matching keyword wins.
SUBJECT_KEYWORDS = (
    ("Math", ("math", "equation", "calculate", "algebra", "geometry", "number")),
    ("Science", ("science", "biology", "chemistry", "physics", "molecule", "atom")),
    ("History", ("history", "war", "century", "ancient", "civilization")),
    ("Language", ("language", "grammar", "vocabulary", "word", "sentence", "speak")),
    ("Technology", ("technology", "computer", "software", "program", "code", "internet")),
)

SUBJECTS = tuple(name for name, _ in SUBJECT_KEYWORDS) + (GENERAL,)


def detect_subject(text: str) -> str:
    """Map free text to one subject by substring keyword match."""
    lowered = text.lower()
    for subject, keywords in SUBJECT_KEYWORDS:
        if any(kw in lowered for kw in keywords):
            return subject
    return GENERAL


def normalize_subject(subject: Optional[str]) -> str:
    """Fold missing or unknown subject values into General."""
    if subject in SUBJECTS:
        return subject
    return GENERAL


def canonical_subject(subject: Optional[str]) -> str:
    """Match a subject name case-insensitively; unknown names become General."""
    if subject:
        lowered = subject.lower()
        for name in SUBJECTS:
            if name.lower() == lowered:
                return name
    return GENERAL


def resolve_subject(text: str, explicit_subject: Optional[str] = None, active_filter: Optional[str] = None) -> str:
    """
    Pick the subject bucket for an incoming message.

    An explicit subject is used verbatim, then the active filter, and only
    then the keyword classifier.
    """
    if explicit_subject:
        return explicit_subject
    if active_filter:
        return active_filter
    return detect_subject(text or "")
