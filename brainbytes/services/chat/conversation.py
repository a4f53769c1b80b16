"""
Client-side conversation view.

A view maps every subject to a tuple of message dicts ordered by
``createdAt``. Views are read-only; each function below returns a new view
and leaves its input untouched.
"""
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from brainbytes.services.chat.subjects import SUBJECTS, canonical_subject, normalize_subject

ConversationView = Mapping[str, Tuple[Dict[str, Any], ...]]


def _freeze(buckets: Dict[str, Tuple[Dict[str, Any], ...]]) -> ConversationView:
    return MappingProxyType(buckets)


def _created_at(message: Dict[str, Any]) -> str:
    return message.get("createdAt") or ""


def empty_view() -> ConversationView:
    return _freeze({subject: () for subject in SUBJECTS})


def group_messages(messages: Iterable[Dict[str, Any]]) -> ConversationView:
    """Build a view from the server's message list."""
    buckets: Dict[str, List[Dict[str, Any]]] = {subject: [] for subject in SUBJECTS}
    for message in messages:
        buckets[normalize_subject(message.get("subject"))].append(message)
    return _freeze({subject: tuple(sorted(msgs, key=_created_at)) for subject, msgs in buckets.items()})


def _replace_bucket(view: ConversationView, subject: str, messages: Iterable[Dict[str, Any]]) -> ConversationView:
    buckets = dict(view)
    buckets[subject] = tuple(messages)
    return _freeze(buckets)


def add_message(view: ConversationView, message: Dict[str, Any]) -> ConversationView:
    subject = normalize_subject(message.get("subject"))
    return _replace_bucket(view, subject, view.get(subject, ()) + (message,))


def confirm_message(view: ConversationView, temp_id: str, confirmed: Iterable[Dict[str, Any]]) -> ConversationView:
    """
    Swap an optimistic message for the records the server returned.

    The optimistic entry is located by id, never by position. Confirmed
    records are filed by their own subject.
    """
    buckets = {subject: tuple(m for m in msgs if m.get("id") != temp_id) for subject, msgs in view.items()}
    result = _freeze(buckets)
    for message in confirmed:
        result = add_message(result, message)
    return result


def clear_subject(view: ConversationView, subject: str) -> ConversationView:
    return _replace_bucket(view, canonical_subject(subject), ())


def visible_messages(view: ConversationView, active_filter: Optional[str] = None) -> List[Dict[str, Any]]:
    """Messages of the active subject, or of every subject when no filter is set."""
    if active_filter:
        return list(view.get(active_filter, ()))
    return [m for subject in view for m in view[subject]]


def user_counts(view: ConversationView) -> Dict[str, int]:
    return {subject: sum(1 for m in msgs if m.get("isUser")) for subject, msgs in view.items()}
