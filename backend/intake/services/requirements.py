"""
Adoption Intake Backend: Document Requirement Validator
==========================================================

What:  Works out which required document types an application still lacks.
How:   Pure functions over document type tags. Only presence matters: one
       upload of a type satisfies it, extra uploads change nothing.
"""

from typing import Iterable, List, Sequence, Set, Tuple


def _tag(value) -> str:
    """Enum members and raw strings compare by their tag text."""
    return getattr(value, "value", value)


def normalize_required(required: Sequence[str]) -> List[str]:
    """Required tags with repeats dropped, first occurrence wins."""
    return list(dict.fromkeys(_tag(r) for r in required))


def missing_documents(required: Sequence[str], uploaded: Iterable[str]) -> List[str]:
    """
    Required document types absent from `uploaded`.

    The result follows the order of `required`, with repeats collapsed. An
    empty requirement list is always satisfied.

    Example:
        >>> missing_documents(["SKCK", "HEALTH_CERTIFICATE", "SKCK"], {"SKCK"})
        ['HEALTH_CERTIFICATE']
    """
    present: Set[str] = {_tag(u) for u in uploaded}
    return [tag for tag in normalize_required(required) if tag not in present]


def summarize(required: Sequence[str], uploaded: Iterable[str]) -> Tuple[List[str], List[str], List[str]]:
    """
    Split the requirement list into (required, provided, missing).

    `provided` holds the required types that have at least one upload, in
    required order.
    """
    uploaded_tags = {_tag(u) for u in uploaded}
    wanted = normalize_required(required)
    provided = [tag for tag in wanted if tag in uploaded_tags]
    missing = [tag for tag in wanted if tag not in uploaded_tags]
    return wanted, provided, missing
