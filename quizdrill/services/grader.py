"""All-or-nothing grading of a submitted option selection."""
from typing import Iterable, Set


def normalize_keys(keys: Iterable[str]) -> Set[str]:
    """Lower-case, trim and deduplicate option keys"""
    return {k.strip().lower() for k in keys if k is not None}


def is_fully_correct(selected: Iterable[str], correct: Iterable[str]) -> bool:
    """True iff the deduplicated selection is exactly the correct set.

    Duplicates never help: ``["a", "a"]`` against ``{"a", "b"}`` collapses to
    ``{"a"}`` and is wrong. An extra option, a missing option or an empty
    selection is wrong. There is no partial credit.
    """
    return normalize_keys(selected) == normalize_keys(correct)
