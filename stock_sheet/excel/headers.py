from __future__ import annotations

from collections.abc import Sequence

from ..models.config_models import DEFAULT_VOCABULARY, HeaderVocabulary
from ..models.day_block import ColumnRole

"""Header classifier.

Maps the header text of one column inside a day block to a ColumnRole by
keyword containment against an injected vocabulary. The vocabulary order is
the priority order, so changing locale or wording only touches configuration.
"""

__all__ = [
    "classify_header",
]


def classify_header(
    header: object,
    position: int = 0,
    vocabulary: HeaderVocabulary = DEFAULT_VOCABULARY,
    positional_fallback: Sequence[ColumnRole] | None = None,
) -> ColumnRole:
    """Classify a header cell.

    Args:
        header: Raw header cell (any type; None / NaN-like treated as blank)
        position: 0-based position of the column inside its day block
        vocabulary: Ordered role -> keywords table
        positional_fallback: Optional per-position roles applied only when the
            header is blank

    Returns:
        The first matching role, or ColumnRole.IGNORED
    """
    text = "" if header is None else str(header).strip().lower()
    if not text:
        if positional_fallback is not None and 0 <= position < len(positional_fallback):
            return positional_fallback[position]
        return ColumnRole.IGNORED

    for role, keywords in vocabulary.entries:
        for keyword in keywords:
            if keyword in text:
                return role
    return ColumnRole.IGNORED
