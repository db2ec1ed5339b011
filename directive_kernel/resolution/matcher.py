"""
Entity Resolver — approximate matching of user-typed names to records.

Users type names with typos and transliteration variance, so a record is
matched by normalized edit distance. Resolution is stateless: callers pass a
freshly fetched candidate list every time.
"""

from typing import Any, Callable, Iterable, Optional

from directive_kernel.models.result import MatchCandidate

MATCH_THRESHOLD = 0.6
EXACT_SCORE = 1.0
CONTAINS_SCORE = 0.9


def _normalize(value: Any) -> str:
    return str(value or "").strip().lower()


def record_name(record: Any) -> str:
    """Default key: the record's `name` field."""
    if isinstance(record, dict):
        return record.get("name") or ""
    return getattr(record, "name", "") or ""


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit cost for insert, delete and substitute."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(min(
                previous[j] + 1,                # delete
                current[j - 1] + 1,             # insert
                previous[j - 1] + (ca != cb),   # substitute
            ))
        previous = current
    return previous[-1]


def similarity(query: str, key: str) -> float:
    """Score in [0, 1] of how closely `key` matches `query`."""
    q = _normalize(query)
    k = _normalize(key)
    if not q and not k:
        return EXACT_SCORE
    if q == k:
        return EXACT_SCORE
    if q and q in k:
        return CONTAINS_SCORE
    return 1 - edit_distance(q, k) / max(len(q), len(k))


def resolve(
    query: str,
    candidates: Iterable[Any],
    key: Callable[[Any], str] = record_name,
    threshold: float = MATCH_THRESHOLD,
) -> Optional[MatchCandidate]:
    """
    Return the best-scoring candidate, or None if nothing beats `threshold`.

    Ties go to the candidate seen first.
    """
    if not _normalize(query):
        return None

    best_entity = None
    best_score = -1.0
    for candidate in candidates:
        score = similarity(query, key(candidate))
        if score > best_score:
            best_entity, best_score = candidate, score

    if best_entity is None or best_score <= threshold:
        return None
    return MatchCandidate(entity=best_entity, score=best_score)
