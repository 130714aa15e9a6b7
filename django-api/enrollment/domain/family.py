"""Family detection from student names already in the cart."""

from collections.abc import Sequence

from enrollment.domain.models import CartItem, FamilyDetectionResult

SIMILARITY_THRESHOLD = 0.8


def levenshtein_distance(first: str, second: str) -> int:
    previous = list(range(len(second) + 1))
    for i, a in enumerate(first, start=1):
        current = [i]
        for j, b in enumerate(second, start=1):
            cost = 0 if a == b else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def name_similarity(first: str, second: str) -> float:
    """1.0 for identical names, falling with edit distance."""
    if first == second:
        return 1.0
    longer, shorter = (first, second) if len(first) > len(second) else (second, first)
    if not longer:
        return 1.0
    return (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)


def _norm(value: str) -> str:
    return value.strip().lower()


def detect_family(
    first_name: str, last_name: str, items: Sequence[CartItem]
) -> FamilyDetectionResult:
    """Guess whether a student belongs to a family already in the cart."""
    first, last = _norm(first_name), _norm(last_name)

    if any(_norm(item.first_name) == first and _norm(item.last_name) == last for item in items):
        return FamilyDetectionResult(
            is_likely_family=False,
            confidence=0.0,
            reason=f"{first_name} {last_name} er allerede i handlekurven",
        )

    same_last_name = tuple(item for item in items if _norm(item.last_name) == last)
    if same_last_name:
        return FamilyDetectionResult(
            is_likely_family=True,
            confidence=0.95,
            reason=f"Samme etternavn som {same_last_name[0].first_name}",
            existing_family_members=same_last_name,
        )

    similar = tuple(
        item
        for item in items
        if name_similarity(_norm(item.last_name), last) > SIMILARITY_THRESHOLD
    )
    if similar:
        return FamilyDetectionResult(
            is_likely_family=True,
            confidence=0.7,
            reason=f"Ligner på {similar[0].last_name}",
            existing_family_members=similar,
            suggested_last_name=similar[0].last_name,
        )

    return FamilyDetectionResult(
        is_likely_family=False,
        confidence=0.0,
        reason="Ingen familie-tilkobling funnet",
    )
