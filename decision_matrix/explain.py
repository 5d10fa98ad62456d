from typing import Dict, List, Sequence, Tuple

from .models import Criterion, Option
from .scoring import normalize_value, resolve_range, total_weight


def explain_option(option: Option, criteria: Sequence[Criterion], top_n: int = 2) -> Dict[str, object]:
    """
    Returns:
    - contributions: every criterion with its normalized value and the points
      it adds to the final 0-100 score (points sum to the unrounded score)
    - top_positive_contributors (top_n) by points
    - top_negative_contributors (top_n) by points
    """
    if not criteria:
        return {"contributions": [], "top_positive_contributors": [], "top_negative_contributors": []}

    total = total_weight(criteria)
    items: List[Tuple[str, float, float]] = []  # (criterion, normalized, points)

    for c in criteria:
        normalized = normalize_value(option.value_for(c.name), c.direction, resolve_range(c))
        points = normalized * c.weight / total * 100
        items.append((c.name, normalized, points))

    by_points = sorted(items, key=lambda x: x[2])
    negative = by_points[:top_n]
    positive = list(reversed(by_points))[:top_n]

    return {
        "contributions": [
            {"criterion": n, "normalized": round(v, 4), "points": round(p, 2)} for n, v, p in items
        ],
        "top_positive_contributors": [{"criterion": n, "points": round(p, 2)} for n, _, p in positive],
        "top_negative_contributors": [{"criterion": n, "points": round(p, 2)} for n, _, p in negative],
    }
