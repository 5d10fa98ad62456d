# decision_matrix/scoring.py

ENGINE_VERSION = "1.0.0"

# Normalized values are left unclamped: a raw value outside the declared range
# scores below 0 or above 1 and can push a final score outside 0-100.
CLAMP_NORMALIZED = False

import math
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import (
    InvalidRangeError,
    InvalidWeightError,
    MissingNameError,
    NoCriteriaError,
)
from .models import (
    BENEFIT,
    IMPLICIT_PERCENTAGE,
    Criterion,
    ExplicitRange,
    Option,
    Range,
    ScoredOption,
)


def round1(x: float) -> float:
    """Round to one decimal place, halves going up."""
    return math.floor(x * 10 + 0.5) / 10


def clamp_normalized(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def resolve_range(criterion: Criterion) -> Range:
    if criterion.has_range:
        return ExplicitRange(float(criterion.min_value), float(criterion.max_value))
    return IMPLICIT_PERCENTAGE


def normalize_value(raw: float, direction: str, rng: Range, clamp: bool = CLAMP_NORMALIZED) -> float:
    if isinstance(rng, ExplicitRange):
        position = (raw - rng.min_value) / rng.span
    else:
        position = raw / 100
    normalized = position if direction == BENEFIT else 1 - position
    if clamp:
        return clamp_normalized(normalized)
    return normalized


def validate_inputs(decision_name: str, criteria: Sequence[Criterion]) -> None:
    # whitespace-only names count as blank
    if not (decision_name or "").strip():
        raise MissingNameError()
    if not criteria:
        raise NoCriteriaError()

    bad_weights = [c.name or f"#{i + 1}" for i, c in enumerate(criteria) if not c.weight > 0]
    if bad_weights:
        raise InvalidWeightError(bad_weights)

    bad_ranges = [
        c.name or f"#{i + 1}"
        for i, c in enumerate(criteria)
        if c.has_range and not c.min_value < c.max_value
    ]
    if bad_ranges:
        raise InvalidRangeError(bad_ranges)


def total_weight(criteria: Iterable[Criterion]) -> float:
    return float(sum(c.weight for c in criteria))


def criterion_contribution(
    option: Option,
    criterion: Criterion,
    rng: Optional[Range] = None,
    clamp: bool = CLAMP_NORMALIZED,
) -> float:
    """Weighted, not yet divided by total weight."""
    if rng is None:
        rng = resolve_range(criterion)
    return normalize_value(option.value_for(criterion.name), criterion.direction, rng, clamp) * criterion.weight


def _score_option(
    option: Option,
    resolved: Sequence[Tuple[Criterion, Range]],
    weight_total: float,
    clamp: bool,
) -> float:
    raw_score = 0.0
    for criterion, rng in resolved:
        raw_score += criterion_contribution(option, criterion, rng, clamp)
    return round1((raw_score / weight_total) * 100)


def rank(scored: Iterable[ScoredOption]) -> List[ScoredOption]:
    # sorted() is stable, so equal scores keep their input order
    return sorted(scored, key=lambda s: s.score, reverse=True)


def compute_scores(
    decision_name: str,
    criteria: Sequence[Criterion],
    options: Sequence[Option],
    clamp: bool = CLAMP_NORMALIZED,
) -> List[ScoredOption]:
    criteria = tuple(criteria)
    options = tuple(options)
    validate_inputs(decision_name, criteria)

    resolved = [(c, resolve_range(c)) for c in criteria]
    weight_total = total_weight(criteria)
    return rank(ScoredOption.from_option(o, _score_option(o, resolved, weight_total, clamp)) for o in options)
