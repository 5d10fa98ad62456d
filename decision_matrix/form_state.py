"""
Edit operations behind the criteria and options editors.

Every function returns a new list and leaves its input untouched, so a
calculation always works on a stable snapshot of what the user entered.
"""
import threading
import time
from dataclasses import replace
from typing import List, Optional, Sequence

from .errors import DuplicateCriterionError, LastCriterionError, LastOptionError
from .models import BENEFIT, COST, Criterion, Option

_id_lock = threading.Lock()
_last_id = 0


def next_entity_id() -> int:
    """Millisecond timestamp, bumped when needed so ids never repeat."""
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        _last_id = max(candidate, _last_id + 1)
        return _last_id


def default_criteria() -> List[Criterion]:
    return [Criterion(id=i, name="", weight=0, direction=COST) for i in (1, 2, 3)]


def default_options() -> List[Option]:
    return [Option(id=1, name="Option 1"), Option(id=2, name="Option 2")]


# ----------------------------
# Criteria
# ----------------------------
def add_criterion(criteria: Sequence[Criterion]) -> List[Criterion]:
    new = Criterion(
        id=next_entity_id(),
        name=f"Criterion {len(criteria) + 1}",
        weight=20,
        direction=BENEFIT,
    )
    return [*criteria, new]


def remove_criterion(criteria: Sequence[Criterion], criterion_id: int) -> List[Criterion]:
    if len(criteria) <= 1:
        raise LastCriterionError()
    return [c for c in criteria if c.id != criterion_id]


def update_criterion(criteria: Sequence[Criterion], criterion_id: int, **changes) -> List[Criterion]:
    return [replace(c, **changes) if c.id == criterion_id else c for c in criteria]


def rename_criterion(
    criteria: Sequence[Criterion],
    options: Sequence[Option],
    criterion_id: int,
    new_name: str,
):
    """
    Rename a criterion and move every option's value to the new key.
    Returns (criteria, options). A name already used by another criterion
    is refused, since values are keyed by criterion name.
    """
    old = next((c for c in criteria if c.id == criterion_id), None)
    if new_name and any(c.name == new_name for c in criteria if c.id != criterion_id):
        raise DuplicateCriterionError(new_name)
    new_criteria = update_criterion(criteria, criterion_id, name=new_name)
    if old is None or old.name == new_name:
        return new_criteria, list(options)

    new_options = []
    for o in options:
        if old.name in o.values:
            values = {k: v for k, v in o.values.items() if k != old.name}
            values[new_name] = o.values[old.name]
            o = replace(o, values=values)
        new_options.append(o)
    return new_criteria, new_options


# ----------------------------
# Options
# ----------------------------
def input_step(criterion: Criterion) -> float:
    """Float step for a value input: 1% of the range, or 1.0 on the 0-100 scale."""
    if criterion.has_range:
        span = float(criterion.max_value) - float(criterion.min_value)
        if span > 0:
            return span / 100
    return 1.0


def add_option(options: Sequence[Option], criteria: Sequence[Criterion]) -> List[Option]:
    new = Option(
        id=next_entity_id(),
        name=f"Option {len(options) + 1}",
        values={c.name: 0.0 for c in criteria},
    )
    return [*options, new]


def remove_option(options: Sequence[Option], option_id: int) -> List[Option]:
    if len(options) <= 1:
        raise LastOptionError()
    return [o for o in options if o.id != option_id]


def rename_option(options: Sequence[Option], option_id: int, new_name: str) -> List[Option]:
    return [replace(o, name=new_name) if o.id == option_id else o for o in options]


def set_option_value(
    options: Sequence[Option],
    option_id: int,
    criterion_name: str,
    value: Optional[float],
) -> List[Option]:
    """Set (or with value=None, clear) one raw value."""
    out = []
    for o in options:
        if o.id == option_id:
            values = dict(o.values)
            if value is None:
                values.pop(criterion_name, None)
            else:
                values[criterion_name] = value
            o = replace(o, values=values)
        out.append(o)
    return out
