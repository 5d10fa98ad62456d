import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

BENEFIT = "benefit"  # higher raw values are better
COST = "cost"  # lower raw values are better
DIRECTIONS = (BENEFIT, COST)


@dataclass(frozen=True)
class ExplicitRange:
    min_value: float
    max_value: float

    @property
    def span(self) -> float:
        return self.max_value - self.min_value

    def label(self) -> str:
        return f"{_fmt_number(self.min_value)}-{_fmt_number(self.max_value)}"


@dataclass(frozen=True)
class ImplicitPercentage:
    """No declared range: raw values are read on a fixed 0-100 scale."""

    def label(self) -> str:
        return "N/A"


IMPLICIT_PERCENTAGE = ImplicitPercentage()

Range = Union[ExplicitRange, ImplicitPercentage]


@dataclass(frozen=True)
class Criterion:
    id: int
    name: str
    weight: float
    direction: str = BENEFIT
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    @property
    def is_benefit(self) -> bool:
        return self.direction == BENEFIT

    @property
    def has_range(self) -> bool:
        return self.min_value is not None and self.max_value is not None

    def preference_label(self) -> str:
        return "Higher is better" if self.is_benefit else "Lower is better"

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "weight": self.weight,
            "direction": self.direction,
        }
        if self.min_value is not None:
            d["min"] = self.min_value
        if self.max_value is not None:
            d["max"] = self.max_value
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Criterion":
        direction = d.get("direction")
        if direction not in DIRECTIONS:
            direction = BENEFIT if d.get("isBenefit", True) else COST
        weight = d.get("weight", d.get("percentage", 0))
        return cls(
            id=d.get("id", 0),
            name=str(d.get("name", "")),
            weight=float(weight or 0),
            direction=direction,
            min_value=_optional_float(d.get("min")),
            max_value=_optional_float(d.get("max")),
        )


@dataclass(frozen=True)
class Option:
    id: int
    name: str
    values: Dict[str, float] = field(default_factory=dict)

    def value_for(self, criterion_name: str) -> float:
        """Raw value for a criterion; missing or non-numeric entries count as 0."""
        return _number_or_zero(self.values.get(criterion_name))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "values": dict(self.values)}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Option":
        return cls(
            id=d.get("id", 0),
            name=str(d.get("name", "")),
            values=dict(d.get("values") or {}),
        )


@dataclass(frozen=True)
class ScoredOption:
    id: int
    name: str
    values: Dict[str, float]
    score: float

    @classmethod
    def from_option(cls, option: Option, score: float) -> "ScoredOption":
        return cls(id=option.id, name=option.name, values=dict(option.values), score=score)

    def value_for(self, criterion_name: str) -> float:
        return _number_or_zero(self.values.get(criterion_name))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "values": dict(self.values), "score": self.score}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ScoredOption":
        return cls(
            id=d.get("id", 0),
            name=str(d.get("name", "")),
            values=dict(d.get("values") or {}),
            score=float(d.get("score", 0.0)),
        )


@dataclass(frozen=True, order=True)
class Timestamp:
    seconds: int
    nanoseconds: int = 0

    @classmethod
    def from_ns(cls, ns: int) -> "Timestamp":
        seconds, nanos = divmod(int(ns), 1_000_000_000)
        return cls(seconds=seconds, nanoseconds=nanos)

    def to_dict(self) -> Dict[str, int]:
        return {"seconds": self.seconds, "nanoseconds": self.nanoseconds}

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "Timestamp":
        d = d or {}
        return cls(seconds=int(d.get("seconds", 0)), nanoseconds=int(d.get("nanoseconds", 0)))


@dataclass(frozen=True)
class DecisionSnapshot:
    id: Optional[str]
    decision_name: str
    criteria: Tuple[Criterion, ...]
    options: Tuple[Option, ...]
    results: Tuple[ScoredOption, ...]
    created_at: Timestamp
    engine_version: str = ""

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "decisionName": self.decision_name,
            "options": [o.to_dict() for o in self.options],
            "criteria": [c.to_dict() for c in self.criteria],
            "results": [r.to_dict() for r in self.results],
            "createdAt": self.created_at.to_dict(),
        }
        if self.engine_version:
            doc["engineVersion"] = self.engine_version
        return doc

    @classmethod
    def from_document(cls, doc_id: str, doc: Dict[str, Any]) -> "DecisionSnapshot":
        return cls(
            id=doc_id,
            decision_name=str(doc.get("decisionName", "")),
            criteria=tuple(Criterion.from_dict(c) for c in doc.get("criteria") or []),
            options=tuple(Option.from_dict(o) for o in doc.get("options") or []),
            results=tuple(ScoredOption.from_dict(r) for r in doc.get("results") or []),
            created_at=Timestamp.from_dict(doc.get("createdAt")),
            engine_version=str(doc.get("engineVersion", "")),
        )

    @property
    def best(self) -> Optional[ScoredOption]:
        return self.results[0] if self.results else None


def _number_or_zero(x) -> float:
    if x is None or isinstance(x, bool):
        return 0.0
    try:
        v = float(x)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(v) else v


def _optional_float(x) -> Optional[float]:
    if x is None or x == "":
        return None
    return float(x)


def _fmt_number(x: float) -> str:
    return str(int(x)) if float(x).is_integer() else str(x)
