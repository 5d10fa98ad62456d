import time
from typing import List, Optional, Sequence

from .config import DEFAULT_COLLECTION
from .errors import IncompleteOptionError, MissingScoresError, StorageError
from .logging_utils import get_logger
from .models import Criterion, DecisionSnapshot, Option, ScoredOption, Timestamp
from .scoring import ENGINE_VERSION

logger = get_logger(__name__)


def _blank(x: Optional[str]) -> bool:
    return not (x or "").strip()


def now_timestamp() -> Timestamp:
    return Timestamp.from_ns(time.time_ns())


def validate_for_save(
    decision_name: str,
    criteria: Sequence[Criterion],
    options: Sequence[Option],
    results: Optional[Sequence[ScoredOption]],
) -> None:
    if _blank(decision_name) or not results:
        raise MissingScoresError()

    if any(_blank(c.name) or not c.weight > 0 for c in criteria):
        raise IncompleteOptionError("All criteria must have names and positive weights")

    if any(_blank(o.name) for o in options):
        raise IncompleteOptionError("All options must have names")


def build_snapshot(
    decision_name: str,
    criteria: Sequence[Criterion],
    options: Sequence[Option],
    results: Sequence[ScoredOption],
    created_at: Optional[Timestamp] = None,
) -> DecisionSnapshot:
    return DecisionSnapshot(
        id=None,
        decision_name=decision_name.strip(),
        criteria=tuple(criteria),
        options=tuple(options),
        results=tuple(results),
        created_at=created_at or now_timestamp(),
        engine_version=ENGINE_VERSION,
    )


def save_decision(
    store,
    decision_name: str,
    criteria: Sequence[Criterion],
    options: Sequence[Option],
    results: Optional[Sequence[ScoredOption]],
    collection: str = DEFAULT_COLLECTION,
) -> str:
    """
    Validate and persist a decision. Returns the store-assigned id.

    Raises ValidationError before touching the store, and StorageError if
    the write fails.
    """
    validate_for_save(decision_name, criteria, options, results)
    snap = build_snapshot(decision_name, criteria, options, results)
    try:
        doc_id = store.create(collection, snap.to_document())
    except StorageError:
        logger.exception("Error saving decision %r", snap.decision_name)
        raise
    logger.info("Saved decision %r as %s", snap.decision_name, doc_id)
    return doc_id


def load_saved_decisions(store, collection: str = DEFAULT_COLLECTION) -> List[DecisionSnapshot]:
    """All saved decisions, most recent first."""
    try:
        rows = store.list_all(collection)
    except StorageError:
        logger.exception("Error loading decisions")
        raise

    decisions: List[DecisionSnapshot] = []
    for doc_id, doc in rows:
        try:
            decisions.append(DecisionSnapshot.from_document(doc_id, doc))
        except (TypeError, ValueError, AttributeError):
            logger.warning("Skipping unreadable decision %s", doc_id)

    decisions.sort(key=lambda d: d.created_at, reverse=True)
    return decisions


def delete_decision(store, doc_id: str, collection: str = DEFAULT_COLLECTION) -> bool:
    """
    Delete by id. A missing id is not an error: it is reported as False and
    callers treat it as already deleted.
    """
    try:
        deleted = store.delete_by_id(collection, doc_id)
    except StorageError:
        logger.exception("Error deleting decision %s", doc_id)
        raise
    if deleted:
        logger.info("Deleted decision %s", doc_id)
    else:
        logger.info("Decision %s was already gone", doc_id)
    return deleted
