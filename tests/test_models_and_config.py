import logging

from decision_matrix.config import Settings, load_settings
from decision_matrix.logging_utils import get_logger, setup_logging
from decision_matrix.models import (
    BENEFIT,
    COST,
    Criterion,
    DecisionSnapshot,
    ExplicitRange,
    Option,
    Timestamp,
)


class TestModels:

    def test_value_for_defaults_to_zero(self):
        option = Option(id=1, name="o", values={"a": 5, "b": None, "c": float("nan"), "d": "oops"})
        assert option.value_for("a") == 5
        assert option.value_for("b") == 0
        assert option.value_for("c") == 0
        assert option.value_for("d") == 0
        assert option.value_for("missing") == 0

    def test_criterion_reads_legacy_keys(self):
        c = Criterion.from_dict({"id": 7, "name": "Price", "percentage": 30, "isBenefit": False, "min": 1, "max": 9})
        assert c == Criterion(id=7, name="Price", weight=30, direction=COST, min_value=1, max_value=9)

    def test_criterion_dict_omits_unset_bounds(self):
        d = Criterion(id=1, name="x", weight=10, direction=BENEFIT).to_dict()
        assert "min" not in d and "max" not in d

    def test_range_label(self):
        assert ExplicitRange(0, 100).label() == "0-100"
        assert ExplicitRange(0.5, 2).label() == "0.5-2"

    def test_timestamp_ordering(self):
        assert Timestamp(10, 5) < Timestamp(10, 6) < Timestamp(11, 0)
        assert Timestamp.from_ns(3_000_000_007) == Timestamp(3, 7)

    def test_snapshot_from_sparse_document(self):
        snap = DecisionSnapshot.from_document("dec_1", {"decisionName": "x"})
        assert snap.results == ()
        assert snap.best is None
        assert snap.created_at == Timestamp(0, 0)


class TestSettings:

    def test_defaults(self):
        assert load_settings({}) == Settings()

    def test_environment_overrides(self):
        s = load_settings({
            "DECISION_MATRIX_DATA_DIR": "/tmp/dm",
            "DECISION_MATRIX_REPORTS_DIR": "out",
            "DECISION_MATRIX_COLLECTION": "choices",
            "DECISION_MATRIX_LOG_LEVEL": "debug",
        })
        assert s == Settings(data_dir="/tmp/dm", reports_dir="out", collection="choices", log_level="DEBUG")

    def test_blank_values_fall_back(self):
        assert load_settings({"DECISION_MATRIX_DATA_DIR": "  "}).data_dir == "data"


class TestLogging:

    def test_setup_is_repeatable(self):
        logger = setup_logging("DEBUG")
        setup_logging("DEBUG")
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logging("chatty").level == logging.INFO

    def test_child_loggers_share_namespace(self):
        assert get_logger("storage").name == "decision_matrix.storage"
        assert get_logger("decision_matrix.snapshot").name == "decision_matrix.snapshot"
