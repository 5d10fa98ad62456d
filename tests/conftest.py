import pytest

from decision_matrix.models import BENEFIT, COST, Criterion, Option
from decision_matrix.storage import JsonlDocumentStore


@pytest.fixture
def cost_speed_criteria():
    """Two ranged criteria: Cost (60, lower is better) and Speed (40, higher is better)."""
    return [
        Criterion(id=1, name="Cost", weight=60, direction=COST, min_value=0, max_value=100),
        Criterion(id=2, name="Speed", weight=40, direction=BENEFIT, min_value=0, max_value=100),
    ]


@pytest.fixture
def cost_speed_options():
    return [
        Option(id=1, name="A", values={"Cost": 20, "Speed": 80}),
        Option(id=2, name="B", values={"Cost": 80, "Speed": 20}),
    ]


@pytest.fixture
def store(tmp_path):
    return JsonlDocumentStore(str(tmp_path / "data"))
