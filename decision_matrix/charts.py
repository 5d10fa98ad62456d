from typing import Sequence

import pandas as pd

from .models import Criterion, ScoredOption


def weight_share_frame(criteria: Sequence[Criterion]) -> pd.DataFrame:
    """Criterion weights with each one's whole-percent share of the total."""
    df = pd.DataFrame(
        [(c.name, float(c.weight)) for c in criteria],
        columns=["Criterion", "Weight"],
    )
    total = df["Weight"].sum()
    if total > 0:
        df["Share"] = (df["Weight"] / total * 100).round().astype(int)
    else:
        df["Share"] = 0
    return df


def score_frame(results: Sequence[ScoredOption]) -> pd.DataFrame:
    """Scores in rank order, ready for st.bar_chart."""
    return pd.DataFrame(
        [(r.name, r.score) for r in results],
        columns=["Option", "Score"],
    )
