"""
Purpose: Route table <-> domain model glue.
What it does:
- Reads the route table (CSV / DataFrame) into Destination objects
- Writes a BatchResult back as kilometer / tollPrice columns

Rule: No HTTP calls. The table is only read and copied, never mutated in place.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

import pandas as pd

from .models import BatchResult, Destination

REQUIRED_COLUMNS = ["id", "latitude", "longitude"]


def destinations_from_frame(frame: pd.DataFrame) -> List[Destination]:
    """Build one Destination per row. NaN cells become None (a valid 'no coordinate' state)."""
    missing = [column for column in REQUIRED_COLUMNS if column not in frame.columns]
    if missing:
        raise ValueError(f"Route table is missing required columns: {', '.join(missing)}")

    destinations = []
    for row in frame.to_dict(orient="records"):
        cleaned = {key: (None if _is_missing(value) else value) for key, value in row.items()}
        destinations.append(Destination.from_row(cleaned))
    return destinations


def _is_missing(value) -> bool:
    # pd.isna on a list/array returns an array, only scalars can be "missing"
    return pd.api.types.is_scalar(value) and pd.isna(value)


def load_destinations(path: Union[str, Path]) -> List[Destination]:
    # ids stay strings ("007" must not become 7)
    frame = pd.read_csv(path, dtype={"id": str})
    return destinations_from_frame(frame)


def apply_batch_result(frame: pd.DataFrame, result: BatchResult) -> pd.DataFrame:
    """
    Return a copy of the table with kilometer / tollPrice / routeOutcome filled in.
    Rows whose id is not part of the batch keep their existing values.
    """
    updated = frame.copy()
    ids = updated["id"].astype(str)

    in_batch = ids.isin(list(result.distances))
    outcome_values = {dest_id: route.outcome.value for dest_id, route in result.outcomes.items()}

    columns = {
        "kilometer": result.distances,
        "tollPrice": result.toll_prices,
        "routeOutcome": outcome_values,
    }
    for column, values in columns.items():
        existing = updated[column] if column in updated.columns else pd.Series(None, index=updated.index, dtype=object)
        updated[column] = ids.map(values).where(in_batch, existing)

    return updated
