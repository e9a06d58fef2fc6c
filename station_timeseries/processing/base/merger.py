"""Merger collapsing interval columns that share a date prefix"""

import logging
from typing import Any, Dict, List, Mapping

import pandas as pd

from station_timeseries.constants import DATE_PREFIX_LENGTH, STATION_ID_FIELD

logger = logging.getLogger(__name__)


class DuplicateDateMerger:
    """Keeps the maximum value among columns whose keys share a date prefix

    Missing values are excluded from the maximum; a group whose values are
    all missing stays missing.
    """

    def __init__(
        self,
        id_field: str = STATION_ID_FIELD,
        prefix_length: int = DATE_PREFIX_LENGTH,
    ):
        if prefix_length <= 0:
            raise ValueError(f"prefix_length must be positive, got {prefix_length}")
        self.id_field = id_field
        self.prefix_length = prefix_length

    def prefix(self, key: Any) -> str:
        return str(key)[: self.prefix_length]

    def merge(self, wide: pd.DataFrame) -> pd.DataFrame:
        """Merge every row of a pivoted frame

        Returns:
            DataFrame with the id column followed by one column per distinct
            prefix, in order of first appearance
        """
        if self.id_field not in wide.columns:
            raise ValueError(f"Column '{self.id_field}' not found in data")

        value_cols = [col for col in wide.columns if col != self.id_field]
        if not value_cols:
            return wide[[self.id_field]].copy()

        prefixes = [self.prefix(col) for col in value_cols]
        distinct = list(dict.fromkeys(prefixes))
        if len(distinct) < len(value_cols):
            logger.info(
                f"Merging {len(value_cols)} columns into {len(distinct)} date columns"
            )

        values = wide[value_cols].apply(pd.to_numeric).astype(float)
        values.columns = range(len(value_cols))
        merged = values.T.groupby(prefixes, sort=False).max().T
        merged = merged[distinct]
        merged.insert(0, self.id_field, wide[self.id_field].values)
        merged.columns.name = None
        return merged.reset_index(drop=True)

    def merge_row(self, row: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge a single wide row given as a mapping"""
        merged = self.merge(pd.DataFrame([dict(row)]))
        return merged.iloc[0].to_dict()

    def merged_columns(self, keys: List[str]) -> List[str]:
        """Distinct prefixes of `keys` in order of first appearance"""
        return list(dict.fromkeys(self.prefix(key) for key in keys))
