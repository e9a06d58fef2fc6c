"""Pivot formatter for converting long station samples to one row per station"""

import logging

import numpy as np
import pandas as pd

from station_timeseries.constants import (
    COLLISION_ERROR,
    COLLISION_FIRST,
    COLLISION_LAST,
    COLLISION_POLICIES,
    COLLISION_REJECT,
    DEFAULT_COLLISION_POLICY,
    STATION_ID_FIELD,
)
from station_timeseries.processing.base.spatial_aggregator import (
    INTERVAL_KEY_COLUMN,
    VALUE_COLUMN,
)

logger = logging.getLogger(__name__)


class DuplicateKeyError(ValueError):
    """Raised when a station has more than one record for the same interval key"""


class PivotFormatter:
    """Reshapes (station, interval_key, value) records into one row per station"""

    def __init__(
        self,
        id_field: str = STATION_ID_FIELD,
        collision_policy: str = DEFAULT_COLLISION_POLICY,
    ):
        if collision_policy not in COLLISION_POLICIES:
            raise ValueError(
                f"Invalid collision_policy: {collision_policy}. Must be one of {COLLISION_POLICIES}"
            )
        self.id_field = id_field
        self.collision_policy = collision_policy
        logger.info(
            f"{self.__class__.__name__} initialized (collision policy: {collision_policy})"
        )

    def resolve_collisions(self, records: pd.DataFrame) -> pd.DataFrame:
        """Leave at most one record per (station, interval_key) pair"""
        subset = [self.id_field, INTERVAL_KEY_COLUMN]

        # Missing samples only fill keys that have no value at all
        missing = records[VALUE_COLUMN].isna()
        has_value = (~missing).groupby([records[col] for col in subset]).transform("any")
        redundant = missing & (has_value | records.duplicated(subset=subset, keep="first"))
        if redundant.any():
            logger.debug(f"Dropping {int(redundant.sum())} missing samples shadowed by other records")
            records = records[~redundant]

        colliding = records.duplicated(subset=subset, keep=False)
        if not colliding.any():
            return records

        pairs = records.loc[colliding, subset].drop_duplicates()
        examples = [tuple(p) for p in pairs.head(5).itertuples(index=False)]
        logger.warning(
            f"{len(pairs)} (station, interval key) pairs have more than one record, "
            f"resolving with '{self.collision_policy}' policy: {examples}"
        )

        if self.collision_policy == COLLISION_ERROR:
            raise DuplicateKeyError(
                f"{len(pairs)} (station, interval key) pairs have more than one record: {examples}"
            )
        if self.collision_policy == COLLISION_FIRST:
            return records.drop_duplicates(subset=subset, keep="first")
        if self.collision_policy == COLLISION_LAST:
            return records.drop_duplicates(subset=subset, keep="last")

        assert self.collision_policy == COLLISION_REJECT
        resolved = records.drop_duplicates(subset=subset, keep="first").copy()
        rejected = resolved.set_index(subset).index.isin(pairs.set_index(subset).index)
        resolved.loc[rejected, VALUE_COLUMN] = np.nan
        return resolved

    def pivot(self, records: pd.DataFrame) -> pd.DataFrame:
        """Convert long records to one row per station

        Args:
            records: DataFrame with id, interval_key and value columns

        Returns:
            DataFrame with the id column followed by one column per interval
            key. Rows and columns keep their order of first appearance;
            absent and missing values are NaN.
        """
        for column in (self.id_field, INTERVAL_KEY_COLUMN, VALUE_COLUMN):
            if column not in records.columns:
                raise ValueError(f"Column '{column}' not found in records")

        df = records[[self.id_field, INTERVAL_KEY_COLUMN, VALUE_COLUMN]].copy()
        df[VALUE_COLUMN] = pd.to_numeric(df[VALUE_COLUMN]).astype(float)
        df = self.resolve_collisions(df)

        station_order = pd.unique(df[self.id_field])
        key_order = pd.unique(df[INTERVAL_KEY_COLUMN])

        pivoted = df.pivot(index=self.id_field, columns=INTERVAL_KEY_COLUMN, values=VALUE_COLUMN)
        pivoted = pivoted.reindex(index=station_order, columns=key_order)
        pivoted.columns.name = None
        pivoted.index.name = self.id_field

        logger.debug(f"Pivot conversion complete: {pivoted.shape}")
        return pivoted.reset_index()
