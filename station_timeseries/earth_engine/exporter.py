"""Station temperature series built and exported with Google Earth Engine"""

import logging
from typing import List

import ee

from station_timeseries.constants import COLLISION_FIRST, COLLISION_LAST, COLLISION_REJECT
from station_timeseries.earth_engine.config import ExportConfig
from station_timeseries.earth_engine.models import GEEConfig
from station_timeseries.processing.base.processor import BaseProcessor
from station_timeseries.utils.stations import load_stations

logger = logging.getLogger(__name__)

INTERVAL_KEY_PROPERTY = "interval_key"
VALUE_PROPERTY = "value"


class TemperatureSeriesExporter(BaseProcessor):
    """Composes aggregate -> sample -> pivot -> merge server-side and exports the result

    Nothing is evaluated locally: every method returns a lazy ee object and
    the only side effect is the export task started by `process`.
    """

    def __init__(self, config: ExportConfig, gee_config: GEEConfig = None):
        """Initialize exporter with Google Earth Engine"""
        super().__init__(config.data_dir, config.debug)
        self.config = config
        self.gee_config = gee_config or GEEConfig(drive_folder=config.drive_folder)
        if config.project:
            ee.Initialize(project=config.project)
        else:
            ee.Initialize()

    def load_stations(self) -> ee.FeatureCollection:
        """Get station points as a FeatureCollection"""
        if self.config.stations_asset:
            logger.info(f"Using station asset {self.config.stations_asset}")
            return ee.FeatureCollection(self.config.stations_asset)

        stations = load_stations(self.config.stations_path, self.config.id_field)
        features = [
            ee.Feature(
                ee.Geometry.Point([row.geometry.x, row.geometry.y], self.gee_config.crs),
                {self.config.id_field: row[self.config.id_field]},
            )
            for _, row in stations.iterrows()
        ]
        return ee.FeatureCollection(features)

    def load_archive(self, stations: ee.FeatureCollection) -> ee.ImageCollection:
        """Filter the raster archive by date range and station bounds"""
        return (
            ee.ImageCollection(self.gee_config.dataset)
            .filterDate(self.config.origin, self.config.end)
            .filterBounds(stations.geometry())
            .select(self.config.band)
        )

    def build_frames(self, archive: ee.ImageCollection) -> ee.ImageCollection:
        """Average the archive within each observation interval

        Empty intervals become fully masked images so that sampling yields
        no value instead of zero.
        """
        band = self.config.band
        size = self.config.interval_size
        unit = self.config.interval_unit
        origin = ee.Date(self.config.origin)
        empty = ee.Image.constant(0).toFloat().updateMask(0).rename(band)

        def bucket(i):
            i = ee.Number(i)
            start = origin.advance(i.multiply(size), unit)
            end = origin.advance(i.add(1).multiply(size), unit)
            window = archive.filterDate(start, end)
            mean = ee.Image(
                ee.Algorithms.If(window.size().gt(0), window.mean().rename(band), empty)
            )
            return mean.set(
                {
                    "system:time_start": start.millis(),
                    "system:time_end": end.millis(),
                    "time_start": start.millis(),
                    "time_end": end.millis(),
                    INTERVAL_KEY_PROPERTY: start.format(self.gee_config.key_format),
                }
            )

        indices = ee.List.sequence(0, self.config.interval_count - 1)
        return ee.ImageCollection.fromImages(indices.map(bucket))

    def sample_frames(
        self, frames: ee.ImageCollection, stations: ee.FeatureCollection
    ) -> ee.FeatureCollection:
        """Mean of each frame around each station: one feature per (station, interval)"""
        id_field = self.config.id_field
        reducer_output = self.gee_config.reducer_output

        def sample(image):
            image = ee.Image(image)
            key = image.get(INTERVAL_KEY_PROPERTY)
            reduced = image.reduceRegions(
                collection=stations,
                reducer=ee.Reducer.mean(),
                scale=self.config.scale,
            )
            return reduced.map(
                lambda f: ee.Feature(
                    None,
                    {
                        id_field: f.get(id_field),
                        INTERVAL_KEY_PROPERTY: key,
                        VALUE_PROPERTY: f.get(reducer_output),
                    },
                )
            )

        return ee.FeatureCollection(frames.map(sample)).flatten()

    def _fold_fields(self, samples: ee.FeatureCollection) -> ee.Dictionary:
        """Fold one station's samples into key -> value following the collision policy"""
        policy = self.config.collision_policy

        def keep_last(feature, fields):
            feature = ee.Feature(feature)
            fields = ee.Dictionary(fields)
            return fields.set(
                feature.getString(INTERVAL_KEY_PROPERTY), feature.get(VALUE_PROPERTY)
            )

        def keep_first(feature, fields):
            feature = ee.Feature(feature)
            fields = ee.Dictionary(fields)
            key = feature.getString(INTERVAL_KEY_PROPERTY)
            return ee.Algorithms.If(
                fields.contains(key), fields, fields.set(key, feature.get(VALUE_PROPERTY))
            )

        if policy == COLLISION_FIRST:
            return ee.Dictionary(samples.iterate(keep_first, ee.Dictionary({})))

        fields = ee.Dictionary(samples.iterate(keep_last, ee.Dictionary({})))
        if policy == COLLISION_LAST:
            return fields

        if policy == COLLISION_REJECT:
            keys = ee.List(samples.aggregate_array(INTERVAL_KEY_PROPERTY))
            colliding = keys.distinct().map(
                lambda k: ee.Algorithms.If(keys.frequency(k).gt(1), k, None), True
            )
            return fields.remove(colliding, True)

        raise ValueError(f"Collision policy '{policy}' is not supported server-side")

    def format_rows(
        self, samples: ee.FeatureCollection, stations: ee.FeatureCollection
    ) -> ee.FeatureCollection:
        """One feature per station with one property per interval key"""
        id_field = self.config.id_field
        valid = samples.filter(ee.Filter.notNull([VALUE_PROPERTY]))

        def to_row(station):
            station_id = ee.Feature(station).get(id_field)
            own = valid.filter(ee.Filter.eq(id_field, station_id))
            return ee.Feature(None, self._fold_fields(own)).set(id_field, station_id)

        return stations.map(to_row)

    def merge_rows(self, rows: ee.FeatureCollection) -> ee.FeatureCollection:
        """Keep the maximum value among properties sharing a date prefix"""
        id_field = self.config.id_field
        prefix_length = self.config.prefix_length

        def merge(row):
            row = ee.Feature(row)
            station_id = row.get(id_field)
            fields = row.toDictionary().remove([id_field], True)

            def fold(key, merged):
                key = ee.String(key)
                merged = ee.Dictionary(merged)
                prefix = key.slice(0, prefix_length)
                value = ee.Number(fields.get(key))
                return merged.set(
                    prefix,
                    ee.Algorithms.If(
                        merged.contains(prefix),
                        value.max(merged.getNumber(prefix)),
                        value,
                    ),
                )

            merged = ee.Dictionary(fields.keys().iterate(fold, ee.Dictionary({})))
            return ee.Feature(None, merged).set(id_field, station_id)

        return rows.map(merge)

    def build(self) -> ee.FeatureCollection:
        """Compose the full lazy pipeline"""
        stations = self.load_stations()
        archive = self.load_archive(stations)
        frames = self.build_frames(archive)
        samples = self.sample_frames(frames, stations)
        rows = self.format_rows(samples, stations)
        return self.merge_rows(rows)

    def process(self) -> List[str]:
        """Build the pipeline and start the Drive export task"""
        logger.info(
            f"Building {self.config.band} series from {self.config.origin} to {self.config.end} "
            f"({self.config.interval_count} x {self.config.interval_size} {self.config.interval_unit}) "
            f"at {self.config.scale} m"
        )
        rows = self.build()

        selectors = self.config.get_output_columns()
        task = ee.batch.Export.table.toDrive(
            collection=rows,
            description=self.gee_config.file_prefix,
            folder=self.gee_config.drive_folder,
            fileNamePrefix=self.gee_config.file_prefix,
            fileFormat=self.gee_config.export_format,
            selectors=selectors,
        )
        task.start()

        logger.info(
            f"Started export task {task.id} ({len(selectors) - 1} date columns) "
            f"to Drive folder '{self.gee_config.drive_folder}'"
        )
        return [task.id]
