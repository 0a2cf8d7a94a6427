"""Metric registry.

Each metric turns a PairContext into its group of record fields. Metrics
are independent of one another; what they share (masks, centroids, axis
profiles) lives in the context and is computed once per pair.

Evaluation is split in two steps so the orchestrator can run every pair
through the same stages:

- measure(ctx): statistics or raw positions of both slices
- convert(ctx, measured, distance_fn): rates from those positions

Statistic-only metrics (summary, similarity) return their final fields from
measure() and convert() passes them through.

Position, abundance and summary fields always describe the "to" slice.
"""

from typing import Callable, Dict, List

from bioticvelocity.grid.stats import summarize, coverage
from bioticvelocity.grid.similarity import SIMILARITY_FIELDS, similarity
from bioticvelocity.grid.velocity import rate, positional_rate

__all__ = ['METRICS', 'level_label', 'metric_fields']


def level_label(level: float) -> str:
    """Field suffix for a quantile level: 0.05 -> '0.05', 0.5 -> '0.5', 1.0 -> '1'."""
    return f"{level:g}"


class Metric:
    """Base class: one requested metric identifier."""

    name = ""
    kind = "positions"   # "stats" metrics are complete after measure()

    def fields(self, levels) -> List[str]:
        raise NotImplementedError

    def measure(self, ctx) -> dict:
        raise NotImplementedError

    def convert(self, ctx, measured: dict, distance_fn: Callable) -> Dict[str, float]:
        return measured


class SummaryMetric(Metric):
    name = "summary"
    kind = "stats"

    def fields(self, levels):
        return (["propSharedCellsNotNA", "fromPropNotNA", "toPropNotNA", "mean", "sum"]
                + [f"quantile_{level_label(q)}" for q in levels]
                + ["prevalence"])

    def measure(self, ctx):
        cov = coverage(ctx.grid_from, ctx.grid_to)
        summary = summarize(ctx.grid_to, ctx.mask.to_mask, ctx.quantiles)
        out = {
            "propSharedCellsNotNA": cov.shared_prop,
            "fromPropNotNA": cov.from_prop,
            "toPropNotNA": cov.to_prop,
            "mean": summary.mean,
            "sum": summary.sum,
        }
        for q, value in zip(ctx.quantiles, summary.quantiles):
            out[f"quantile_{level_label(q)}"] = value
        out["prevalence"] = summary.prevalence
        return out


class SimilarityMetric(Metric):
    name = "similarity"
    kind = "stats"

    def fields(self, levels):
        return list(SIMILARITY_FIELDS)

    def measure(self, ctx):
        return similarity(ctx.grid_from, ctx.grid_to, ctx.mask.shared, warn=ctx.warn)


class CentroidMetric(Metric):
    """Speed of the whole-landscape centroid (vertical change included with elevation)."""
    name = "centroid"

    def fields(self, levels):
        return ["centroidVelocity", "centroidLon", "centroidLat"]

    def measure(self, ctx):
        vertical = 0.0
        if ctx.has_elevation:
            vertical = ctx.elevation_centroid_to - ctx.elevation_centroid_from
        return {"from": ctx.centroid_from, "to": ctx.centroid_to, "vertical": vertical}

    def convert(self, ctx, measured, distance_fn):
        lon, lat = measured["to"]
        return {
            "centroidVelocity": positional_rate(measured["from"], measured["to"], ctx.time_span,
                                                distance_fn, vertical_delta=measured["vertical"]),
            "centroidLon": lon,
            "centroidLat": lat,
        }


class AxisCentroidMetric(Metric):
    """Signed velocity of the centroid along one axis (north or east positive)."""

    def __init__(self, name: str, axis: str):
        self.name = name
        self.axis = axis

    def fields(self, levels):
        suffix = "Lat" if self.axis == "lat" else "Lon"
        return [self.name, f"{self.name}{suffix}"]

    def measure(self, ctx):
        i = 1 if self.axis == "lat" else 0
        return {"from": ctx.centroid_from[i], "to": ctx.centroid_to[i]}

    def convert(self, ctx, measured, distance_fn):
        ref_lon, ref_lat = ctx.reference
        start, end = measured["from"], measured["to"]
        if self.axis == "lat":
            position_from, position_to, suffix = (ref_lon, start), (ref_lon, end), "Lat"
        else:
            position_from, position_to, suffix = (start, ref_lat), (end, ref_lat), "Lon"
        return {
            self.name: positional_rate(position_from, position_to, ctx.time_span,
                                       distance_fn, signed_delta=end - start),
            f"{self.name}{suffix}": end,
        }


class DirectionalCentroidMetric(Metric):
    """Speed and abundance of the part of the range beyond the starting centroid."""

    def __init__(self, name: str, direction: str):
        self.name = name
        self.direction = direction

    def fields(self, levels):
        return [f"{self.name}Velocity", f"{self.name}Abund"]

    def measure(self, ctx):
        start = ctx.directional(self.direction, "from")
        end = ctx.directional(self.direction, "to")
        vertical = 0.0
        if ctx.has_elevation:
            vertical = (ctx.directional_elevation(self.direction, "to")
                        - ctx.directional_elevation(self.direction, "from"))
        return {"from": start, "to": end, "vertical": vertical}

    def convert(self, ctx, measured, distance_fn):
        start, end = measured["from"], measured["to"]
        return {
            f"{self.name}Velocity": positional_rate((start.lon, start.lat), (end.lon, end.lat),
                                                    ctx.time_span, distance_fn,
                                                    vertical_delta=measured["vertical"]),
            f"{self.name}Abund": end.weight,
        }


class AxisQuantileMetric(Metric):
    """Velocity of cumulative-mass quantiles along latitude, longitude or elevation."""

    _position_names = {"lat": "Lat", "lon": "Lon", "elev": "VelocityElev"}

    def __init__(self, name: str, prefix: str, axis: str):
        self.name = name
        self.prefix = prefix
        self.axis = axis

    def _names(self, q):
        label = level_label(q)
        return (f"{self.prefix}QuantVelocity_{label}",
                f"{self.prefix}Quant{self._position_names[self.axis]}_{label}")

    def fields(self, levels):
        out = []
        for q in levels:
            out.extend(self._names(q))
        return out

    def measure(self, ctx):
        return {"from": ctx.axis_quantiles(self.axis, "from"),
                "to": ctx.axis_quantiles(self.axis, "to")}

    def convert(self, ctx, measured, distance_fn):
        ref_lon, ref_lat = ctx.reference
        out = {}
        for q, start, end in zip(ctx.quantiles, measured["from"], measured["to"]):
            velocity_name, position_name = self._names(q)
            if self.axis == "elev":
                velocity = rate(start, end, ctx.time_span)
            elif self.axis == "lat":
                velocity = positional_rate((ref_lon, start), (ref_lon, end), ctx.time_span,
                                           distance_fn, signed_delta=end - start)
            else:
                velocity = positional_rate((start, ref_lat), (end, ref_lat), ctx.time_span,
                                           distance_fn, signed_delta=end - start)
            out[velocity_name] = velocity
            out[position_name] = end
        return out


class ElevationCentroidMetric(Metric):
    """Signed rate of change of the mass-weighted mean elevation (up positive)."""
    name = "elevCentroid"

    def fields(self, levels):
        return ["elevCentroidVelocity", "elevCentroidElev"]

    def measure(self, ctx):
        return {"from": ctx.elevation_centroid_from, "to": ctx.elevation_centroid_to}

    def convert(self, ctx, measured, distance_fn):
        return {
            "elevCentroidVelocity": rate(measured["from"], measured["to"], ctx.time_span),
            "elevCentroidElev": measured["to"],
        }


METRICS = {
    m.name: m for m in (
        SummaryMetric(),
        CentroidMetric(),
        AxisCentroidMetric("nsCentroid", "lat"),
        AxisCentroidMetric("ewCentroid", "lon"),
        DirectionalCentroidMetric("nCentroid", "north"),
        DirectionalCentroidMetric("sCentroid", "south"),
        DirectionalCentroidMetric("eCentroid", "east"),
        DirectionalCentroidMetric("wCentroid", "west"),
        AxisQuantileMetric("nsQuants", "ns", "lat"),
        AxisQuantileMetric("ewQuants", "ew", "lon"),
        SimilarityMetric(),
        ElevationCentroidMetric(),
        AxisQuantileMetric("elevQuants", "elev", "elev"),
    )
}


def metric_fields(names, levels) -> List[str]:
    """All record fields produced by the given metrics, in record order."""
    out = []
    for name in names:
        out.extend(METRICS[name].fields(levels))
    return out
