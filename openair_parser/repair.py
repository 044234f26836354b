"""Geometry repair and validation for airspace rings.

A raw ring is always prepared the same way: close it, drop duplicate points,
drop points that fold back onto an earlier edge and wind it counter-clockwise.
If the result is not a simple polygon and fixing is enabled, the repair falls
back through an ordered chain of steps, each reporting success or failure:

    prepare -> unkink (largest simple piece) -> envelope of the input points

The envelope is lossy by nature and only used when nothing else works.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import logging

from geojson import LineString as GeoJSONLineString
from geojson import Polygon as GeoJSONPolygon
from shapely.geometry import LineString, MultiPoint, Polygon
from shapely.geometry.polygon import orient
from shapely.ops import polygonize, unary_union
from shapely.validation import explain_validity

from .config import LINESTRING, ParserConfig
from .errors import GeometryError
from .util.geometry import Position, bearing, find_self_intersections, geodesic_area, haversine_distance

logger = logging.getLogger(__name__)

TOO_SMALL = "The polygon dimensions are too small to create a polygon."


@dataclass
class RepairAttempt:
    """Outcome of one repair step; exactly one of ring and error is set."""
    step: str
    ring: Optional[List[Position]] = None
    error: Optional[str] = None
    lossy: bool = False

    @property
    def ok(self) -> bool:
        return self.ring is not None


class GeometryRepair:

    def __init__(self, config: ParserConfig = None):
        self.config = config or ParserConfig()

    def finalize(self, coordinates: Sequence[Sequence[float]], name: str = None, line_number: int = None):
        """Turn a raw ring into a GeoJSON geometry.

        LINESTRING output returns the raw coordinates untouched. Otherwise the
        prepared polygon is returned if valid, or repaired when fix_geometry is
        set.

        Raises:
            GeometryError: invalid geometry with validate_geometry set, or no
                usable ring at all
        """
        if self.config.output_geometry == LINESTRING:
            return GeoJSONLineString([list(c) for c in coordinates])

        prepared = self.prepare(coordinates)
        result = prepared
        intersections: List[Position] = []
        if prepared.ok:
            valid, intersections = self.check(prepared.ring)
            if valid:
                return as_polygon(prepared.ring)

        if self.config.fix_geometry:
            fixed = self.fix(coordinates, prepared)
            if fixed.ok:
                valid, fixed_intersections = self.check(fixed.ring)
                if valid:
                    logger.warning(f"Airspace '{name}' on line {line_number} repaired by step '{fixed.step}'")
                    return as_polygon(fixed.ring)
                result = fixed
                intersections = fixed_intersections

        if not result.ok:
            raise GeometryError(
                f"Geometry of airspace '{name}' starting on line {line_number} is invalid. {result.error}",
                line_number=line_number,
                geometry=raw_line_string(coordinates))

        if self.config.validate_geometry:
            if intersections:
                points = ' and '.join(f"{lat},{lon}" for lon, lat in intersections)
                message = (f"Geometry of airspace '{name}' starting on line {line_number} "
                           f"is invalid due to a self intersection at '{points}'")
            else:
                message = (f"Geometry of airspace '{name}' starting on line {line_number} is invalid. "
                           f"{explain_validity(Polygon(result.ring))}")
            raise GeometryError(message,
                                line_number=line_number,
                                geometry=raw_line_string(coordinates),
                                self_intersections=[list(p) for p in intersections] or None)

        return as_polygon(result.ring)

    def check(self, ring: List[Position]) -> Tuple[bool, List[Position]]:
        """Ring is valid when shapely agrees and no self-intersection is found."""
        intersections = find_self_intersections(ring)
        return Polygon(ring).is_valid and not intersections, intersections

    # repair steps

    def prepare(self, coordinates: Sequence[Sequence[float]]) -> RepairAttempt:
        ring = [(c[0], c[1]) for c in coordinates]
        if not ring:
            return RepairAttempt('prepare', error=TOO_SMALL)
        if ring[0] != ring[-1]:
            ring.append(ring[0])
        ring = self.remove_duplicates(ring)
        if len(ring) < 4:
            return RepairAttempt('prepare', error=TOO_SMALL)
        ring = self.remove_intermediate_points(ring)
        if len(ring) < 4:
            return RepairAttempt('prepare', error=TOO_SMALL)
        return RepairAttempt('prepare', ring=counter_clockwise(Polygon(ring)))

    def fix(self, coordinates: Sequence[Sequence[float]], prepared: RepairAttempt) -> RepairAttempt:
        attempt = prepared
        for step in (self.unkink, self.envelope):
            attempt = step(coordinates, prepared)
            if attempt.ok:
                return attempt
            logger.debug(f"Repair step '{attempt.step}' failed: {attempt.error}")
        return attempt

    def unkink(self, coordinates: Sequence[Sequence[float]], prepared: RepairAttempt) -> RepairAttempt:
        """Split the ring at its self-intersections and keep the largest piece."""
        if not prepared.ok:
            return RepairAttempt('unkink', error=prepared.error)
        pieces = list(polygonize(unary_union(LineString(prepared.ring))))
        if not pieces:
            return RepairAttempt('unkink', error="Failed to split geometry into simple polygons.")

        largest = pieces[0]
        largest_area = geodesic_area(largest)
        for piece in pieces[1:]:
            area = geodesic_area(piece)
            # later pieces win ties
            if area >= largest_area:
                largest, largest_area = piece, area
        logger.debug(f"Unkinked ring into {len(pieces)} pieces, keeping {largest_area:.0f} m2")
        return RepairAttempt('unkink', ring=counter_clockwise(Polygon(largest.exterior)), lossy=len(pieces) > 1)

    def envelope(self, coordinates: Sequence[Sequence[float]], prepared: RepairAttempt) -> RepairAttempt:
        """Bounding envelope of the input points."""
        if not coordinates:
            return RepairAttempt('envelope', error=TOO_SMALL)
        envelope = MultiPoint([(c[0], c[1]) for c in coordinates]).envelope
        if envelope.area == 0:
            return RepairAttempt('envelope', error=TOO_SMALL)
        return RepairAttempt('envelope', ring=counter_clockwise(envelope), lossy=True)

    # ring preparation

    def remove_duplicates(self, ring: List[Position]) -> List[Position]:
        """Drop points within consume_duplicate_buffer meters of an already kept point."""
        buffer = self.config.consume_duplicate_buffer
        kept: List[Position] = []
        for point in ring[:-1]:
            if any(haversine_distance(other, point) <= buffer for other in kept):
                continue
            kept.append(point)
        if kept:
            kept.append(kept[0])
        return kept

    def remove_intermediate_points(self, ring: List[Position]) -> List[Position]:
        """Drop points lying on an edge between two earlier consecutive points."""
        fixed = [ring[0]]
        for k in range(1, len(ring)):
            if not self.is_intermediate(ring, k):
                fixed.append(ring[k])
        if fixed[0] != fixed[-1]:
            fixed.append(fixed[0])
        return fixed

    def is_intermediate(self, ring: List[Position], k: int) -> bool:
        point = ring[k]
        variance = self.config.greedy_variance
        for i in range(k - 1):
            a, b = ring[i], ring[i + 1]
            if a == point or b == point:
                continue
            delta = abs(bearing(point, a) - bearing(point, b))
            if 180 - variance <= delta <= 180 + variance:
                return True
        return False


def counter_clockwise(polygon: Polygon) -> List[Position]:
    return [(x, y) for x, y in orient(polygon, sign=1.0).exterior.coords]


def as_polygon(ring: List[Position]) -> GeoJSONPolygon:
    return GeoJSONPolygon([[list(p) for p in ring]])


def raw_line_string(coordinates: Sequence[Sequence[float]]) -> GeoJSONLineString:
    return GeoJSONLineString([list(c) for c in coordinates])
