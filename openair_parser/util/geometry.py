"""Geometry utility functions for airspace coordinate conversion and generation.

Provides coordinate conversion between OpenAIR notation and decimal degrees,
spherical helpers (bearing, distance, destination) and geometric shape
generation (circles, arcs, airway corridors) used by OpenAIR definitions.
All positions are (lon, lat) tuples in decimal degrees.
"""

import math
import re
from dataclasses import dataclass
from typing import Tuple, List, Sequence
import logging

from pyproj import CRS, Geod, Transformer
from shapely.geometry import LineString, Polygon
from shapely.ops import transform

logger = logging.getLogger(__name__)


# Constants
PI2 = math.pi * 2
DEG2RAD = PI2 / 360.0
RAD_EARTH = 6371000.0  # Earth radius in meters

Position = Tuple[float, float]

GEOD = Geod(ellps="WGS84")

# Coordinate notations, e.g. "52:24:33 N 013:11:02 E", "52:24.5N 013:11.0E" or "52.4092 N 13.1839 E"
RE_DMS_LAT = r'(?P<lat_deg>\d{1,2}):(?P<lat_min>\d{1,2}(?:\.\d+)?)(?::(?P<lat_sec>\d{1,2}(?:\.\d+)?))?\s*(?P<lat_hem>[NS])'
RE_DMS_LON = r'(?P<lon_deg>\d{1,3}):(?P<lon_min>\d{1,2}(?:\.\d+)?)(?::(?P<lon_sec>\d{1,2}(?:\.\d+)?))?\s*(?P<lon_hem>[EW])'
re_coord_dms = re.compile('^' + RE_DMS_LAT + r'\s*' + RE_DMS_LON + '$')
re_coord_dec = re.compile(r'^(?P<lat>\d{1,2}(?:\.\d+)?)\s*(?P<lat_hem>[NS])\s*(?P<lon>\d{1,3}(?:\.\d+)?)\s*(?P<lon_hem>[EW])$')


@dataclass
class GeometryConfig:
    """Configuration for geometry generation."""
    steps: int = 100  # Number of points to approximate a full circle


class CoordinateConverter:
    """Converts between OpenAIR coordinate notation and decimal degrees.

    Handles conversion between:
    - DegMinSec ("52:24:33 N 013:11:02 E", also with decimal minutes or seconds)
    - Decimal degrees with hemisphere ("52.4092 N 13.1839 E")
    - Decimal degrees (lon/lat floats)

    Example:
        converter = CoordinateConverter()
        lon_lat = converter.parse("60:00:00 N 010:00:00 E")
        # Returns (10.0, 60.0)  # (lon, lat)
    """

    @staticmethod
    def parse(value: str) -> Position:
        """Convert an OpenAIR coordinate string to decimal degrees.

        Raises:
            ValueError: if the string is not a known coordinate notation or out of range
        """
        value = value.strip()
        match = re_coord_dms.match(value)
        if match:
            lat = CoordinateConverter._dms(match.group('lat_deg'), match.group('lat_min'), match.group('lat_sec'))
            lon = CoordinateConverter._dms(match.group('lon_deg'), match.group('lon_min'), match.group('lon_sec'))
        else:
            match = re_coord_dec.match(value)
            if not match:
                raise ValueError(f"Unknown coordinate definition '{value}'")
            lat = float(match.group('lat'))
            lon = float(match.group('lon'))

        if match.group('lat_hem') == 'S':
            lat = -lat
        if match.group('lon_hem') == 'W':
            lon = -lon
        if abs(lat) > 90 or abs(lon) > 180:
            raise ValueError(f"Coordinate out of range '{value}'")

        return (lon, lat)

    @staticmethod
    def _dms(deg: str, minutes: str, seconds: str) -> float:
        m = float(minutes)
        s = float(seconds) if seconds else 0.0
        if m >= 60 or s >= 60:
            raise ValueError(f"Invalid minutes or seconds '{deg}:{minutes}:{seconds}'")
        return float(deg) + m / 60.0 + s / 3600.0

    @staticmethod
    def decimal_to_dms(coord: Sequence[float]) -> str:
        """Convert decimal degrees to OpenAIR DegMinSec.

        Args:
            coord: (lon, lat) in decimal degrees

        Returns:
            String in "DD:MM:SS N DDD:MM:SS E" format
        """
        lon, lat = coord[0], coord[1]
        lat_str = CoordinateConverter._to_dms(lat, 2, 'N' if lat >= 0 else 'S')
        lon_str = CoordinateConverter._to_dms(lon, 3, 'E' if lon >= 0 else 'W')
        return f"{lat_str} {lon_str}"

    @staticmethod
    def _to_dms(decimal: float, width: int, suffix: str) -> str:
        value = abs(decimal)
        deg = int(value)
        minutes = int((value - deg) * 60)
        sec = int(round(((value - deg) * 60 - minutes) * 60))
        # carry rounded seconds and minutes into the next unit
        if sec == 60:
            minutes += 1
            sec = 0
        if minutes == 60:
            deg += 1
            minutes = 0
        return f"{deg:0{width}d}:{minutes:02d}:{sec:02d} {suffix}"


def destination(origin: Position, distance_m: float, bearing_deg: float) -> Position:
    """Point reached from origin after distance_m meters on the given bearing."""
    lon_rad = origin[0] * DEG2RAD
    lat_rad = origin[1] * DEG2RAD
    brng = bearing_deg * DEG2RAD
    d = distance_m / RAD_EARTH  # Angular distance

    lat2 = math.asin(
        math.sin(lat_rad) * math.cos(d) +
        math.cos(lat_rad) * math.sin(d) * math.cos(brng)
    )
    lon2 = lon_rad + math.atan2(
        math.sin(brng) * math.sin(d) * math.cos(lat_rad),
        math.cos(d) - math.sin(lat_rad) * math.sin(lat2)
    )
    return (lon2 / DEG2RAD, lat2 / DEG2RAD)


def bearing(start: Position, end: Position) -> float:
    """Initial bearing from start to end in degrees, in the range -180 to 180."""
    lon1 = start[0] * DEG2RAD
    lon2 = end[0] * DEG2RAD
    lat1 = start[1] * DEG2RAD
    lat2 = end[1] * DEG2RAD
    a = math.sin(lon2 - lon1) * math.cos(lat2)
    b = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(lon2 - lon1)
    return math.atan2(a, b) / DEG2RAD


def haversine_distance(start: Position, end: Position) -> float:
    """Great circle distance in meters."""
    d_lat = (end[1] - start[1]) * DEG2RAD
    d_lon = (end[0] - start[0]) * DEG2RAD
    lat1 = start[1] * DEG2RAD
    lat2 = end[1] * DEG2RAD
    a = math.sin(d_lat / 2) ** 2 + math.sin(d_lon / 2) ** 2 * math.cos(lat1) * math.cos(lat2)
    return RAD_EARTH * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def normalize_bearing(angle: float) -> float:
    """Map any angle onto a bearing in [0, 360)."""
    result = angle % 360
    if result < 0:
        result += 360
    return result


class GeometryGenerator:
    """Generates geometric shapes for airspace boundaries.

    Creates circles and arcs around a center point. The number of points is
    controlled by GeometryConfig.steps and refers to a full turn.
    """

    def __init__(self, config: GeometryConfig = None):
        """Initialize with optional configuration."""
        self.config = config or GeometryConfig()

    def generate_circle(self, center: Position, radius_m: float) -> List[Position]:
        """Generate a closed circular boundary.

        Args:
            center: Center (lon, lat)
            radius_m: Radius in meters

        Returns:
            List of positions, first equals last
        """
        logger.debug(f"Generating circle: center={center}, radius={radius_m}m")

        circle = []
        for i in range(self.config.steps):
            circle.append(destination(center, radius_m, i * 360.0 / self.config.steps))

        # Close the circle
        circle.append(circle[0])
        return circle

    def generate_arc(self,
                     center: Position,
                     radius_km: float,
                     bearing_from: float,
                     bearing_to: float) -> List[Position]:
        """Generate an arc running clockwise from bearing_from to bearing_to.

        Intermediate points are spaced 360/steps degrees apart; the point on
        bearing_to is always included. Equal bearings produce a full circle.

        Args:
            center: Center (lon, lat)
            radius_km: Radius in kilometers
            bearing_from: Start bearing in degrees
            bearing_to: End bearing in degrees

        Returns:
            List of positions along the arc
        """
        logger.debug(
            f"Generating arc: center={center}, "
            f"bearings={bearing_from}°-{bearing_to}°, radius={radius_km}km"
        )
        radius_m = radius_km * 1000.0
        angle_from = normalize_bearing(bearing_from)
        angle_to = normalize_bearing(bearing_to)
        if angle_from == angle_to:
            return self.generate_circle(center, radius_m)

        start = angle_from
        end = angle_to if angle_to > angle_from else angle_to + 360
        step = 360.0 / self.config.steps

        arc = []
        i = 0
        alpha = start
        while alpha < end:
            arc.append(destination(center, radius_m, alpha))
            i += 1
            alpha = start + i * step
        arc.append(destination(center, radius_m, end))
        return arc


def local_aeqd_crs(lon: float, lat: float) -> CRS:
    """Local azimuthal equidistant CRS centered on lon/lat, in meters."""
    return CRS.from_proj4(
        f"+proj=aeqd +lat_0={lat} +lon_0={lon} +x_0=0 +y_0=0 +datum=WGS84 +units=m +no_defs"
    )


def project_geom(geom, center: Position, inverse: bool = False):
    """Project a shapely geometry to/from a local AEQD centered at center."""
    src = CRS.from_epsg(4326)
    dst = local_aeqd_crs(center[0], center[1])
    fwd = Transformer.from_crs(src, dst, always_xy=True).transform
    inv = Transformer.from_crs(dst, src, always_xy=True).transform
    return transform(inv if inverse else fwd, geom)


def buffer_line(points: Sequence[Position], distance_m: float) -> List[Position]:
    """Buffer a polyline by distance_m on both sides and return the outer ring.

    Buffering happens in a local AEQD projection around the line's centroid
    so the distance is in true meters.
    """
    line = LineString(points)
    centroid = line.centroid
    center = (centroid.x, centroid.y)
    projected = project_geom(line, center=center)
    corridor = projected.buffer(distance_m)
    if corridor.is_empty or corridor.geom_type != 'Polygon':
        raise ValueError(f"Buffer of airway produced {corridor.geom_type}")
    result = project_geom(corridor, center=center, inverse=True)
    logger.debug(f"Buffered airway of {len(points)} points by {distance_m}m")
    return [(x, y) for x, y in result.exterior.coords]


def _segment_intersection(p1: Position, p2: Position, p3: Position, p4: Position):
    denom = (p4[1] - p3[1]) * (p2[0] - p1[0]) - (p4[0] - p3[0]) * (p2[1] - p1[1])
    if denom == 0:
        return None
    nume_a = (p4[0] - p3[0]) * (p1[1] - p3[1]) - (p4[1] - p3[1]) * (p1[0] - p3[0])
    nume_b = (p2[0] - p1[0]) * (p1[1] - p3[1]) - (p2[1] - p1[1]) * (p1[0] - p3[0])
    u_a = nume_a / denom
    u_b = nume_b / denom
    if 0 <= u_a <= 1 and 0 <= u_b <= 1:
        return (p1[0] + u_a * (p2[0] - p1[0]), p1[1] + u_a * (p2[1] - p1[1]))
    return None


def find_self_intersections(ring: Sequence[Position]) -> List[Position]:
    """Find all points where non-adjacent segments of a closed ring cross.

    Adjacent segments, including the first and last segment of the ring,
    share a vertex and are not compared.
    """
    n = len(ring)
    found = []
    for i in range(n - 1):
        for k in range(i, n - 1):
            if abs(i - k) == 1 or abs(i - k) == n - 2:
                continue
            point = _segment_intersection(ring[i], ring[i + 1], ring[k], ring[k + 1])
            if point is not None and point not in found:
                found.append(point)
    return found


def signed_area(ring: Sequence[Position]) -> float:
    """Planar shoelace area; positive for counter-clockwise rings."""
    area = 0.0
    for (x1, y1), (x2, y2) in zip(ring, ring[1:]):
        area += x1 * y2 - x2 * y1
    return area / 2.0


def geodesic_area(polygon: Polygon) -> float:
    """Absolute area of a lon/lat polygon in square meters."""
    area, _ = GEOD.geometry_area_perimeter(polygon)
    return abs(area)
