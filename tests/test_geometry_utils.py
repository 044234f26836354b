"""Tests for spherical helpers, shape generation and unit conversion."""

import pytest

from openair_parser.util.geometry import (CoordinateConverter, GeometryConfig, GeometryGenerator, bearing,
                                          buffer_line, destination, find_self_intersections, haversine_distance,
                                          normalize_bearing, signed_area)
from openair_parser.util.units import Altitude, m2ft, nm2km, nm2m


class TestCoordinateConverter:

    def test_parse_dms(self):
        """Degrees, minutes and seconds with hemisphere letters."""
        lon, lat = CoordinateConverter.parse("52:24:33 N 013:11:02 E")
        assert lat == pytest.approx(52 + 24 / 60 + 33 / 3600)
        assert lon == pytest.approx(13 + 11 / 60 + 2 / 3600)

    def test_parse_without_spaces_and_southern_western(self):
        lon, lat = CoordinateConverter.parse("33:30:00S 070:45:00W")
        assert lat == pytest.approx(-33.5)
        assert lon == pytest.approx(-70.75)

    def test_parse_decimal_minutes(self):
        lon, lat = CoordinateConverter.parse("47:30.5 N 008:15.25 E")
        assert lat == pytest.approx(47 + 30.5 / 60)
        assert lon == pytest.approx(8 + 15.25 / 60)

    def test_parse_decimal_degrees(self):
        assert CoordinateConverter.parse("52.5 N 13.25 E") == (13.25, 52.5)

    @pytest.mark.parametrize("value", ["52:64:00 N 013:00:00 E", "foo", "52:00:00 013:00:00", "91:00:00 N 013:00:00 E"])
    def test_parse_invalid(self, value):
        with pytest.raises(ValueError):
            CoordinateConverter.parse(value)

    def test_decimal_to_dms(self):
        assert CoordinateConverter.decimal_to_dms((13.183889, 52.409167)) == "52:24:33 N 013:11:02 E"
        assert CoordinateConverter.decimal_to_dms((-0.5, -10.0)) == "10:00:00 S 000:30:00 W"

    def test_decimal_to_dms_carries_rounded_seconds(self):
        assert CoordinateConverter.decimal_to_dms((10.9999999, 49.9999999)) == "50:00:00 N 011:00:00 E"


class TestSphericalHelpers:

    def test_bearing_cardinal_directions(self):
        assert bearing((0, 0), (0, 1)) == pytest.approx(0)
        assert bearing((0, 0), (1, 0)) == pytest.approx(90)
        assert bearing((0, 0), (0, -1)) == pytest.approx(180)
        assert bearing((0, 0), (-1, 0)) == pytest.approx(-90)

    def test_distance_of_one_degree_latitude(self):
        assert haversine_distance((0, 0), (0, 1)) == pytest.approx(111195, rel=1e-3)

    def test_destination_roundtrip(self):
        target = destination((10, 50), 10000, 45)
        assert haversine_distance((10, 50), target) == pytest.approx(10000, rel=1e-6)
        assert bearing((10, 50), target) == pytest.approx(45, abs=0.1)

    @pytest.mark.parametrize("angle,expected", [(0, 0), (360, 0), (-90, 270), (450, 90), (180, 180)])
    def test_normalize_bearing(self, angle, expected):
        assert normalize_bearing(angle) == expected


class TestGeometryGenerator:

    def test_circle_is_closed_with_configured_steps(self):
        generator = GeometryGenerator(GeometryConfig(steps=36))
        circle = generator.generate_circle((10, 50), nm2m(5))
        assert len(circle) == 37
        assert circle[0] == circle[-1]
        for point in circle:
            assert haversine_distance((10, 50), point) == pytest.approx(9260, rel=1e-6)

    def test_arc_runs_clockwise_and_ends_on_end_bearing(self):
        generator = GeometryGenerator(GeometryConfig(steps=100))
        arc = generator.generate_arc((0, 0), 10, 0, 90)
        bearings = [normalize_bearing(bearing((0, 0), point)) for point in arc]
        assert bearings[0] == pytest.approx(0, abs=1e-6)
        assert bearings[-1] == pytest.approx(90, abs=1e-6)
        assert bearings == sorted(bearings)

    def test_arc_across_north(self):
        """An arc from 350 to 10 degrees passes north, not south."""
        generator = GeometryGenerator(GeometryConfig(steps=36))
        arc = generator.generate_arc((0, 0), 10, 350, 10)
        assert len(arc) == 3
        assert all(point[1] > 0 for point in arc)

    def test_arc_with_equal_bearings_is_full_circle(self):
        generator = GeometryGenerator(GeometryConfig(steps=10))
        arc = generator.generate_arc((0, 0), 10, 90, 90)
        assert len(arc) == 11
        assert arc[0] == arc[-1]


class TestBufferLine:

    def test_corridor_surrounds_centerline(self):
        ring = buffer_line([(10.0, 50.0), (10.5, 50.0)], nm2m(2))
        assert ring[0] == ring[-1]
        lats = [lat for _, lat in ring]
        # 2 NM is roughly 0.033 degrees latitude
        assert max(lats) - 50.0 == pytest.approx(3704 / 111195, rel=0.05)
        assert 50.0 - min(lats) == pytest.approx(3704 / 111195, rel=0.05)


class TestSelfIntersections:

    def test_square_has_none(self):
        assert find_self_intersections([(0, 0), (1, 0), (1, 1), (0, 1), (0, 0)]) == []

    def test_bowtie_crossing(self, bowtie):
        (x, y), = find_self_intersections(bowtie)
        assert x == pytest.approx(2 / 3)
        assert y == pytest.approx(2 / 3)

    def test_signed_area_sign(self):
        assert signed_area([(0, 0), (1, 0), (1, 1), (0, 0)]) > 0
        assert signed_area([(0, 0), (1, 1), (1, 0), (0, 0)]) < 0


class TestUnits:

    def test_altitude_to_feet(self):
        assert Altitude(65, 'FL', 'STD').to_feet() == 6500
        assert Altitude(1000, 'M', 'MSL').to_feet() == pytest.approx(3280.84, rel=1e-5)
        assert Altitude(2500, 'FT', 'GND').to_feet() == 2500

    def test_convert_keeps_flight_levels(self):
        assert Altitude(100, 'FL', 'STD').convert('M') == Altitude(100, 'FL', 'STD')
        assert Altitude(1000, 'FT', 'MSL').convert('M').value == pytest.approx(304.8)

    def test_openair_rendering(self):
        assert Altitude(65, 'FL', 'STD').to_openair() == "FL65"
        assert Altitude.surface().to_openair() == "GND"
        assert Altitude(2500, 'FT', 'MSL').to_openair() == "2500FT AMSL"
        assert Altitude(300, 'M', 'GND').to_openair() == "300M AGL"

    def test_conversions(self):
        assert nm2m(1) == 1852.0
        assert nm2km(1) == pytest.approx(1.852)
        assert m2ft(0.3048) == pytest.approx(1.0)
