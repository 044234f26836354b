"""Test cases for rendering airspaces as GeoJSON features."""

import uuid

import pytest

from openair_parser.airspace import Airspace
from openair_parser.config import ParserConfig
from openair_parser.errors import CompletenessError
from openair_parser.factory import AirspaceFactory
from openair_parser.util.units import Altitude

from helpers import header, make_block


def airspace_with(coordinates, **kwargs):
    properties = dict(name='TEST', airspace_class='R',
                      lower_ceiling=Altitude.surface(), upper_ceiling=Altitude(1000, 'FT', 'MSL'))
    properties.update(kwargs)
    return Airspace(coordinates=coordinates, consumed_tokens=make_block(*header()), **properties)


class TestAsFeature:

    def test_feature(self, v1_config, triangle_block):
        feature = AirspaceFactory(v1_config).build(triangle_block).as_feature(v1_config)
        assert feature['type'] == 'Feature'
        uuid.UUID(feature['id'])
        assert feature['geometry']['type'] == 'Polygon'
        assert feature['properties'] == {
            'name': 'TEST',
            'class': 'R',
            'upperCeiling': {'value': 1000, 'unit': 'FT', 'referenceDatum': 'MSL'},
            'lowerCeiling': {'value': 0, 'unit': 'FT', 'referenceDatum': 'GND'},
        }

    def test_feature_ids_are_unique(self, v1_config, triangle_block):
        airspace = AirspaceFactory(v1_config).build(triangle_block)
        assert airspace.as_feature(v1_config)['id'] != airspace.as_feature(v1_config)['id']

    @pytest.mark.parametrize("coordinates", [
        [],
        [(0.0, 0.0), (1.0, 1.0)],
        [(0.0, 0.0), (1.0, 1.0), (0.0, 0.0)],
    ])
    def test_insufficient_coordinates(self, coordinates):
        with pytest.raises(CompletenessError) as info:
            airspace_with(coordinates).as_feature()
        assert info.value.line_number == 1
        assert info.value.error_message == (
            f"Geometry of airspace 'TEST' starting on line 1 has insufficient number of coordinates: "
            f"{len(coordinates)}")

    def test_open_triangle_is_enough(self):
        feature = airspace_with([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]).as_feature()
        assert len(feature['geometry']['coordinates'][0]) == 4

    def test_missing_properties(self):
        with pytest.raises(CompletenessError) as info:
            airspace_with([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)], upper_ceiling=None).as_feature()
        assert "Airspace 'TEST' starting on line 1 is missing required properties" in str(info.value)

    def test_version_2_properties(self):
        airspace = airspace_with([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)],
                                 airspace_class='D', type='CTR', identifier='abc',
                                 frequency={'value': '123.505', 'name': 'TOWER'},
                                 transponder_code='0020',
                                 activation_times=[{'start': '2023-12-16T12:00:00Z'}],
                                 by_notam=False)
        properties = airspace.as_feature(ParserConfig())['properties']
        assert list(properties) == ['id', 'name', 'class', 'type', 'upperCeiling', 'lowerCeiling',
                                    'frequency', 'transponderCode', 'activationTimes', 'byNotam']
        assert properties['frequency'] == {'value': '123.505', 'name': 'TOWER'}
        assert properties['transponderCode'] == '0020'
        assert properties['byNotam'] is False

    def test_include_openair(self, triangle_block):
        config = ParserConfig(version=1, include_openair=True)
        feature = AirspaceFactory(config).build(triangle_block).as_feature(config)
        assert feature['properties']['openair'] == '\n'.join(t.line for t in triangle_block)

    def test_line_number_skips_leading_comments(self):
        airspace = Airspace(consumed_tokens=make_block(('COMMENT', {}), *header()))
        assert airspace.line_number == 2
