# OpenAIR target module

from datetime import date

from ..config import VERSION_2
from ..util.geometry import CoordinateConverter
from ..util.units import Altitude


def c2air(c):
    """(lon, lat) to OpenAIR format (Deg:Min:Sec)"""
    return CoordinateConverter.decimal_to_dms(c)


def to_lines(collection, version=VERSION_2):
    """Render a FeatureCollection created by the parser as OpenAIR lines."""
    lines = []
    header = "2.0" if version == VERSION_2 else "1.0"

    for feature in collection['features']:
        properties = feature['properties']
        geometry = feature['geometry']
        frequency = properties.get('frequency') or {}

        # polygon coordinates are wrapped in a ring list
        if geometry['type'] == 'Polygon':
            coordinates = geometry['coordinates'][0]
        else:
            coordinates = geometry['coordinates']

        lines.append("* Version %s, %d" % (header, date.today().year))
        lines.append("")
        lines.append("AC %s" % properties['class'])
        if version == VERSION_2 and properties.get('type') is not None:
            lines.append("AY %s" % properties['type'])
        lines.append("AN %s" % properties['name'].upper())
        if version == VERSION_2:
            if properties.get('id') is not None:
                lines.append("AI %s" % properties['id'])
            if frequency.get('value') is not None:
                lines.append("AF %s" % frequency['value'])
            if frequency.get('name') is not None:
                lines.append("AG %s" % frequency['name'])
            if properties.get('transponderCode') is not None:
                lines.append("AX %s" % properties['transponderCode'])
            if properties.get('byNotam'):
                lines.append("AA NONE/NONE")
            for window in properties.get('activationTimes') or []:
                lines.append("AA %s/%s" % (window.get('start', 'NONE'), window.get('end', 'NONE')))
        lines.append("AL %s" % Altitude.from_dict(properties['lowerCeiling']).to_openair())
        lines.append("AH %s" % Altitude.from_dict(properties['upperCeiling']).to_openair())

        for point in coordinates:
            lines.append("DP %s" % c2air(point))
        # blank line separates definition blocks
        lines.append("")

    return lines


def dumps(logger, filename, collection, version=VERSION_2):
    """Write a FeatureCollection to <filename>.txt and return the path."""
    path = filename + ".txt"
    logger.info("Writing %s with %d airspaces", path, len(collection['features']))
    with open(path, "w", encoding="utf-8") as air:
        for line in to_lines(collection, version):
            air.write(line + "\n")
    return path
