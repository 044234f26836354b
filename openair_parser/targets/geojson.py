# GeoJSON output

import geojson
from geojson import FeatureCollection


def dumps(logger, filename, collection):
    """Write a FeatureCollection to <filename>.geojson and return the path."""
    path = filename + ".geojson"
    logger.info("Writing %s with %d features", path, len(collection['features']))

    for feature in collection['features']:
        if not feature.get('geometry'):
            logger.error("Feature without geometry: %s", feature.get('properties'))

    with open(path, "w", encoding="utf-8") as fd:
        fd.write(geojson.dumps(collection, indent=2))
    return path


def loads(filename):
    """Read a FeatureCollection written by dumps."""
    with open(filename, encoding="utf-8") as fd:
        data = geojson.loads(fd.read())
    if "features" in data:
        return FeatureCollection(data["features"])
    return FeatureCollection([data])
