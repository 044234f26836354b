#!/usr/bin/env python3
"""Command line converter from OpenAIR to GeoJSON or normalized OpenAIR."""

import argparse
import logging
import os
import sys

from .config import LINESTRING, POLYGON, VERSION_1, VERSION_2, ParserConfig
from .parser import GEOJSON, OPENAIR, Parser
from .targets import geojson, openair

logger = logging.getLogger(__name__)


def build_argument_parser():
    parser = argparse.ArgumentParser(description="Convert OpenAIR airspace files to GeoJSON")
    parser.add_argument('-i', '--input-filepath', required=True,
                        help='The input file path to the OpenAIR file')
    parser.add_argument('-o', '--output-filepath', required=True,
                        help='The output file path; the extension is added by the chosen format')
    parser.add_argument('--validate', action='store_true',
                        help='Validate geometries')
    parser.add_argument('--fix-geometry', action='store_true',
                        help='Try to fix invalid geometries')
    parser.add_argument('--version', type=int, choices=[VERSION_1, VERSION_2], default=VERSION_2,
                        help='OpenAIR format version (default: 2)')
    parser.add_argument('--format', choices=[GEOJSON, OPENAIR], default=GEOJSON,
                        help='Output format (default: geojson)')
    parser.add_argument('--output-geometry', choices=[POLYGON, LINESTRING], default=POLYGON,
                        help='Geometry type of the output features (default: POLYGON)')
    parser.add_argument('--workers', type=int, default=1,
                        help='Number of worker threads (default: 1)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')
    return parser


def main(argv=None):
    args = build_argument_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s: %(message)s')

    config = ParserConfig(
        version=args.version,
        validate_geometry=args.validate,
        fix_geometry=args.fix_geometry,
        output_geometry=args.output_geometry,
        workers=args.workers,
    )
    parser = Parser(config)
    try:
        result = parser.parse(args.input_filepath)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    if not result.success:
        logger.error(str(result.error))
        return 1

    filename, _ = os.path.splitext(args.output_filepath)
    if args.format == OPENAIR:
        openair.dumps(logger, filename, parser.to_geojson(), version=args.version)
    else:
        geojson.dumps(logger, filename, parser.to_geojson())
    logger.info(f"Successfully parsed {len(parser.to_geojson()['features'])} airspaces")
    return 0


if __name__ == '__main__':
    sys.exit(main())
