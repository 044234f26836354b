"""OpenAIR to GeoJSON parser.

Runs tokenizer, segmenter, factory and geometry repair over a whole file.
This is the only place where errors are turned into a result value.
"""

import json
import os
from dataclasses import dataclass
from typing import List, Optional
import logging

from geojson import FeatureCollection

from .config import ParserConfig
from .errors import ParserError
from .factory import AirspaceFactory
from .segmenter import Segmenter
from .targets import openair
from .tokenizer import Tokenizer
from .tokens import Token
from .workers import ConvertTask, convert_blocks

logger = logging.getLogger(__name__)

GEOJSON = 'geojson'
OPENAIR = 'openair'


@dataclass
class ParserResult:
    success: bool
    error: Optional[ParserError] = None


class Parser:
    """Parses OpenAIR files into a GeoJSON FeatureCollection.

    Example:
        parser = Parser(ParserConfig(version=1))
        result = parser.parse("airspace.txt")
        if result.success:
            collection = parser.to_geojson()
    """

    def __init__(self, config: ParserConfig = None):
        self.config = (config or ParserConfig()).validate()
        self.geojson: Optional[FeatureCollection] = None

    def parse(self, filename: str) -> ParserResult:
        if not os.path.isfile(filename):
            raise FileNotFoundError(f"Failed to read file {filename}")
        with open(filename, encoding='utf-8') as fd:
            return self.parse_string(fd.read())

    def parse_string(self, text: str) -> ParserResult:
        self.geojson = None
        try:
            tokens = Tokenizer(self.config).tokenize(text)
            blocks = Segmenter(self.config.version).segment(tokens)
            if self.config.workers > 1:
                features = self.convert_concurrently(blocks)
            else:
                features = self.convert(blocks)
        except ParserError as e:
            logger.error(f"Parsing failed: {e}")
            return ParserResult(success=False, error=e)
        except Exception:
            logger.exception("Unhandled parser error")
            return ParserResult(success=False, error=ParserError("Unhandled parser error"))

        self.geojson = FeatureCollection(features)
        logger.info(f"Parsed {len(features)} airspaces")
        return ParserResult(success=True)

    def convert(self, blocks: List[List[Token]]) -> list:
        factory = AirspaceFactory(self.config)
        airspaces = [airspace for airspace in (factory.build(block) for block in blocks) if airspace is not None]
        return [airspace.as_feature(self.config) for airspace in airspaces]

    def convert_concurrently(self, blocks: List[List[Token]]) -> list:
        tasks = [ConvertTask(id=index, block=block) for index, block in enumerate(blocks)]
        results = convert_blocks(tasks, self.config, self.config.workers)
        # the first failure in input order fails the whole parse
        for result in results:
            if result.error is not None:
                raise result.error
        return [result.feature for result in results if result.feature is not None]

    def to_geojson(self) -> FeatureCollection:
        if self.geojson is None:
            raise RuntimeError("No parser result found. Parse something first.")
        return self.geojson

    def to_openair(self) -> List[str]:
        return openair.to_lines(self.to_geojson(), version=self.config.version)

    def to_format(self, output_format: str) -> str:
        if output_format == GEOJSON:
            return json.dumps(self.to_geojson())
        if output_format == OPENAIR:
            return '\n'.join(self.to_openair())
        raise ValueError(f"Unknown format '{output_format}'")
