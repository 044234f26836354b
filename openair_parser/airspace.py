"""Airspace aggregate built from one token block and rendered as GeoJSON."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from uuid import uuid4
import logging

from geojson import Feature, LineString

from .config import ParserConfig
from .errors import CompletenessError
from .repair import GeometryRepair
from .tokens import Token
from .util.geometry import Position
from .util.units import Altitude

logger = logging.getLogger(__name__)


@dataclass
class Airspace:
    name: Optional[str] = None
    airspace_class: Optional[str] = None
    type: Optional[str] = None
    identifier: Optional[str] = None
    upper_ceiling: Optional[Altitude] = None
    lower_ceiling: Optional[Altitude] = None
    frequency: Dict[str, str] = field(default_factory=dict)
    transponder_code: Optional[str] = None
    activation_times: List[Dict[str, str]] = field(default_factory=list)
    by_notam: Optional[bool] = None
    coordinates: List[Position] = field(default_factory=list)
    consumed_tokens: List[Token] = field(default_factory=list)

    @property
    def line_number(self) -> Optional[int]:
        """Line of the first directive of the block, usually the AC line."""
        for token in self.consumed_tokens:
            if not token.is_ignored:
                return token.line_number
        return None

    def is_complete(self) -> bool:
        return (self.name is not None
                and self.airspace_class is not None
                and self.upper_ceiling is not None
                and self.lower_ceiling is not None
                and len(self.coordinates) > 0)

    def as_line_string(self) -> LineString:
        return LineString([list(c) for c in self.coordinates])

    def as_feature(self, config: ParserConfig = None) -> Feature:
        """Render the airspace as a GeoJSON feature.

        Raises:
            CompletenessError: too few coordinates or missing required properties
            GeometryError: the ring is invalid and could not be repaired
        """
        config = config or ParserConfig()
        count = len(self.coordinates)
        if count <= 2 or (count == 3 and tuple(self.coordinates[0]) == tuple(self.coordinates[2])):
            raise CompletenessError(
                f"Geometry of airspace '{self.name}' starting on line {self.line_number} "
                f"has insufficient number of coordinates: {count}",
                line_number=self.line_number,
                geometry=self.as_line_string())
        if not self.is_complete():
            raise CompletenessError(
                f"Airspace '{self.name}' starting on line {self.line_number} is missing required properties",
                line_number=self.line_number,
                geometry=self.as_line_string())

        geometry = GeometryRepair(config).finalize(self.coordinates, name=self.name, line_number=self.line_number)
        logger.debug(f"Airspace '{self.name}' rendered as {geometry['type']}")
        return Feature(id=str(uuid4()), geometry=geometry, properties=self.properties(config))

    def properties(self, config: ParserConfig) -> Dict[str, Any]:
        properties: Dict[str, Any] = {}
        if self.identifier is not None:
            properties['id'] = self.identifier
        properties['name'] = self.name
        properties['class'] = self.airspace_class
        if self.type is not None:
            properties['type'] = self.type
        properties['upperCeiling'] = self.upper_ceiling.as_dict()
        properties['lowerCeiling'] = self.lower_ceiling.as_dict()
        if self.frequency:
            properties['frequency'] = dict(self.frequency)
        if self.transponder_code is not None:
            properties['transponderCode'] = self.transponder_code
        if self.activation_times:
            properties['activationTimes'] = [dict(window) for window in self.activation_times]
        if self.by_notam is not None:
            properties['byNotam'] = self.by_notam
        if config.include_openair:
            properties['openair'] = '\n'.join(token.line for token in self.consumed_tokens)
        return properties
