"""Parser configuration."""

from dataclasses import dataclass, field
from typing import List, Optional

from .util.units import FEET, METERS

VERSION_1 = 1
VERSION_2 = 2

POLYGON = 'POLYGON'
LINESTRING = 'LINESTRING'

# Classes accepted by the AC command
VERSION_1_CLASSES = [
    # ICAO classes
    'A', 'B', 'C', 'D', 'E', 'F', 'G',
    # classes commonly found in openair files
    'R', 'Q', 'P', 'GP', 'WAVE', 'W', 'GLIDING', 'RMZ', 'TMZ', 'CTR',
]
VERSION_2_CLASSES = ['A', 'B', 'C', 'D', 'E', 'F', 'G', 'UNCLASSIFIED']


@dataclass
class ParserConfig:
    """Options shared by tokenizer, factory and geometry repair.

    Empty allowed_classes selects the class list of the format version.
    Empty allowed_types accepts any AY value.
    """
    version: int = VERSION_2
    allowed_classes: List[str] = field(default_factory=list)
    allowed_types: List[str] = field(default_factory=list)
    unlimited: int = 999  # flight level used for "UNL" ceilings
    geometry_detail: int = 100  # points per full circle
    validate_geometry: bool = True
    fix_geometry: bool = False
    output_geometry: str = POLYGON
    consume_duplicate_buffer: float = 0  # meters
    greedy_variance: float = 0  # degrees
    include_openair: bool = False
    target_alt_unit: Optional[str] = None
    round_alt_values: bool = False
    workers: int = 1

    @property
    def airspace_classes(self) -> List[str]:
        if self.allowed_classes:
            return self.allowed_classes
        return VERSION_1_CLASSES if self.version == VERSION_1 else VERSION_2_CLASSES

    def validate(self) -> 'ParserConfig':
        if self.version not in (VERSION_1, VERSION_2):
            raise ValueError(f"Unknown format version: {self.version}")
        if self.geometry_detail < 1:
            raise ValueError(f"geometry_detail must be at least 1, got {self.geometry_detail}")
        if self.consume_duplicate_buffer < 0:
            raise ValueError(f"consume_duplicate_buffer must not be negative, got {self.consume_duplicate_buffer}")
        if self.output_geometry not in (POLYGON, LINESTRING):
            raise ValueError(f"Unknown output geometry: {self.output_geometry}")
        if self.target_alt_unit not in (None, FEET, METERS):
            raise ValueError(f"Unknown target altitude unit: {self.target_alt_unit}")
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        return self
