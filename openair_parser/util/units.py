"""Unit conversion utilities for airspace limits and distances.

Handles the units found in OpenAIR airspace definitions:
- Altitude: feet (FT), meters (M), flight levels (FL)
- Reference datum: mean sea level (MSL), ground (GND), standard atmosphere (STD)
- Distance: nautical miles (NM), meters, kilometers
"""

from dataclasses import dataclass
from typing import Dict, Union
import logging

logger = logging.getLogger(__name__)


# Conversion constants
FEET_TO_METERS = 0.3048
METERS_TO_FEET = 1.0 / FEET_TO_METERS
NAUTICAL_MILES_TO_METERS = 1852.0
NAUTICAL_MILES_TO_KILOMETERS = NAUTICAL_MILES_TO_METERS / 1000.0
FLIGHT_LEVEL_TO_FEET = 100.0

# Altitude units
FEET = 'FT'
METERS = 'M'
FLIGHT_LEVEL = 'FL'
ALTITUDE_UNITS = (FEET, METERS, FLIGHT_LEVEL)

# Reference datums
MAIN_SEA_LEVEL = 'MSL'
GROUND = 'GND'
STANDARD_ATMOSPHERE = 'STD'

Number = Union[int, float]


@dataclass(frozen=True)
class Altitude:
    """Represents an airspace limit with unit and reference datum.

    Example:
        alt = Altitude(2500, 'FT', 'MSL')
        print(alt.to_feet())  # 2500
        print(Altitude(65, 'FL', 'STD').to_feet())  # 6500.0
    """

    value: Number
    unit: str  # 'FT', 'M' or 'FL'
    reference_datum: str  # 'MSL', 'GND' or 'STD'

    @classmethod
    def surface(cls) -> 'Altitude':
        """Ground level, i.e. "GND"."""
        return cls(value=0, unit=FEET, reference_datum=GROUND)

    @classmethod
    def unlimited(cls, flight_level: int) -> 'Altitude':
        """Unlimited ceiling expressed as a flight level."""
        return cls(value=flight_level, unit=FLIGHT_LEVEL, reference_datum=STANDARD_ATMOSPHERE)

    def to_feet(self) -> float:
        """Normalize to feet. Flight levels are treated as hundreds of feet."""
        if self.unit == FEET:
            return self.value
        elif self.unit == METERS:
            return self.value * METERS_TO_FEET
        elif self.unit == FLIGHT_LEVEL:
            return self.value * FLIGHT_LEVEL_TO_FEET
        else:
            raise ValueError(f"Unknown unit: {self.unit}")

    def convert(self, target_unit: str) -> 'Altitude':
        """Convert between feet and meters. Flight levels are never converted."""
        if self.unit == target_unit or self.unit == FLIGHT_LEVEL:
            return self
        if self.unit == FEET and target_unit == METERS:
            return Altitude(ft2m(self.value), METERS, self.reference_datum)
        if self.unit == METERS and target_unit == FEET:
            return Altitude(m2ft(self.value), FEET, self.reference_datum)
        raise ValueError(f"Unit conversion between '{self.unit}' and '{target_unit}' not supported")

    def rounded(self) -> 'Altitude':
        return Altitude(int(round(self.value)), self.unit, self.reference_datum)

    def as_dict(self) -> Dict[str, Union[Number, str]]:
        return {'value': self.value, 'unit': self.unit, 'referenceDatum': self.reference_datum}

    @classmethod
    def from_dict(cls, data: Dict) -> 'Altitude':
        return cls(value=data['value'], unit=data['unit'], reference_datum=data['referenceDatum'])

    def to_openair(self) -> str:
        """Render as an OpenAIR altitude limit, e.g. "FL65", "GND" or "2500FT AMSL"."""
        if self.unit == FLIGHT_LEVEL:
            return f"FL{format_number(self.value)}"
        if self.reference_datum == GROUND and self.value == 0:
            return "GND"
        if self.reference_datum == MAIN_SEA_LEVEL:
            return f"{format_number(self.value)}{self.unit} AMSL"
        if self.reference_datum == GROUND:
            return f"{format_number(self.value)}{self.unit} AGL"
        return f"{format_number(self.value)}{self.unit} {self.reference_datum}"


def parse_number(value: str) -> Number:
    """Parse a numeric string, keeping integral values as int."""
    number = float(value)
    if number.is_integer() and '.' not in value:
        return int(number)
    return number


def format_number(value: Number) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def ft2m(feet: float) -> float:
    """Convert feet to meters."""
    return feet * FEET_TO_METERS


def m2ft(meters: float) -> float:
    """Convert meters to feet."""
    return meters * METERS_TO_FEET


def nm2m(nm: float) -> float:
    """Convert nautical miles to meters."""
    return nm * NAUTICAL_MILES_TO_METERS


def nm2km(nm: float) -> float:
    """Convert nautical miles to kilometers."""
    return nm * NAUTICAL_MILES_TO_KILOMETERS
