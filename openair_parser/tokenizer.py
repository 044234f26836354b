"""Turns OpenAIR text into a list of typed tokens, one per line.

Every line is classified by its directive, inline comments are removed and
the field value is parsed into token metadata. The first line that cannot be
read aborts tokenization with a GrammarError.
"""

import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
import logging

from .config import ParserConfig
from .errors import GrammarError
from .tokens import Token, TokenType
from .util.geometry import CoordinateConverter, normalize_bearing
from .util.units import (Altitude, FEET, METERS, FLIGHT_LEVEL, GROUND, MAIN_SEA_LEVEL,
                         STANDARD_ATMOSPHERE, parse_number)

logger = logging.getLogger(__name__)

T = TokenType

re_comment = re.compile(r"^\*.*$")
re_skipped = re.compile(r"^(AT|TO|TC|SP|SB|V Z=\d).*$")
re_inline_comment = re.compile(r"\s?\*.*")

# Directive lines, tried in this order
LINE_PATTERNS = [
    (T.AC, re.compile(r"^AC\s+(?P<value>.*)$")),
    (T.AN, re.compile(r"^AN\s+(?P<value>.*)$")),
    (T.AH, re.compile(r"^AH\s+(?P<value>.*)$")),
    (T.AL, re.compile(r"^AL\s+(?P<value>.*)$")),
    (T.DP, re.compile(r"^DP\s+(?P<value>.*)$")),
    (T.VD, re.compile(r"^V\s+D=(?P<value>.*)$")),
    (T.VX, re.compile(r"^V\s+X=(?P<value>.*)$")),
    (T.VW, re.compile(r"^V\s+W=(?P<value>.*)$")),
    (T.DC, re.compile(r"^DC\s+(?P<value>.*)$")),
    (T.DB, re.compile(r"^DB\s+(?P<value>.*)$")),
    (T.DA, re.compile(r"^DA\s+(?P<value>.*)$")),
    (T.DY, re.compile(r"^DY\s+(?P<value>.*)$")),
    (T.AI, re.compile(r"^AI\s+(?P<value>.*)$")),
    (T.AY, re.compile(r"^AY\s+(?P<value>.*)$")),
    (T.AF, re.compile(r"^AF\s+(?P<value>.*)$")),
    (T.AG, re.compile(r"^AG\s+(?P<value>.*)$")),
    (T.AX, re.compile(r"^AX\s+(?P<value>.*)$")),
    (T.AA, re.compile(r"^AA\s+(?P<value>.*)$")),
    (T.TP, re.compile(r"^TP\s+(?P<value>.*)$")),
]

re_number = re.compile(r"^\d+(\.\d+)?$")
re_frequency = re.compile(r"^\d{3}\.\d{3}$")
re_transponder = re.compile(r"^[0-7]{4}$")
re_direction = re.compile(r"^[+-]$")
re_arc_angles = re.compile(r"^(?P<radius>\d+(?:\.\d+)?)\s*,\s*(?P<start>-?\d+(?:\.\d+)?)\s*,\s*(?P<end>-?\d+(?:\.\d+)?)$")

# Altitude limits, e.g. "2500ft AMSL", "FL65", "GND" or "UNL"
re_alt_default = re.compile(r"^(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>FT|ft|M|m)\s*(?P<datum>AMSL|MSL|AGL|GND|SFC)$")
re_alt_flight_level = re.compile(r"^FL\s*(?P<value>\d{2,})$")
re_alt_surface = re.compile(r"^(GND|SFC)$")
re_alt_unlimited = re.compile(r"^(UNL|UNLIMITED)$")

DATUMS = {
    'AMSL': MAIN_SEA_LEVEL,
    'MSL': MAIN_SEA_LEVEL,
    'AGL': GROUND,
    'GND': GROUND,
    'SFC': GROUND,
}

NONE_ACTIVATION = 'NONE'


class Tokenizer:
    """Reads OpenAIR text and returns the token list, terminated by EOF."""

    def __init__(self, config: ParserConfig = None):
        self.config = config or ParserConfig()
        self.readers: Dict[TokenType, Callable[[str], Dict[str, Any]]] = {
            T.AC: self.read_class,
            T.AN: self.read_text('name'),
            T.AH: self.read_altitude_limit,
            T.AL: self.read_altitude_limit,
            T.DP: self.read_coordinate,
            T.VD: self.read_direction,
            T.VX: self.read_coordinate,
            T.VW: self.read_width,
            T.DC: self.read_radius,
            T.DB: self.read_arc_endpoints,
            T.DA: self.read_arc_angles,
            T.DY: self.read_coordinate,
            T.AI: self.read_text('identifier'),
            T.AY: self.read_type,
            T.AF: self.read_frequency,
            T.AG: self.read_text('name'),
            T.AX: self.read_transponder_code,
            T.AA: self.read_activation,
            T.TP: self.read_transponder_code,
        }

    def tokenize_file(self, filename: str) -> List[Token]:
        with open(filename, encoding='utf-8') as fd:
            return self.tokenize(fd.read())

    def tokenize(self, text: str) -> List[Token]:
        tokens = []
        line_number = 0
        for line_number, raw in enumerate(text.splitlines(), start=1):
            tokens.append(self.tokenize_line(raw.strip(), line_number))
        tokens.append(Token(T.EOF, '', line_number))
        logger.debug(f"Tokenized {line_number} lines")
        return tokens

    def tokenize_line(self, line: str, line_number: int) -> Token:
        if re_comment.match(line):
            return Token(T.COMMENT, line, line_number)
        if re_skipped.match(line):
            return Token(T.SKIPPED, line, line_number)
        if not line:
            return Token(T.BLANK, line, line_number)

        for token_type, pattern in LINE_PATTERNS:
            if pattern.match(line):
                # the verbatim line is kept, field values never contain comments
                stripped = re_inline_comment.sub('', line)
                match = pattern.match(stripped)
                value = match.group('value').strip() if match else ''
                try:
                    metadata = self.readers[token_type](value)
                except ValueError as e:
                    raise GrammarError(str(e), line_number=line_number) from e
                return Token(token_type, line, line_number, metadata)

        raise GrammarError(f"Failed to read line {line_number}. Unknown syntax.", line_number=line_number)

    # field readers

    def read_text(self, key: str) -> Callable[[str], Dict[str, Any]]:
        def reader(value: str) -> Dict[str, Any]:
            if not value:
                raise ValueError(f"Missing value for '{key}'")
            return {key: value}
        return reader

    def read_class(self, value: str) -> Dict[str, Any]:
        if value not in self.config.airspace_classes:
            raise ValueError(f"Unknown airspace class '{value}'")
        return {'class': value}

    def read_type(self, value: str) -> Dict[str, Any]:
        if not value:
            raise ValueError("Missing airspace type")
        if self.config.allowed_types and value not in self.config.allowed_types:
            raise ValueError(f"Unknown airspace type '{value}'")
        return {'type': value}

    def read_frequency(self, value: str) -> Dict[str, Any]:
        if not re_frequency.match(value):
            raise ValueError(f"Unknown frequency definition '{value}'")
        return {'frequency': value}

    def read_transponder_code(self, value: str) -> Dict[str, Any]:
        if not re_transponder.match(value):
            raise ValueError(f"Unknown transponder code definition '{value}'")
        return {'code': value}

    def read_coordinate(self, value: str) -> Dict[str, Any]:
        return {'coordinate': CoordinateConverter.parse(value)}

    def read_direction(self, value: str) -> Dict[str, Any]:
        if not re_direction.match(value):
            raise ValueError(f"Unknown arc direction '{value}'")
        return {'clockwise': value == '+'}

    def read_width(self, value: str) -> Dict[str, Any]:
        if not re_number.match(value):
            raise ValueError(f"Unknown airway width definition '{value}'")
        return {'width': float(value)}

    def read_radius(self, value: str) -> Dict[str, Any]:
        if not re_number.match(value):
            raise ValueError(f"Unknown circle radius definition '{value}'")
        return {'radius': float(value)}

    def read_arc_endpoints(self, value: str) -> Dict[str, Any]:
        parts = value.split(',')
        if len(parts) != 2:
            raise ValueError(f"Unknown arc definition '{value}'")
        return {
            'start': CoordinateConverter.parse(parts[0]),
            'end': CoordinateConverter.parse(parts[1]),
        }

    def read_arc_angles(self, value: str) -> Dict[str, Any]:
        match = re_arc_angles.match(value)
        if not match:
            raise ValueError(f"Unknown arc definition '{value}'")
        return {
            'radius': float(match.group('radius')),
            'start_bearing': normalize_bearing(float(match.group('start'))),
            'end_bearing': normalize_bearing(float(match.group('end'))),
        }

    def read_altitude_limit(self, value: str) -> Dict[str, Any]:
        return {'altitude': self.read_altitude(value)}

    def read_altitude(self, value: str) -> Altitude:
        match = re_alt_default.match(value)
        if match:
            unit = FEET if match.group('unit').upper() == 'FT' else METERS
            altitude = Altitude(parse_number(match.group('value')), unit, DATUMS[match.group('datum')])
            if self.config.target_alt_unit:
                altitude = altitude.convert(self.config.target_alt_unit)
            if self.config.round_alt_values:
                altitude = altitude.rounded()
            return altitude

        match = re_alt_flight_level.match(value)
        if match:
            return Altitude(int(match.group('value')), FLIGHT_LEVEL, STANDARD_ATMOSPHERE)

        if re_alt_surface.match(value):
            return Altitude.surface()

        if re_alt_unlimited.match(value):
            return Altitude.unlimited(self.config.unlimited)

        raise ValueError(f"Unknown altitude definition '{value}'")

    def read_activation(self, value: str) -> Dict[str, Any]:
        parts = value.split('/')
        if len(parts) != 2:
            raise ValueError(f"Invalid activation times format '{value}'. "
                             f"Start and end must be in ISO 8601 date-time format or NONE.")
        start = parse_activation_time(parts[0].strip())
        end = parse_activation_time(parts[1].strip())
        if start is not None and end is not None and start >= end:
            raise ValueError(f"Invalid activation times format '{value}'. Start date must be before end date.")
        if start is None and end is None:
            return {'by_notam': True, 'activation': None}

        activation = {}
        if start is not None:
            activation['start'] = format_activation_time(start)
        if end is not None:
            activation['end'] = format_activation_time(end)
        return {'by_notam': False, 'activation': activation}


def parse_activation_time(value: str) -> Optional[datetime]:
    """Parse one side of an AA window; NONE yields None. Naive times are UTC."""
    if value == NONE_ACTIVATION:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        raise ValueError(f"Invalid activation time '{value}'. "
                         f"Start and end must be in ISO 8601 date-time format or NONE.")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_activation_time(value: datetime) -> str:
    return value.strftime('%Y-%m-%dT%H:%M:%SZ')
