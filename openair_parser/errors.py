"""Error types raised while parsing OpenAIR airspace definitions."""

from typing import List, Optional

from geojson import LineString

from .util.geometry import Position


class ParserError(Exception):
    """Base error for all parser failures.

    Carries the offending line number (if known), a readable message and,
    for geometry problems, a diagnostic line string of the ring together
    with any self-intersection points.
    """

    def __init__(self,
                 error_message: str,
                 line_number: Optional[int] = None,
                 geometry: Optional[LineString] = None,
                 self_intersections: Optional[List[Position]] = None):
        self.error_message = error_message
        self.line_number = line_number
        self.geometry = geometry
        self.self_intersections = self_intersections
        super().__init__(str(self))

    def __str__(self):
        if self.line_number is not None:
            return f"Error found at line {self.line_number}: {self.error_message}"
        return self.error_message


class GrammarError(ParserError):
    """Unknown syntax, invalid field value or invalid token order."""


class BuildError(ParserError):
    """Block cannot be turned into an airspace, e.g. an arc without center."""


class GeometryError(ParserError):
    """Airspace geometry is invalid and could not be repaired."""


class CompletenessError(ParserError):
    """Airspace lacks required properties or coordinates."""
