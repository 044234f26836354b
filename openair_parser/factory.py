"""Builds an Airspace from one validated token block."""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import logging

from .airspace import Airspace
from .config import ParserConfig, VERSION_2
from .errors import BuildError
from .tokens import Token, TokenType
from .util.geometry import (GeometryConfig, GeometryGenerator, Position, bearing, buffer_line,
                            haversine_distance)
from .util.units import nm2km, nm2m

logger = logging.getLogger(__name__)

T = TokenType


@dataclass
class BuildState:
    """Everything a block build mutates, owned by a single build call."""
    airspace: Airspace
    current_center: Optional[Position] = None
    clockwise: bool = True  # consumed by the next DB/DA
    airway_width: Optional[float] = None
    centerline: List[Position] = field(default_factory=list)
    is_airway: bool = False
    has_build_tokens: bool = False


class AirspaceFactory:
    """Dispatches each token of a block to its handler.

    Scalar directives set airspace properties, DP/DC/DB/DA grow the ring and
    VW/DY describe an airway that is buffered into a ring at the end.
    """

    def __init__(self, config: ParserConfig = None):
        self.config = config or ParserConfig()
        self.generator = GeometryGenerator(GeometryConfig(steps=self.config.geometry_detail))
        self.handlers: Dict[TokenType, Callable[[BuildState, Token], None]] = {
            T.COMMENT: self.ignore,
            T.BLANK: self.ignore,
            T.SKIPPED: self.ignore,
            T.EOF: self.ignore,
            T.AC: self.handle_class,
            T.AN: self.handle_name,
            T.AI: self.handle_identifier,
            T.AY: self.handle_type,
            T.AF: self.handle_frequency,
            T.AG: self.handle_frequency_name,
            T.AH: self.handle_upper_ceiling,
            T.AL: self.handle_lower_ceiling,
            T.AX: self.handle_transponder_code,
            T.TP: self.handle_transponder_code,
            T.AA: self.handle_activation,
            T.DP: self.handle_point,
            T.VX: self.handle_center,
            T.VD: self.handle_direction,
            T.DC: self.handle_circle,
            T.DB: self.handle_arc_endpoints,
            T.DA: self.handle_arc_angles,
            T.VW: self.handle_airway_width,
            T.DY: self.handle_airway_segment,
        }

    def build(self, block: List[Token]) -> Optional[Airspace]:
        """Build the airspace, or return None if the block has no directives."""
        state = BuildState(airspace=Airspace(consumed_tokens=list(block)))
        for token in block:
            if not token.is_ignored:
                state.has_build_tokens = True
            self.handlers[token.type](state, token)

        if not state.has_build_tokens:
            return None
        if state.is_airway:
            self.build_airway(state, block)
        if self.config.version == VERSION_2 and state.airspace.by_notam is None:
            state.airspace.by_notam = False

        logger.debug(f"Built airspace '{state.airspace.name}' with {len(state.airspace.coordinates)} coordinates")
        return state.airspace

    def ignore(self, state: BuildState, token: Token) -> None:
        pass

    # properties

    def handle_class(self, state: BuildState, token: Token) -> None:
        state.airspace.airspace_class = token.metadata['class']

    def handle_name(self, state: BuildState, token: Token) -> None:
        state.airspace.name = token.metadata['name']

    def handle_identifier(self, state: BuildState, token: Token) -> None:
        state.airspace.identifier = token.metadata['identifier']

    def handle_type(self, state: BuildState, token: Token) -> None:
        state.airspace.type = token.metadata['type']

    def handle_frequency(self, state: BuildState, token: Token) -> None:
        state.airspace.frequency['value'] = token.metadata['frequency']

    def handle_frequency_name(self, state: BuildState, token: Token) -> None:
        state.airspace.frequency['name'] = token.metadata['name']

    def handle_transponder_code(self, state: BuildState, token: Token) -> None:
        state.airspace.transponder_code = token.metadata['code']

    def handle_upper_ceiling(self, state: BuildState, token: Token) -> None:
        state.airspace.upper_ceiling = token.metadata['altitude']
        self.enforce_sane_limits(state, token)

    def handle_lower_ceiling(self, state: BuildState, token: Token) -> None:
        state.airspace.lower_ceiling = token.metadata['altitude']
        self.enforce_sane_limits(state, token)

    def enforce_sane_limits(self, state: BuildState, token: Token) -> None:
        lower = state.airspace.lower_ceiling
        upper = state.airspace.upper_ceiling
        if lower is None or upper is None:
            return
        # limits with different reference datums cannot be compared
        if lower.reference_datum != upper.reference_datum:
            return
        if lower.to_feet() > upper.to_feet():
            raise BuildError("Lower limit must be less than upper limit", line_number=token.line_number)

    def handle_activation(self, state: BuildState, token: Token) -> None:
        airspace = state.airspace
        if token.metadata['by_notam']:
            if airspace.activation_times:
                raise BuildError("Additional activation times are not allowed with BY NOTAM activation.",
                                 line_number=token.line_number)
            airspace.by_notam = True
            return
        if airspace.by_notam:
            raise BuildError("Additional activation times are not allowed with BY NOTAM activation.",
                             line_number=token.line_number)
        airspace.activation_times.append(token.metadata['activation'])

    # geometry

    def handle_point(self, state: BuildState, token: Token) -> None:
        state.airspace.coordinates.append(token.metadata['coordinate'])

    def handle_center(self, state: BuildState, token: Token) -> None:
        state.current_center = token.metadata['coordinate']

    def handle_direction(self, state: BuildState, token: Token) -> None:
        state.clockwise = token.metadata['clockwise']

    def require_center(self, state: BuildState, token: Token) -> Position:
        if state.current_center is None:
            raise BuildError("Preceding VX token not found.", line_number=token.line_number)
        return state.current_center

    def handle_circle(self, state: BuildState, token: Token) -> None:
        center = self.require_center(state, token)
        circle = self.generator.generate_circle(center, nm2m(token.metadata['radius']))
        # a circle is the only geometry of its airspace
        state.airspace.coordinates = circle

    def handle_arc_endpoints(self, state: BuildState, token: Token) -> None:
        center = self.require_center(state, token)
        start = token.metadata['start']
        end = token.metadata['end']
        clockwise = state.clockwise
        state.clockwise = True
        if not clockwise:
            start, end = end, start

        radius_km = haversine_distance(center, start) / 1000.0
        if radius_km == 0:
            raise BuildError("Arc radius must be greater than zero.", line_number=token.line_number)

        arc = self.generator.generate_arc(center, radius_km, bearing(center, start), bearing(center, end))
        # declared endpoints win over computed ones
        arc[0] = start
        arc[-1] = end
        if not clockwise:
            arc.reverse()
        state.airspace.coordinates.extend(arc)

    def handle_arc_angles(self, state: BuildState, token: Token) -> None:
        center = self.require_center(state, token)
        start_bearing = token.metadata['start_bearing']
        end_bearing = token.metadata['end_bearing']
        clockwise = state.clockwise
        state.clockwise = True
        if not clockwise:
            start_bearing, end_bearing = end_bearing, start_bearing

        radius_km = nm2km(token.metadata['radius'])
        if radius_km == 0:
            raise BuildError("Arc radius must be greater than zero.", line_number=token.line_number)

        arc = self.generator.generate_arc(center, radius_km, start_bearing, end_bearing)
        if not clockwise:
            arc.reverse()
        state.airspace.coordinates.extend(arc)

    def handle_airway_width(self, state: BuildState, token: Token) -> None:
        state.is_airway = True
        state.airway_width = token.metadata['width']

    def handle_airway_segment(self, state: BuildState, token: Token) -> None:
        state.is_airway = True
        state.centerline.append(token.metadata['coordinate'])

    def build_airway(self, state: BuildState, block: List[Token]) -> None:
        line_number = next(token.line_number for token in reversed(block) if not token.is_ignored)
        if not state.airway_width or len(state.centerline) < 2:
            raise BuildError("Airway definition is missing required tokens.", line_number=line_number)
        try:
            state.airspace.coordinates = buffer_line(state.centerline, nm2m(state.airway_width))
        except ValueError as e:
            raise BuildError(f"Failed to create polygon from airway definition. {e}",
                             line_number=line_number) from e
